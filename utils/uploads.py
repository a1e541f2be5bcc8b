"""
Local image storage for blog attachments.

Stored names are generated server-side (``<epoch ms>-<random hex><ext>``);
only the lower-cased extension of the client filename is kept, and it must
be on the allow-list.
"""

from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from utils.errors import InvalidUpload

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class ImageStorage:
    def __init__(
        self,
        directory: str | Path,
        allowed_extensions: Iterable[str],
        max_bytes: int,
    ) -> None:
        self.directory = Path(directory)
        self.allowed_extensions = {ext.lower() for ext in allowed_extensions}
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def extension_for(self, filename: Optional[str]) -> str:
        ext = Path(filename or "").suffix.lower()
        if ext not in self.allowed_extensions:
            allowed = ", ".join(sorted(self.allowed_extensions))
            raise InvalidUpload(f"Image type not allowed (expected one of: {allowed})")
        return ext

    def generate_name(self, ext: str) -> str:
        return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"

    async def save(self, upload: UploadFile) -> str:
        """Write ``upload`` to disk and return the stored filename."""
        ext = self.extension_for(upload.filename)
        self.ensure_directory()
        name = self.generate_name(ext)
        path = self.directory / name

        written = 0
        try:
            with path.open("xb") as fh:
                while True:
                    chunk = await upload.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise InvalidUpload(
                            f"Image exceeds the {self.max_bytes} byte limit"
                        )
                    fh.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        logger.info("Stored image %s (%d bytes)", name, written)
        return name

    def delete(self, name: str) -> None:
        """Remove a stored image; a missing file is ignored."""
        path = self.directory / Path(name).name
        if path.exists():
            path.unlink(missing_ok=True)
            logger.info("Removed image %s", name)
