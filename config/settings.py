"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = "change-me-jwt-secret-key"       # HMAC secret for auth tokens
    jwt_expiry_seconds: int = 3600                      # 1 hour
    bcrypt_rounds: int = 10                             # bcrypt work factor

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./crud.db"

    # ── Uploads ──────────────────────────────────────────────────────────
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_image_extensions: List[str] = [".jpg", ".jpeg", ".png", ".gif", ".webp"]

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 3000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == "change-me-jwt-secret-key"
