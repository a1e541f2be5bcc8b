"""
JWT-style token creation and verification.

Tokens are URL-safe base64-encoded JSON payloads signed with HMAC-SHA256::

    <base64(payload)>.<hex signature>

The payload carries ``id``, ``username``, ``iat`` and ``exp``.  A token is
accepted while ``now <= exp``; expired, tampered and malformed tokens all
fail the same way, with ``InvalidToken``.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Callable, Dict

from pydantic import BaseModel, ValidationError

from utils.errors import InvalidToken


class TokenClaims(BaseModel):
    id: int
    username: str
    iat: int
    exp: int


class TokenIssuer:
    def __init__(
        self,
        secret: str,
        expiry_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: int, username: str) -> str:
        """Create a signed token for ``user_id`` / ``username``."""
        issued_at = int(self._clock())
        payload: Dict[str, Any] = {
            "id": user_id,
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify token and return its claims.

        Raises ``InvalidToken`` on any failure.
        """
        parts = token.split(".", 1)
        if len(parts) != 2:
            raise InvalidToken()
        try:
            raw = urlsafe_b64decode(parts[0].encode())
        except (binascii.Error, ValueError):
            raise InvalidToken() from None
        if not hmac.compare_digest(parts[1].encode(), self._sign(raw).encode()):
            raise InvalidToken()
        try:
            claims = TokenClaims.model_validate_json(raw)
        except ValidationError:
            raise InvalidToken() from None
        if self._clock() > claims.exp:
            raise InvalidToken()
        return claims
