"""
FastAPI dependencies for authentication.

``get_current_identity`` is the gate in front of every protected route:

* no ``Authorization`` header, or not ``Bearer <token>`` → ``AuthenticationRequired``
* token fails verification (signature, payload, expiry) → ``InvalidToken``
* otherwise the verified claims are returned to the handler
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from auth.jwt import TokenClaims, TokenIssuer
from auth.password import PasswordHasher
from utils.errors import AuthenticationRequired


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` value."""
    if not authorization:
        raise AuthenticationRequired()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationRequired()
    return token


async def get_current_identity(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Verify the Bearer token and return the caller's claims."""
    return issuer.verify(bearer_token(authorization))
