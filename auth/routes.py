"""
Auth API routes — register, login, profile.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session
from auth.dependencies import get_current_identity, get_password_hasher, get_token_issuer
from auth.jwt import TokenClaims, TokenIssuer
from auth.password import PasswordHasher
from database.helpers import create_user, find_user_by_username
from utils.errors import InvalidCredentials
from utils.schemas import (
    CredentialsRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=MessageResponse)
async def register(
    req: CredentialsRequest,
    session: AsyncSession = Depends(db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> Dict[str, Any]:
    """Register a new user."""
    password_hash = await hasher.hash_async(req.password)
    user = await create_user(session, req.username, password_hash)
    logger.info("Registered user %s (%s)", user.username, user.id)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginResponse)
async def login(
    req: CredentialsRequest,
    session: AsyncSession = Depends(db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Login with username + password."""
    user = await find_user_by_username(session, req.username)

    # Unknown user and wrong password are reported identically.
    if user is None or not await hasher.verify_async(req.password, user.password):
        raise InvalidCredentials()

    token = issuer.issue(user.id, user.username)
    logger.info("Login: %s (%s)", user.username, user.id)
    return {"token": token}


@router.get("/profile", response_model=ProfileResponse)
async def profile(identity: TokenClaims = Depends(get_current_identity)) -> Dict[str, Any]:
    return {"message": "Welcome to your profile!", "user": identity}
