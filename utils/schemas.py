"""
Pydantic schemas for request bodies and responses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from auth.jwt import TokenClaims


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class CredentialsRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        # bcrypt rejects input longer than 72 bytes.
        if len(value.encode()) > 72:
            raise ValueError("password cannot be longer than 72 bytes")
        return value


class LoginResponse(BaseModel):
    token: str


class ProfileResponse(BaseModel):
    message: str
    user: TokenClaims


# ═══════════════════════════════════════════════════════════════════════════════
# Blogs
# ═══════════════════════════════════════════════════════════════════════════════


class BlogRecord(BaseModel):
    id: int
    userid: int
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class BlogCreatedResponse(BaseModel):
    message: str
    blogId: int


class BlogUpdatedResponse(BaseModel):
    message: str
    updatedImage: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
