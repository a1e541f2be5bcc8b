"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_current_identity
from auth.jwt import TokenClaims
from database.helpers import get_blog
from database.models import Blog
from database.session import get_db_session
from utils.errors import Forbidden
from utils.uploads import ImageStorage


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


async def get_owned_blog(
    blog_id: int,
    identity: TokenClaims = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Blog:
    """
    Load the target blog for a mutation by its owner.

    Runs after token verification; a missing record is reported as not
    found before ownership is looked at.
    """
    blog = await get_blog(session, blog_id)
    if blog.userid != identity.id:
        raise Forbidden()
    return blog
