"""
Database helper functions — the credential store and the blog record store.

Every helper takes the request's ``AsyncSession`` and commits its own
write, so a successful return means the change is durable.  Backend errors
are logged here and surfaced as ``StoreFailure`` without their raw text.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Blog, User
from utils.errors import DuplicateUsername, NotFound, StoreFailure

logger = logging.getLogger(__name__)

UPDATABLE_BLOG_FIELDS = ("title", "description", "image")


@asynccontextmanager
async def _store_operation(session: AsyncSession, action: str) -> AsyncIterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store failure while %s", action)
        await session.rollback()
        raise StoreFailure() from exc


# ── Credential store ────────────────────────────────────────────────


async def create_user(session: AsyncSession, username: str, password_hash: str) -> User:
    """
    Insert a new user.

    The ``UNIQUE`` constraint on ``users.username`` is the arbiter: of two
    concurrent registrations for one name, the second insert fails with an
    ``IntegrityError`` and becomes ``DuplicateUsername``.
    """
    if await find_user_by_username(session, username) is not None:
        raise DuplicateUsername()

    user = User(username=username, password=password_hash)
    try:
        async with _store_operation(session, "creating user"):
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateUsername() from None
    except DuplicateUsername:
        logger.info("Registration rejected, username taken: %s", username)
        raise
    return user


async def find_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    async with _store_operation(session, "looking up user"):
        result = await session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()


# ── Blog record store ───────────────────────────────────────────────


async def create_blog(
    session: AsyncSession,
    owner_id: int,
    title: str,
    description: str,
    image: Optional[str] = None,
) -> Blog:
    blog = Blog(userid=owner_id, title=title, description=description, image=image)
    async with _store_operation(session, "creating blog"):
        session.add(blog)
        await session.commit()
    return blog


async def list_blogs(session: AsyncSession) -> List[Blog]:
    """All blog records in creation order."""
    async with _store_operation(session, "listing blogs"):
        result = await session.execute(select(Blog).order_by(Blog.id))
        return list(result.scalars().all())


async def get_blog(session: AsyncSession, blog_id: int) -> Blog:
    async with _store_operation(session, "loading blog"):
        blog = await session.get(Blog, blog_id)
    if blog is None:
        raise NotFound()
    return blog


async def update_blog(session: AsyncSession, blog_id: int, fields: Dict[str, Any]) -> Blog:
    """
    Partial update: only keys present in ``fields`` change.

    A supplied ``image`` replaces the old reference outright; the previous
    file is left on disk.
    """
    unknown = set(fields) - set(UPDATABLE_BLOG_FIELDS)
    if unknown:
        raise ValueError(f"Not updatable: {sorted(unknown)}")

    blog = await get_blog(session, blog_id)
    async with _store_operation(session, "updating blog"):
        for name, value in fields.items():
            setattr(blog, name, value)
        await session.commit()
    return blog


async def delete_blog(session: AsyncSession, blog_id: int) -> None:
    blog = await get_blog(session, blog_id)
    async with _store_operation(session, "deleting blog"):
        await session.delete(blog)
        await session.commit()
