"""
Blog API routes.

``GET /blogs`` is public; creating, updating and deleting require a Bearer
token, and updates/deletes additionally require ownership of the record.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_image_storage, get_owned_blog
from auth.dependencies import get_current_identity
from auth.jwt import TokenClaims
from database.helpers import create_blog, delete_blog, list_blogs, update_blog
from database.models import Blog
from utils.errors import StoreFailure
from utils.schemas import (
    BlogCreatedResponse,
    BlogRecord,
    BlogUpdatedResponse,
    MessageResponse,
)
from utils.uploads import ImageStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["blogs"])


async def _store_image(storage: ImageStorage, image: Optional[UploadFile]) -> Optional[str]:
    # Browsers send an empty file part when no file was chosen.
    if image is None or not image.filename:
        return None
    return await storage.save(image)


@router.post("/blog", response_model=BlogCreatedResponse)
async def create_blog_route(
    title: str = Form(...),
    description: str = Form(...),
    image: Optional[UploadFile] = File(None),
    identity: TokenClaims = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
    storage: ImageStorage = Depends(get_image_storage),
) -> Dict[str, Any]:
    filename = await _store_image(storage, image)
    try:
        blog = await create_blog(session, identity.id, title, description, filename)
    except StoreFailure:
        if filename:
            storage.delete(filename)
        raise

    logger.info("User %s created blog %s", identity.id, blog.id)
    return {"message": "Blog created successfully", "blogId": blog.id}


@router.get("/blogs", response_model=List[BlogRecord])
async def list_blogs_route(session: AsyncSession = Depends(db_session)) -> List[Dict[str, Any]]:
    return [blog.to_dict() for blog in await list_blogs(session)]


@router.put("/blog/{blog_id}", response_model=BlogUpdatedResponse)
async def update_blog_route(
    blog: Blog = Depends(get_owned_blog),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(db_session),
    storage: ImageStorage = Depends(get_image_storage),
) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if title is not None:
        fields["title"] = title
    if description is not None:
        fields["description"] = description

    filename = await _store_image(storage, image)
    if filename:
        fields["image"] = filename

    try:
        await update_blog(session, blog.id, fields)
    except StoreFailure:
        if filename:
            storage.delete(filename)
        raise

    logger.info("Updated blog %s (fields: %s)", blog.id, ", ".join(sorted(fields)) or "none")
    return {"message": "Blog updated successfully", "updatedImage": filename}


@router.delete("/blog/{blog_id}", response_model=MessageResponse)
async def delete_blog_route(
    blog: Blog = Depends(get_owned_blog),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    await delete_blog(session, blog.id)
    logger.info("Deleted blog %s", blog.id)
    return {"message": "Blog deleted successfully"}
