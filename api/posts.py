"""
Post API routes: list, create, update and delete the caller's posts.

Route prefix: /posts
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user
from database.helpers import (
    create_post,
    delete_post,
    delete_posts_for_user,
    get_post,
    list_posts,
    update_post,
)
from database.models import Post, User
from utils.errors import ForbiddenError, NotFoundError, PolicyError, ValidationError
from utils.schemas import (
    DeletedEnvelope,
    PostCreate,
    PostEnvelope,
    PostListEnvelope,
    PostOut,
    PostUpdate,
)

logger = logging.getLogger(__name__)

POSTS_PATH = "/posts"

router = APIRouter(prefix=POSTS_PATH, tags=["posts"])


async def _owned_post(session: AsyncSession, post_id: str, user: User) -> Post:
    """Fetch a post and check it belongs to ``user``."""
    post = await get_post(session, post_id)
    if post is None:
        raise NotFoundError(f"No post with id {post_id}")
    if post.user_id != user.user_id:
        logger.info("User %s denied access to post %s", user.user_id, post_id)
        raise ForbiddenError("This post does not belong to you")
    return post


@router.get("", response_model=PostListEnvelope)
async def get_posts(
    q: Optional[str] = Query(default=None, description="Substring to search for in the content"),
    time_sort: str = Query(default="desc", alias="timeSort"),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    posts = await list_posts(
        session,
        user.user_id,
        search=q,
        ascending=time_sort == "asc",
    )
    return {"status": "success", "posts": [PostOut.from_post(p) for p in posts]}


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def add_post(
    req: PostCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    if req.content is None or not req.content.strip():
        raise ValidationError("content is required")

    post = await create_post(session, user, req.content)
    logger.info("User %s created post %s", user.user_id, post.post_id)
    return {"status": "success", "post": PostOut.from_post(post)}


@router.delete("", response_model=PostListEnvelope)
@router.delete("/", response_model=PostListEnvelope, include_in_schema=False)
async def delete_all_posts(
    request: Request,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """
    Delete every post the caller owns.

    Only the exact ``/posts`` path is honoured: ``/posts/`` is usually a
    single-post delete with the id left off, so it is refused.
    """
    if request.url.path != POSTS_PATH:
        raise PolicyError(
            f"Delete all posts via '{POSTS_PATH}', not '{request.url.path}'; "
            "this guards against a single delete with a missing id"
        )

    removed = await delete_posts_for_user(session, user.user_id)
    logger.info("User %s deleted all posts (%d removed)", user.user_id, removed)
    posts = await list_posts(session, user.user_id)
    return {"status": "success", "posts": [PostOut.from_post(p) for p in posts]}


@router.delete("/{post_id}", response_model=DeletedEnvelope)
async def delete_one_post(
    post_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    post = await _owned_post(session, post_id, user)
    await delete_post(session, post)
    logger.info("User %s deleted post %s", user.user_id, post_id)
    return {"status": "success", "data": None}


@router.patch("/{post_id}", response_model=PostEnvelope)
async def update_one_post(
    post_id: str,
    patch: PostUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    post = await _owned_post(session, post_id, user)
    changes = patch.model_dump(exclude_unset=True)
    post = await update_post(session, post, changes)
    logger.info("User %s updated post %s (%s)", user.user_id, post_id, ", ".join(changes) or "no fields")
    return {"status": "success", "post": PostOut.from_post(post)}
