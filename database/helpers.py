"""
Database helper functions: look up, create and change users and posts.

Every helper takes the request's ``AsyncSession`` and flushes its own
changes; committing is left to the session dependency.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Post, User
from utils.errors import ConflictError

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── Users ──────────────────────────────────────────────────────────────────


async def get_user(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    uid = _to_uuid(user_id)
    if uid is None:
        return None
    return await session.get(User, uid)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    email: str,
    name: str,
    password_hash: str,
) -> User:
    """Insert a new user; a duplicate email raises ``ConflictError``."""
    user = User(
        user_id=uuid.uuid4(),
        email=email,
        name=name,
        password_hash=password_hash,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError("Email is already registered") from exc
    return user


async def update_user_name(session: AsyncSession, user: User, name: str) -> User:
    user.name = name
    user.updated_at = _now()
    await session.flush()
    return user


async def update_user_password(session: AsyncSession, user: User, password_hash: str) -> User:
    user.password_hash = password_hash
    user.updated_at = _now()
    await session.flush()
    return user


# ── Posts ──────────────────────────────────────────────────────────────────


async def list_posts(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    search: Optional[str] = None,
    ascending: bool = False,
) -> List[Post]:
    """
    Return the user's posts ordered by creation time.

    ``search`` is matched as a literal substring of the content; LIKE
    wildcards in it are escaped.
    """
    stmt = select(Post).where(Post.user_id == user_id)
    if search:
        stmt = stmt.where(Post.content.contains(search, autoescape=True))
    order = Post.created_at.asc() if ascending else Post.created_at.desc()
    stmt = stmt.order_by(order)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_post(session: AsyncSession, user: User, content: str) -> Post:
    post = Post(post_id=uuid.uuid4(), user=user, content=content)
    session.add(post)
    await session.flush()
    return post


async def get_post(session: AsyncSession, post_id: str | uuid.UUID) -> Optional[Post]:
    pid = _to_uuid(post_id)
    if pid is None:
        return None
    return await session.get(Post, pid)


async def update_post(session: AsyncSession, post: Post, changes: Dict[str, Any]) -> Post:
    for field, value in changes.items():
        setattr(post, field, value)
    post.updated_at = _now()
    await session.flush()
    return post


async def delete_post(session: AsyncSession, post: Post) -> None:
    await session.delete(post)
    await session.flush()


async def delete_posts_for_user(session: AsyncSession, user_id: uuid.UUID) -> int:
    """Delete every post owned by ``user_id``; returns the number removed."""
    result = await session.execute(
        delete(Post)
        .where(Post.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    await session.flush()
    return result.rowcount or 0
