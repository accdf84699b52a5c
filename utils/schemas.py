"""
Pydantic request / response schemas for the users and posts endpoints.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from database.models import Post, User


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps read back from SQLite are naive; they are stored in UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# Users: requests
# ═══════════════════════════════════════════════════════════════════════════════

# Fields are optional so that missing input reaches the handler's own
# checks and gets the same error envelope as an empty string.


class SignUpRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = Field(default=None, alias="confirmPassword")
    name: Optional[str] = None


class SignInRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None


class PasswordUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: Optional[str] = None
    confirm_password: Optional[str] = Field(default=None, alias="confirmPassword")


# ═══════════════════════════════════════════════════════════════════════════════
# Users: responses
# ═══════════════════════════════════════════════════════════════════════════════


class UserOut(BaseModel):
    id: str
    email: str
    name: str
    photo: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(
            id=str(user.user_id),
            email=user.email,
            name=user.name,
            photo=user.photo or "",
            created_at=_as_utc(user.created_at),
        )


class UserEnvelope(BaseModel):
    status: str = "success"
    user: UserOut


class AuthEnvelope(BaseModel):
    status: str = "success"
    token: str
    user: UserOut


# ═══════════════════════════════════════════════════════════════════════════════
# Posts
# ═══════════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    content: Optional[str] = None


class PostUpdate(BaseModel):
    """
    Partial update for a post.

    Only the fields declared here may be patched; anything else in the
    body is rejected rather than written to the row.
    """

    model_config = ConfigDict(extra="forbid")

    content: Optional[str] = None

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("content must not be empty")
        return value


class PostAuthor(BaseModel):
    id: str
    name: str
    photo: str = ""


class PostOut(BaseModel):
    id: str
    content: str
    user: PostAuthor
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_post(cls, post: Post) -> "PostOut":
        return cls(
            id=str(post.post_id),
            content=post.content,
            user=PostAuthor(
                id=str(post.user.user_id),
                name=post.user.name,
                photo=post.user.photo or "",
            ),
            created_at=_as_utc(post.created_at),
            updated_at=_as_utc(post.updated_at),
        )


class PostEnvelope(BaseModel):
    status: str = "success"
    post: PostOut


class PostListEnvelope(BaseModel):
    status: str = "success"
    posts: List[PostOut] = Field(default_factory=list)


class DeletedEnvelope(BaseModel):
    status: str = "success"
    data: Any = None


class HealthResponse(BaseModel):
    status: str = "ok"
    app: str
