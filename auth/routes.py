"""
User API routes: sign up, sign in, profile and password change.

Route prefix: /users
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user, get_settings
from auth.jwt import create_token
from auth.password import hash_password_async, verify_password_async
from config.settings import Settings
from database.helpers import (
    create_user,
    get_user_by_email,
    update_user_name,
    update_user_password,
)
from database.models import User
from utils.errors import AuthError, ConflictError, ValidationError
from utils.schemas import (
    AuthEnvelope,
    PasswordUpdateRequest,
    ProfileUpdateRequest,
    SignInRequest,
    SignUpRequest,
    UserEnvelope,
    UserOut,
)
from utils.validators import (
    check_email,
    check_name,
    check_password,
    normalize_email,
    require_fields,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _auth_payload(user: User, settings: Settings) -> Dict[str, Any]:
    """Issue a fresh token for ``user`` and build the sign-in response body."""
    token = create_token(
        str(user.user_id),
        settings.jwt_secret,
        settings.jwt_expiry_seconds,
    )
    return {"status": "success", "token": token, "user": UserOut.from_user(user)}


@router.post("/sign_up", response_model=AuthEnvelope, status_code=status.HTTP_201_CREATED)
async def sign_up(
    req: SignUpRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a new user."""
    require_fields(req.email, req.password, req.confirm_password, req.name)
    check_password(req.password, req.confirm_password, settings.password_min_length)
    check_name(req.name, settings.name_min_length)
    email = normalize_email(req.email)
    check_email(email)

    if await get_user_by_email(session, email) is not None:
        raise ConflictError("Email is already registered")

    password_hash = await hash_password_async(req.password, settings.bcrypt_rounds)
    user = await create_user(
        session,
        email=email,
        name=req.name,
        password_hash=password_hash,
    )
    logger.info("Registered user %s (%s)", user.name, user.user_id)
    return _auth_payload(user, settings)


@router.post("/sign_in", response_model=AuthEnvelope)
async def sign_in(
    req: SignInRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Sign in with email + password."""
    if not req.email or not req.password:
        raise ValidationError("Email and password are required")

    user = await get_user_by_email(session, normalize_email(req.email))
    if user is None:
        raise AuthError("No account is registered with this email")
    if not await verify_password_async(req.password, user.password_hash):
        raise AuthError("Incorrect password")

    logger.info("Sign in: %s (%s)", user.name, user.user_id)
    return _auth_payload(user, settings)


@router.get("/profile", response_model=UserEnvelope)
async def get_profile(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return {"status": "success", "user": UserOut.from_user(user)}


@router.patch("/profile", response_model=UserEnvelope)
async def update_profile(
    req: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    require_fields(req.name)
    check_name(req.name, settings.name_min_length)

    user = await update_user_name(session, user, req.name)
    logger.info("Renamed user %s to %s", user.user_id, user.name)
    return {"status": "success", "user": UserOut.from_user(user)}


@router.post("/updatePassword", response_model=AuthEnvelope)
async def update_password(
    req: PasswordUpdateRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Change the caller's password and hand back a new token.

    Tokens issued before the change stay valid until they expire.
    """
    require_fields(req.password, req.confirm_password)
    check_password(req.password, req.confirm_password, settings.password_min_length)

    password_hash = await hash_password_async(req.password, settings.bcrypt_rounds)
    user = await update_user_password(session, user, password_hash)
    logger.info("Password changed for user %s", user.user_id)
    return _auth_payload(user, settings)
