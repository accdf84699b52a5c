"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_settings`` and ``get_current_user``
dependencies that are used across all protected routes.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import verify_token
from config.settings import Settings
from database.helpers import get_user
from database.models import User
from database.session import get_db_session
from utils.errors import AuthError

logger = logging.getLogger(__name__)

# auto_error is off so a missing header gets the same error envelope as a bad token.
_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(db_session),
) -> User:
    """
    Verify the Bearer token and return the ``User`` it was issued to.
    """
    if credentials is None:
        raise AuthError(
            "You are not logged in",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    user_id = verify_token(credentials.credentials, settings.jwt_secret)
    user = await get_user(session, user_id)
    if user is None:
        logger.info("Token subject %s no longer exists", user_id)
        raise AuthError(
            "The user for this token no longer exists",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return user
