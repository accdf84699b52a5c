"""
Async SQLAlchemy engine and session factory.

The engine and factory are built once per application by ``create_app``
and kept on ``app.state``; ``get_db_session`` hands each request its own
session from there.
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import Settings
from database.models import Base


def _sqlite_case_sensitive_like(dbapi_connection, _connection_record) -> None:
    # SQLite LIKE ignores ASCII case by default; PostgreSQL LIKE does not.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA case_sensitive_like=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    options: Dict[str, Any] = {"echo": settings.database_echo}
    # SQLite uses its own pool class which takes no sizing arguments.
    if not settings.database_url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20, pool_recycle=3600)
    engine = create_async_engine(settings.database_url, **options)
    if settings.database_url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _sqlite_case_sensitive_like)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function, use in FastAPI `Depends(get_db_session)`."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
