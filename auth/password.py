"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  The ``*_async`` variants push the
hashing work onto a worker thread so request handlers do not block the
event loop.
"""

from __future__ import annotations

import anyio
import bcrypt


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str, rounds: int = 12) -> str:
    return await anyio.to_thread.run_sync(hash_password, password, rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await anyio.to_thread.run_sync(verify_password, password, password_hash)
