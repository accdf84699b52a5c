"""
JWT creation and verification.

Tokens are compact HS256 JWTs (``header.payload.signature``, base64url
without padding) whose ``sub`` claim is the user id.  The signing secret
and lifetime come from ``Settings`` and are passed in by the caller.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Optional

from fastapi import status

from utils.errors import AuthError

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64encode(data: bytes) -> str:
    return urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64decode(segment: str) -> bytes:
    return urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _sign(signing_input: str, secret: str) -> str:
    digest = hmac.new(secret.encode(), signing_input.encode(), hashlib.sha256).digest()
    return _b64encode(digest)


def create_token(
    user_id: str,
    secret: str,
    expiry_seconds: int,
    now: Optional[int] = None,
) -> str:
    """Create a signed token for ``user_id`` valid for ``expiry_seconds``."""
    issued_at = int(time.time()) if now is None else now
    payload = {
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + expiry_seconds,
    }
    signing_input = ".".join(
        _b64encode(json.dumps(part, separators=(",", ":")).encode())
        for part in (_HEADER, payload)
    )
    return signing_input + "." + _sign(signing_input, secret)


def verify_token(token: str, secret: str) -> str:
    """
    Verify token and return the user id from its ``sub`` claim.

    Raises ``AuthError(401)`` on malformed, tampered or expired tokens.
    """
    try:
        header_b64, payload_b64, signature = token.split(".")
        signing_input = f"{header_b64}.{payload_b64}"
        if not hmac.compare_digest(signature, _sign(signing_input, secret)):
            raise ValueError("bad signature")
        header = json.loads(_b64decode(header_b64))
        if header.get("alg") != _HEADER["alg"]:
            raise ValueError("unsupported algorithm")
        payload = json.loads(_b64decode(payload_b64))
        if payload.get("exp", 0) < time.time():
            raise ValueError("token expired")
        user_id = payload["sub"]
    except (ValueError, KeyError, TypeError) as exc:
        raise AuthError(
            f"Invalid or expired token: {exc}",
            status_code=status.HTTP_401_UNAUTHORIZED,
        ) from exc
    return str(user_id)
