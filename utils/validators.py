"""
Field validators shared by the account endpoints.

Each check raises ``ValidationError`` with a message naming the rule that
failed; callers run them in a fixed order so the first broken rule wins.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from utils.errors import ValidationError

logger = logging.getLogger(__name__)

_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"[0-9]")


def require_fields(*values: Optional[str]) -> None:
    """Reject the request when any value is missing or empty."""
    if not all(values):
        raise ValidationError("Required fields are missing or empty")


def check_password(password: str, confirm_password: str, min_length: int = 8) -> None:
    """Match, length, then letter+digit mix."""
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")
    if not _HAS_LETTER.search(password) or not _HAS_DIGIT.search(password):
        raise ValidationError("Password must contain both letters and digits")


def check_name(name: str, min_length: int = 2) -> None:
    if len(name) < min_length:
        raise ValidationError(f"Name must be at least {min_length} characters")


def check_email(email: str) -> None:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        logger.debug("Rejected email %r: %s", email, exc)
        raise ValidationError("Email address is not valid") from exc


def normalize_email(email: str) -> str:
    return email.strip().lower()
