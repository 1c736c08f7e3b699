"""Shared validation utilities"""

import re
from typing import Optional

SLOT_MINUTES = 30

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_start_time(value: Optional[str]) -> Optional[str]:
    """
    Validate a session start time and normalize it to zero-padded HH:MM.

    Sessions are booked on a 30-minute grid, so only :00 and :30 are accepted.

    Raises:
        ValueError: If the time is malformed or off the grid
    """
    if value is None:
        return value

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError("Start time must be in HH:MM format")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError("Start time must be a valid time of day")
    if minutes % SLOT_MINUTES != 0:
        raise ValueError(f"Start time must fall on a {SLOT_MINUTES}-minute boundary")

    return f"{hours:02d}:{minutes:02d}"


def validate_non_empty(value: Optional[str], field: str = "Value") -> str:
    """Strip surrounding whitespace and reject empty strings"""
    if value is None or not value.strip():
        raise ValueError(f"{field} must not be empty")
    return value.strip()
