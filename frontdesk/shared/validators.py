"""Shared validation utilities"""

import re
from datetime import datetime, time, timezone
from typing import Optional

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

# Placeholder some visitors enter when they have no company
NO_COMPANY = "N/A"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Stripped email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip()
    if not re.match(EMAIL_PATTERN, email):
        raise ValueError("Invalid email address")
    return email


def validate_min_length(value: str, length: int, field: str) -> str:
    if value is None or len(value.strip()) < length:
        raise ValueError(f"{field} must be at least {length} characters")
    return value


def validate_required(value: str, field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value.strip()


def title_case_company(name: str) -> str:
    """'acme   corp' -> 'Acme Corp'"""
    return " ".join(word.capitalize() for word in name.split())


def normalize_company(name: str) -> str:
    return " ".join(name.lower().split())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time(23, 59, 59, 999000))


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC; aware inputs are converted first"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
