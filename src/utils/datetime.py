# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime and school-calendar utilities.

This module provides standardized datetime operations to ensure consistency
across the codebase, plus the school-year helpers used when listing and
creating class rosters.

Design Decisions:
-----------------
1. All timestamps are stored in UTC (PostgreSQL TIMESTAMPTZ)
2. All Python datetimes are timezone-aware (with timezone.utc)
3. School years are "YYYY-YYYY" strings spanning two consecutive years

Usage:
------
    from src.utils.datetime import utc_now, default_school_year

    # For SQLAlchemy model defaults
    created_at = mapped_column(DateTime(timezone=True), default=utc_now)

    # For the school year a new roster belongs to
    school_year = default_school_year()
"""

import re
from datetime import date, datetime, time, timezone

SCHOOL_YEAR_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    # Already aware - convert to UTC
    return dt.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    """Get midnight UTC for a calendar date."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """Get 23:59:59.999999 UTC for a calendar date."""
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def format_iso(dt: datetime | None) -> str | None:
    """Format datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    dt_utc = ensure_utc(dt)
    return dt_utc.isoformat()


def parse_iso(iso_string: str | None) -> datetime | None:
    """Parse an ISO 8601 datetime string.

    Args:
        iso_string: ISO 8601 formatted string.

    Returns:
        Timezone-aware UTC datetime or None.

    Raises:
        ValueError: If the string is not valid ISO 8601.
    """
    if iso_string is None:
        return None

    dt = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    return ensure_utc(dt)


def default_school_year(today: date | None = None) -> str:
    """Get the school year a date falls into.

    January to March belong to the school year that started the previous
    calendar year; every other month starts or continues the school year
    beginning this calendar year.

    Args:
        today: Reference date. Defaults to the current UTC date.

    Returns:
        School year string such as "2024-2025".

    Example:
        >>> default_school_year(date(2025, 2, 10))
        '2024-2025'
        >>> default_school_year(date(2025, 6, 1))
        '2025-2026'
    """
    today = today or utc_now().date()
    if today.month <= 3:
        return f"{today.year - 1}-{today.year}"
    return f"{today.year}-{today.year + 1}"


def school_year_options(today: date | None = None) -> list[str]:
    """Get the selectable school years (last year and this year).

    Args:
        today: Reference date. Defaults to the current UTC date.

    Returns:
        Two school year strings, oldest first.
    """
    year = (today or utc_now().date()).year
    return [f"{year - 1}-{year}", f"{year}-{year + 1}"]


def is_valid_school_year(value: str) -> bool:
    """Check that a string is a "YYYY-YYYY" span of consecutive years."""
    match = SCHOOL_YEAR_PATTERN.match(value)
    if not match:
        return False
    start, end = (int(part) for part in match.groups())
    return end == start + 1
