# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations and school-year helpers
"""

from src.utils.datetime import (
    default_school_year,
    end_of_day,
    ensure_utc,
    format_iso,
    is_valid_school_year,
    parse_iso,
    school_year_options,
    start_of_day,
    utc_now,
)
from src.utils.logging import bind_context, build_formatter, clear_context, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "build_formatter",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "start_of_day",
    "end_of_day",
    "format_iso",
    "parse_iso",
    # School calendar
    "default_school_year",
    "school_year_options",
    "is_valid_school_year",
]
