# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity log domain package.

This package provides the audit trail of roster and grade changes:
- Recording entries inside the caller's transaction
- Cursor-paginated, filterable reads
"""

from src.domains.activity_log.service import (
    ActivityLogService,
    decode_cursor,
    encode_cursor,
)

__all__ = [
    "ActivityLogService",
    "decode_cursor",
    "encode_cursor",
]
