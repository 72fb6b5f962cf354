# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory domain package.

This package provides read-only reference data consumed by rostering:
- Strand, section, subject and teacher lookups
- Eligible-student queries from enrollment records
"""

from src.domains.directory.base import (
    DirectoryLookup,
    EnrollmentDirectory,
    sort_students,
    student_sort_key,
)
from src.domains.directory.service import DirectoryService, EnrollmentDirectoryService

__all__ = [
    "DirectoryLookup",
    "EnrollmentDirectory",
    "DirectoryService",
    "EnrollmentDirectoryService",
    "sort_students",
    "student_sort_key",
]
