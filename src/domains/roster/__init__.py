# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster domain package.

This package provides class roster management functionality including:
- Roster creation with automatic enrollment (service.py)
- Adding and removing members (membership.py)
- The error hierarchy shared by every roster-related service

Services are imported from their modules; this package only re-exports
the errors, which the directory, activity log and grade ledger packages
depend on.
"""

from src.domains.roster.exceptions import (
    ActivityLogNotFoundError,
    DirectoryEntryNotFoundError,
    DuplicateRosterError,
    NoChangesError,
    NotFoundError,
    RosterConflictError,
    RosterNotFoundError,
    RosterServiceError,
    StorageError,
    StudentNotFoundError,
    ValidationError,
)

__all__ = [
    "RosterServiceError",
    "ValidationError",
    "DuplicateRosterError",
    "NotFoundError",
    "RosterNotFoundError",
    "StudentNotFoundError",
    "DirectoryEntryNotFoundError",
    "ActivityLogNotFoundError",
    "NoChangesError",
    "StorageError",
    "RosterConflictError",
]
