# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions raised by the roster, membership and grade ledger services.

Every error carries the identifiers it is about so callers can report
exactly which roster, student or field was at fault. None of them leave
partial changes behind.
"""

from __future__ import annotations


class RosterServiceError(Exception):
    """Base exception for roster and grade ledger errors."""

    pass


class ValidationError(RosterServiceError):
    """Raised when input is missing or invalid.

    Always raised before anything is written.

    Attributes:
        field: Name of the offending field, if any.
        student_id: Student the offending value belongs to, if any.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        student_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.student_id = student_id


class DuplicateRosterError(RosterServiceError):
    """Raised when a roster already exists for the same class offering."""

    def __init__(
        self,
        section_id: str,
        subject_id: str,
        semester: str,
        school_year: str,
    ) -> None:
        super().__init__(
            f"A class roster already exists for section {section_id}, subject "
            f"{subject_id} in {school_year} {semester} semester"
        )
        self.section_id = section_id
        self.subject_id = subject_id
        self.semester = semester
        self.school_year = school_year


class NotFoundError(RosterServiceError):
    """Raised when a referenced record does not exist."""

    pass


class RosterNotFoundError(NotFoundError):
    """Raised when a roster is not found."""

    def __init__(self, roster_id: str) -> None:
        super().__init__(f"Class roster {roster_id} not found")
        self.roster_id = roster_id


class StudentNotFoundError(NotFoundError):
    """Raised when a student is not a member of, or not eligible for, a roster."""

    def __init__(self, student_id: str, roster_id: str, reason: str = "is not a member of") -> None:
        super().__init__(f"Student {student_id} {reason} class roster {roster_id}")
        self.student_id = student_id
        self.roster_id = roster_id


class DirectoryEntryNotFoundError(NotFoundError):
    """Raised when a section, subject or teacher is missing from the directory."""

    def __init__(self, kind: str, entry_id: str) -> None:
        super().__init__(f"{kind.capitalize()} {entry_id} not found")
        self.kind = kind
        self.entry_id = entry_id


class NoChangesError(RosterServiceError):
    """Raised when a grade submission would not record any new value."""

    def __init__(self, roster_id: str) -> None:
        super().__init__(
            f"No new grades to save for class roster {roster_id}; "
            "every submitted field is already recorded"
        )
        self.roster_id = roster_id


class StorageError(RosterServiceError):
    """Raised when the underlying persistence layer fails.

    Attributes:
        original_error: The underlying exception, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.args[0]}: {self.original_error}"
        return self.args[0]


class RosterConflictError(StorageError):
    """Raised when another writer changed the roster first."""

    def __init__(self, roster_id: str, original_error: Exception | None = None) -> None:
        super().__init__(
            f"Class roster {roster_id} was modified concurrently; reload and try again",
            original_error,
        )
        self.roster_id = roster_id


class ActivityLogNotFoundError(NotFoundError):
    """Raised when an activity log entry is not found."""

    def __init__(self, log_id: str) -> None:
        super().__init__(f"Activity log entry {log_id} not found")
        self.log_id = log_id
