# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Mapping of roster service errors to HTTP responses."""

from fastapi import HTTPException, status

from src.domains.roster.exceptions import (
    DuplicateRosterError,
    NoChangesError,
    NotFoundError,
    RosterConflictError,
    RosterServiceError,
    StorageError,
    ValidationError,
)

# Checked in order; subclasses before their bases
_STATUS_CODES: tuple[tuple[type[RosterServiceError], int], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateRosterError, status.HTTP_409_CONFLICT),
    (RosterConflictError, status.HTTP_409_CONFLICT),
    (NoChangesError, status.HTTP_400_BAD_REQUEST),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_exception(error: RosterServiceError) -> HTTPException:
    """Convert a service error into an HTTPException.

    Validation errors carry the offending field and student so that a form
    can highlight them.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in _STATUS_CODES:
        if isinstance(error, error_type):
            status_code = code
            break

    if isinstance(error, StorageError) and not isinstance(error, RosterConflictError):
        # Keep driver messages out of responses
        detail: object = "Storage temporarily unavailable"
    elif isinstance(error, ValidationError):
        detail = {
            "message": str(error),
            "field": error.field,
            "student_id": error.student_id,
        }
    elif isinstance(error, RosterConflictError):
        detail = error.args[0]
    else:
        detail = str(error)

    return HTTPException(status_code=status_code, detail=detail)
