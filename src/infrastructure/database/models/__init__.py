# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the portal database."""

from src.infrastructure.database.models.activity_log import SYSTEM_STUDENT_ID, ActivityLog
from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin, generate_uuid
from src.infrastructure.database.models.directory import (
    Section,
    Strand,
    Student,
    StudentEnrollment,
    Subject,
    Teacher,
)
from src.infrastructure.database.models.roster import ClassRoster, GradeEntry

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "generate_uuid",
    # Directory
    "Strand",
    "Section",
    "Subject",
    "Teacher",
    "Student",
    "StudentEnrollment",
    # Roster
    "ClassRoster",
    "GradeEntry",
    # Activity log
    "ActivityLog",
    "SYSTEM_STUDENT_ID",
]
