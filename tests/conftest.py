# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Mock database sessions for unit tests
- In-memory (transient) roster and grade entry builders
- Directory and enrollment test doubles
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.core.config.settings import Settings
from src.infrastructure.database.models.roster import ClassRoster, GradeEntry
from src.models.directory import EligibleStudent


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires PostgreSQL)"
    )


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Provide settings with the default grading range and page sizes."""
    return Settings(environment="development")


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db():
    """Create mock database session.

    ``begin_nested`` returns an async context manager that does not
    swallow exceptions, like a real savepoint.
    """
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()

    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock(return_value=savepoint)
    savepoint.__aexit__ = AsyncMock(return_value=False)
    db.begin_nested = MagicMock(return_value=savepoint)
    return db


def scalar_result(value: Any) -> MagicMock:
    """Build an execute() result whose scalar_one_or_none() returns value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def scalars_result(values: list[Any]) -> MagicMock:
    """Build an execute() result whose scalars().all() returns values."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


# =============================================================================
# Roster Builders
# =============================================================================


def make_student(
    student_id: str,
    first_name: str,
    last_name: str,
    middle_name: str | None = None,
) -> EligibleStudent:
    """Build an eligible student."""
    return EligibleStudent(
        student_id=student_id,
        first_name=first_name,
        last_name=last_name,
        middle_name=middle_name,
    )


def make_entry(student: EligibleStudent, **grades: Any) -> GradeEntry:
    """Build a transient grade entry for a student."""
    return GradeEntry(
        id=str(uuid4()),
        student_id=student.student_id,
        student_name=student.display_name,
        created_at=datetime(2024, 8, 1, tzinfo=timezone.utc),
        **grades,
    )


def make_roster(entries: list[GradeEntry] | None = None, **overrides: Any) -> ClassRoster:
    """Build a transient roster of "Math" for section "STEM 11-A", 1st semester 2024-2025."""
    now = datetime(2024, 8, 1, tzinfo=timezone.utc)
    values: dict[str, Any] = {
        "id": str(uuid4()),
        "section_id": "sec-a",
        "section_name": "STEM 11-A",
        "subject_id": "subj-math",
        "subject_name": "General Mathematics",
        "teacher_id": "T-001",
        "teacher_name": "Maria Santos",
        "grade_level": "Grade 11",
        "semester": "1st",
        "school_year": "2024-2025",
        "version": 1,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return ClassRoster(grade_entries=entries or [], **values)


@pytest.fixture
def students() -> list[EligibleStudent]:
    """Three students, deliberately not in surname order."""
    return [
        make_student("2024-0003", "Carlo", "Reyes"),
        make_student("2024-0001", "Ana", "Bautista", "Lopez"),
        make_student("2024-0002", "ben", "cruz"),
    ]


@pytest.fixture
def roster_factory() -> Callable[..., ClassRoster]:
    """Provide the transient roster builder."""
    return make_roster


@pytest.fixture
def mock_enrollment(students):
    """Enrollment directory double reporting the three sample students."""
    enrollment = AsyncMock()
    enrollment.find_eligible_students.return_value = list(students)
    enrollment.find_students_for_term.return_value = list(students)
    return enrollment


@pytest.fixture
def student_factory() -> Callable[..., EligibleStudent]:
    """Provide the eligible student builder."""
    return make_student


@pytest.fixture
def entry_factory() -> Callable[..., GradeEntry]:
    """Provide the transient grade entry builder."""
    return make_entry


@pytest.fixture
def scalar() -> Callable[[Any], MagicMock]:
    """Provide the scalar_one_or_none() result builder."""
    return scalar_result


@pytest.fixture
def scalars() -> Callable[[list[Any]], MagicMock]:
    """Provide the scalars().all() result builder."""
    return scalars_result
