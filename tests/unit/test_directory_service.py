# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Directory and Enrollment directory services."""

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError

from src.domains.directory.base import sort_students, student_sort_key
from src.domains.directory.service import DirectoryService, EnrollmentDirectoryService
from src.domains.roster.exceptions import StorageError
from src.infrastructure.database.models.directory import Section, Student, Teacher


def make_student_row(student_id: str, first_name: str, last_name: str) -> Student:
    return Student(
        id=f"row-{student_id}",
        student_id=student_id,
        first_name=first_name,
        last_name=last_name,
    )


@pytest.fixture
def student_rows():
    """Rows in the order a case-sensitive collation might return them."""
    return [
        make_student_row("2024-0004", "Ana", "Reyes"),
        make_student_row("2024-0002", "ben", "cruz"),
        make_student_row("2024-0003", "Ana", "Reyes"),
        make_student_row("2024-0001", "Zed", "Abad"),
        make_student_row("2024-0002", "ben", "cruz"),
    ]


@pytest.fixture
def enrollment(mock_db):
    return EnrollmentDirectoryService(mock_db, eligible_statuses=["approved", "enrolled"])


class TestStudentOrdering:
    """Tests for the canonical student ordering."""

    def test_sort_key_ignores_case(self, student_factory):
        upper = student_factory("2", "ANA", "CRUZ")
        lower = student_factory("1", "ana", "cruz")

        assert sorted([upper, lower], key=student_sort_key) == [lower, upper]

    def test_sort_students_deduplicates(self, student_factory):
        first = student_factory("2024-0001", "Ana", "Cruz")
        duplicate = student_factory("2024-0001", "Ana", "Cruz")

        assert sort_students([first, duplicate]) == [first]


class TestEnrollmentDirectory:
    """Tests for eligible-student queries."""

    @pytest.mark.asyncio
    async def test_sorted_query(self, enrollment, mock_db, student_rows, scalars):
        mock_db.execute.return_value = scalars(student_rows)

        students = await enrollment.find_eligible_students("sec-a", "2024-2025", "1st")

        assert [s.student_id for s in students] == [
            "2024-0001",
            "2024-0002",
            "2024-0003",
            "2024-0004",
        ]
        mock_db.begin_nested.assert_called_once()
        assert mock_db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_fallback_matches_sorted_order(self, enrollment, mock_db, student_rows, scalars):
        """A failing sorted query falls back without changing the result."""
        mock_db.execute.return_value = scalars(student_rows)
        sorted_result = await enrollment.find_students_for_term("2024-2025", "1st")

        mock_db.execute.reset_mock()
        mock_db.execute.side_effect = [
            ProgrammingError("SELECT ... ORDER BY", {}, Exception("no such collation")),
            scalars(list(reversed(student_rows))),
        ]
        fallback_result = await enrollment.find_students_for_term("2024-2025", "1st")

        assert fallback_result == sorted_result
        assert mock_db.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_fallback_failure_is_storage_error(self, enrollment, mock_db):
        mock_db.execute.side_effect = [
            OperationalError("SELECT", {}, Exception("statement timeout")),
            OperationalError("SELECT", {}, Exception("connection lost")),
        ]

        with pytest.raises(StorageError):
            await enrollment.find_eligible_students("sec-a", "2024-2025", "1st")

    @pytest.mark.asyncio
    async def test_empty_result(self, enrollment, mock_db, scalars):
        mock_db.execute.return_value = scalars([])

        assert await enrollment.find_students_for_term("2024-2025", "2nd") == []


class TestDirectoryService:
    """Tests for directory lookups."""

    @pytest.mark.asyncio
    async def test_get_teacher(self, mock_db, scalar):
        mock_db.execute.return_value = scalar(
            Teacher(id="t-row", employee_id="T-001", first_name="Maria", last_name="Santos")
        )

        teacher = await DirectoryService(mock_db).get_teacher("T-001")

        assert teacher.employee_id == "T-001"
        assert teacher.full_name == "Maria Santos"

    @pytest.mark.asyncio
    async def test_get_missing_section(self, mock_db, scalar):
        mock_db.execute.return_value = scalar(None)

        assert await DirectoryService(mock_db).get_section("missing") is None

    @pytest.mark.asyncio
    async def test_list_sections_by_strand(self, mock_db, scalars):
        mock_db.execute.return_value = scalars(
            [
                Section(id="sec-a", name="STEM 11-A", strand_id="stem"),
                Section(id="sec-b", name="STEM 11-B", strand_id="stem"),
            ]
        )

        sections = await DirectoryService(mock_db).list_sections_by_strand("stem")

        assert [section.name for section in sections] == ["STEM 11-A", "STEM 11-B"]

    @pytest.mark.asyncio
    async def test_storage_failure(self, mock_db):
        mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(StorageError):
            await DirectoryService(mock_db).list_strands()
