# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Roster service."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from src.domains.roster.exceptions import (
    DirectoryEntryNotFoundError,
    DuplicateRosterError,
    NotFoundError,
    RosterConflictError,
    RosterNotFoundError,
    StorageError,
    ValidationError,
)
from src.domains.roster.service import RosterService
from src.infrastructure.database.models.activity_log import ActivityLog
from src.infrastructure.database.models.roster import ClassRoster
from src.models.directory import SectionSummary, SubjectSummary, TeacherSummary
from src.models.roster import RosterCreateRequest


@pytest.fixture
def mock_directory():
    """Directory double knowing one section, subject and teacher."""
    directory = AsyncMock()
    directory.get_section.return_value = SectionSummary(
        id="sec-a", name="STEM 11-A", strand_id="stem"
    )
    directory.get_subject.return_value = SubjectSummary(
        id="subj-math", name="General Mathematics", strand_id="stem"
    )
    directory.get_teacher.return_value = TeacherSummary(
        employee_id="T-001", first_name="Maria", last_name="Santos"
    )
    return directory


@pytest.fixture
def roster_service(mock_db, mock_directory, mock_enrollment, settings):
    """Create roster service with mock collaborators."""
    return RosterService(
        db=mock_db,
        directory=mock_directory,
        enrollment=mock_enrollment,
        settings=settings,
    )


@pytest.fixture
def create_request():
    return RosterCreateRequest(
        section_id="sec-a",
        subject_id="subj-math",
        teacher_id="T-001",
        grade_level="Grade 11",
        semester="1st",
        school_year="2024-2025",
    )


def _added(mock_db, model):
    return [call.args[0] for call in mock_db.add.call_args_list if isinstance(call.args[0], model)]


class TestRosterServiceCreate:
    """Tests for roster creation."""

    @pytest.mark.asyncio
    async def test_create_roster_auto_enrolls_in_surname_order(
        self, roster_service, mock_db, mock_enrollment, create_request
    ):
        """Eligible students become members with empty entries, sorted by surname."""
        response = await roster_service.create_roster(create_request, performed_by="admin")

        assert response.auto_enrolled_count == 3
        assert response.student_count == 3
        assert response.student_ids == ["2024-0001", "2024-0002", "2024-0003"]
        assert response.section_name == "STEM 11-A"
        assert response.subject_name == "General Mathematics"
        assert response.teacher_name == "Maria Santos"
        for entry in response.grade_entries:
            assert entry.first_quarter_grade is None
            assert entry.second_quarter_grade is None
            assert entry.final_grade is None
            assert entry.rating is None
            assert entry.remarks is None

        mock_enrollment.find_eligible_students.assert_awaited_once_with(
            "sec-a", "2024-2025", "1st"
        )
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_roster_logs_in_same_transaction(
        self, roster_service, mock_db, create_request
    ):
        """The roster and its "Class Created" log are added before one commit."""
        await roster_service.create_roster(create_request, performed_by="admin")

        rosters = _added(mock_db, ClassRoster)
        logs = _added(mock_db, ActivityLog)
        assert len(rosters) == 1
        assert [log.name for log in logs] == ["Class Created"]
        assert logs[0].logs_by == "admin"
        assert logs[0].student_id == "SYSTEM"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_roster_deduplicates_students(
        self, roster_service, mock_enrollment, create_request, students
    ):
        mock_enrollment.find_eligible_students.return_value = students + [students[0]]

        response = await roster_service.create_roster(create_request, performed_by="admin")

        assert response.auto_enrolled_count == 3

    @pytest.mark.asyncio
    async def test_create_roster_with_no_eligible_students(
        self, roster_service, mock_enrollment, create_request
    ):
        mock_enrollment.find_eligible_students.return_value = []

        response = await roster_service.create_roster(create_request, performed_by="admin")

        assert response.auto_enrolled_count == 0
        assert response.student_ids == []

    @pytest.mark.asyncio
    async def test_create_roster_trims_fields(self, roster_service, mock_directory, create_request):
        request = create_request.model_copy(update={"section_id": "  sec-a  "})

        await roster_service.create_roster(request, performed_by="admin")

        mock_directory.get_section.assert_awaited_once_with("sec-a")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,value",
        [
            ("section_id", ""),
            ("subject_id", "   "),
            ("teacher_id", ""),
            ("grade_level", "Grade 10"),
            ("semester", "3rd"),
            ("school_year", "2024-2026"),
            ("school_year", "2024/2025"),
        ],
    )
    async def test_create_roster_validation(
        self, roster_service, mock_db, mock_directory, create_request, field, value
    ):
        """Invalid input is rejected before any lookup or write."""
        request = create_request.model_copy(update={field: value})

        with pytest.raises(ValidationError) as exc_info:
            await roster_service.create_roster(request, performed_by="admin")

        assert exc_info.value.field == field
        mock_directory.get_section.assert_not_awaited()
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["section", "subject", "teacher"])
    async def test_create_roster_unknown_directory_entry(
        self, roster_service, mock_db, mock_directory, create_request, kind
    ):
        getattr(mock_directory, f"get_{kind}").return_value = None

        with pytest.raises(DirectoryEntryNotFoundError) as exc_info:
            await roster_service.create_roster(create_request, performed_by="admin")

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.kind == kind
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_duplicate_roster(self, roster_service, mock_db, create_request):
        """The offering unique constraint turns into DuplicateRosterError."""
        mock_db.commit.side_effect = IntegrityError(
            "INSERT INTO class_rosters",
            {},
            Exception('duplicate key value violates unique constraint "uq_class_rosters_offering"'),
        )

        with pytest.raises(DuplicateRosterError) as exc_info:
            await roster_service.create_roster(create_request, performed_by="admin")

        error = exc_info.value
        assert (error.section_id, error.subject_id, error.semester, error.school_year) == (
            "sec-a",
            "subj-math",
            "1st",
            "2024-2025",
        )
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_roster_other_integrity_error(self, roster_service, mock_db, create_request):
        mock_db.commit.side_effect = IntegrityError(
            "INSERT INTO grade_entries",
            {},
            Exception('violates unique constraint "uq_grade_entries_roster_student"'),
        )

        with pytest.raises(StorageError):
            await roster_service.create_roster(create_request, performed_by="admin")

        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_snapshots_survive_directory_renames(
        self, roster_service, mock_db, mock_directory, create_request, scalar
    ):
        """Renaming the teacher later does not change the stored roster."""
        await roster_service.create_roster(create_request, performed_by="admin")
        stored = _added(mock_db, ClassRoster)[0]

        mock_directory.get_teacher.return_value = TeacherSummary(
            employee_id="T-001", first_name="Maria", last_name="Santos-Cruz"
        )
        mock_db.execute.return_value = scalar(stored)

        response = await roster_service.get_roster(stored.id)

        assert response.teacher_name == "Maria Santos"


class TestRosterServiceDelete:
    """Tests for roster deletion."""

    @pytest.mark.asyncio
    async def test_delete_roster(self, roster_service, mock_db, roster_factory, scalar):
        roster = roster_factory()
        mock_db.execute.return_value = scalar(roster)

        await roster_service.delete_roster(roster.id, performed_by="admin")

        mock_db.delete.assert_awaited_once_with(roster)
        assert [log.name for log in _added(mock_db, ActivityLog)] == ["Class Deleted"]
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing_roster(self, roster_service, mock_db, scalar):
        """Deleting again after success reports not found and writes nothing."""
        mock_db.execute.return_value = scalar(None)

        with pytest.raises(RosterNotFoundError) as exc_info:
            await roster_service.delete_roster("gone", performed_by="admin")

        assert exc_info.value.roster_id == "gone"
        mock_db.delete.assert_not_awaited()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_conflict(self, roster_service, mock_db, roster_factory, scalar):
        roster = roster_factory()
        mock_db.execute.return_value = scalar(roster)
        mock_db.commit.side_effect = StaleDataError("DELETE matched 0 rows")

        with pytest.raises(RosterConflictError):
            await roster_service.delete_roster(roster.id, performed_by="admin")

        mock_db.rollback.assert_awaited_once()


class TestRosterServiceRead:
    """Tests for roster lookups."""

    @pytest.mark.asyncio
    async def test_get_roster(self, roster_service, mock_db, roster_factory, entry_factory, students, scalar):
        roster = roster_factory([entry_factory(student) for student in students])
        mock_db.execute.return_value = scalar(roster)

        response = await roster_service.get_roster(roster.id)

        assert response.id == roster.id
        assert response.student_count == 3
        assert response.auto_enrolled_count is None
        assert [entry.student_name for entry in response.grade_entries] == [
            "Bautista, Ana L.",
            "cruz, ben",
            "Reyes, Carlo",
        ]

    @pytest.mark.asyncio
    async def test_get_missing_roster(self, roster_service, mock_db, scalar):
        mock_db.execute.return_value = scalar(None)

        with pytest.raises(RosterNotFoundError):
            await roster_service.get_roster("missing")

    @pytest.mark.asyncio
    async def test_get_roster_storage_failure(self, roster_service, mock_db):
        mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("timeout"))

        with pytest.raises(StorageError):
            await roster_service.get_roster("roster-1")

    @pytest.mark.asyncio
    async def test_list_rosters_by_teacher(self, roster_service, mock_db, roster_factory, scalars):
        rosters = [
            roster_factory(subject_name="General Mathematics"),
            roster_factory(subject_name="Oral Communication"),
        ]
        mock_db.execute.return_value = scalars(rosters)

        summaries = await roster_service.list_rosters_by(teacher_id="T-001", school_year="2024-2025")

        assert [summary.subject_name for summary in summaries] == [
            "General Mathematics",
            "Oral Communication",
        ]
        assert summaries[0].student_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            {"teacher_id": "T-001", "section_id": "sec-a"},
            {"school_year": "2024-2025"},
        ],
    )
    async def test_list_rosters_requires_exactly_one_owner(self, roster_service, mock_db, kwargs):
        with pytest.raises(ValidationError):
            await roster_service.list_rosters_by(**kwargs)

        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_rosters_rejects_bad_school_year(self, roster_service, mock_db):
        with pytest.raises(ValidationError) as exc_info:
            await roster_service.list_rosters_by(section_id="sec-a", school_year="2024")

        assert exc_info.value.field == "school_year"

    @pytest.mark.asyncio
    async def test_list_rosters_for_student(
        self, roster_service, mock_db, roster_factory, entry_factory, students, scalars
    ):
        roster = roster_factory([entry_factory(students[0], first_quarter_grade=90)])
        mock_db.execute.return_value = scalars([roster])

        rosters = await roster_service.list_rosters_for_student("2024-0003")

        assert len(rosters) == 1
        assert rosters[0].grade_entries[0].first_quarter_grade == 90

    @pytest.mark.asyncio
    async def test_list_rosters_for_student_requires_id(self, roster_service):
        with pytest.raises(ValidationError):
            await roster_service.list_rosters_for_student("  ")
