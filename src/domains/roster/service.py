# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster service for managing class rosters.

This module provides the RosterService class for:
- Roster creation with duplicate prevention and automatic enrollment
- Roster deletion together with its grade entries
- Roster lookups by id, teacher, section or member student

A class offering (section, subject, semester, school year) has at most one
roster. The unique constraint on class_rosters enforces this in the same
INSERT that creates the roster, so two concurrent creations cannot both
succeed.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.config import Settings, get_settings
from src.domains.activity_log.service import ActivityLogService
from src.domains.directory.base import DirectoryLookup, EnrollmentDirectory, sort_students
from src.domains.roster.exceptions import (
    DirectoryEntryNotFoundError,
    DuplicateRosterError,
    StorageError,
    ValidationError,
)
from src.domains.roster.persistence import commit_roster, entries_to_response, load_roster
from src.infrastructure.database.models.base import generate_uuid
from src.infrastructure.database.models.roster import ClassRoster, GradeEntry
from src.models.common import GradeLevel, Semester
from src.models.roster import RosterCreateRequest, RosterResponse, RosterSummary
from src.utils.datetime import is_valid_school_year, utc_now

logger = logging.getLogger(__name__)

OFFERING_CONSTRAINT = "uq_class_rosters_offering"

_REQUIRED_FIELDS = (
    "section_id",
    "subject_id",
    "teacher_id",
    "grade_level",
    "semester",
    "school_year",
)


class RosterService:
    """Service for managing class rosters.

    Attributes:
        db: Async database session.
        directory: Strand/section/subject/teacher lookups.
        enrollment: Eligible-student lookups.
        activity: Activity log writer sharing the same session.
    """

    def __init__(
        self,
        db: AsyncSession,
        directory: DirectoryLookup,
        enrollment: EnrollmentDirectory,
        settings: Settings | None = None,
    ) -> None:
        """Initialize roster service.

        Args:
            db: Async database session.
            directory: Directory lookup implementation.
            enrollment: Enrollment directory implementation.
            settings: Application settings. Defaults to get_settings().
        """
        self.db = db
        self.directory = directory
        self.enrollment = enrollment
        self.settings = settings or get_settings()
        self.activity = ActivityLogService(db, self.settings)

    async def create_roster(
        self,
        request: RosterCreateRequest,
        performed_by: str,
    ) -> RosterResponse:
        """Create a class roster and enroll its eligible students.

        Every student the enrollment directory reports for the section and
        term becomes a member with an empty grade entry.

        Args:
            request: Roster creation data.
            performed_by: Who is creating the roster.

        Returns:
            Created roster with the number of auto-enrolled students.

        Raises:
            ValidationError: If a field is blank or invalid.
            DirectoryEntryNotFoundError: If the section, subject or teacher is unknown.
            DuplicateRosterError: If the class offering already has a roster.
            StorageError: If a directory read or the insert fails.
        """
        values = self._validate_create(request)

        section = await self.directory.get_section(values["section_id"])
        if not section:
            raise DirectoryEntryNotFoundError("section", values["section_id"])

        subject = await self.directory.get_subject(values["subject_id"])
        if not subject:
            raise DirectoryEntryNotFoundError("subject", values["subject_id"])

        teacher = await self.directory.get_teacher(values["teacher_id"])
        if not teacher:
            raise DirectoryEntryNotFoundError("teacher", values["teacher_id"])

        students = sort_students(
            await self.enrollment.find_eligible_students(
                values["section_id"],
                values["school_year"],
                values["semester"],
            )
        )

        now = utc_now()
        roster = ClassRoster(
            id=generate_uuid(),
            section_id=section.id,
            section_name=section.name,
            subject_id=subject.id,
            subject_name=subject.name,
            teacher_id=teacher.employee_id,
            teacher_name=teacher.full_name,
            grade_level=values["grade_level"],
            semester=values["semester"],
            school_year=values["school_year"],
            created_at=now,
            updated_at=now,
            grade_entries=[
                GradeEntry(
                    id=generate_uuid(),
                    student_id=student.student_id,
                    student_name=student.display_name,
                    created_at=now,
                )
                for student in students
            ],
        )

        self.db.add(roster)
        self.activity.record(
            "Class Created",
            f"Created {subject.name} for {section.name} ({roster.school_year}, "
            f"{roster.semester} semester) handled by {teacher.full_name} "
            f"with {len(students)} students",
            performed_by,
        )

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if OFFERING_CONSTRAINT in str(e):
                raise DuplicateRosterError(
                    roster.section_id,
                    roster.subject_id,
                    roster.semester,
                    roster.school_year,
                ) from e
            raise StorageError("Failed to create class roster", e) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError("Failed to create class roster", e) from e

        logger.info(
            "Created class roster: %s %s/%s with %d students by %s",
            roster.id,
            roster.section_name,
            roster.subject_name,
            len(students),
            performed_by,
        )

        return self._to_response(roster, auto_enrolled_count=len(students))

    async def delete_roster(self, roster_id: str, performed_by: str) -> None:
        """Delete a roster and all of its grade entries.

        Args:
            roster_id: Roster identifier.
            performed_by: Who is deleting the roster.

        Raises:
            RosterNotFoundError: If the roster does not exist.
            RosterConflictError: If the roster changed concurrently.
            StorageError: If the delete fails.
        """
        roster = await load_roster(self.db, roster_id)

        await self.db.delete(roster)
        self.activity.record(
            "Class Deleted",
            f"Deleted {roster.subject_name} for {roster.section_name} "
            f"({roster.school_year}, {roster.semester} semester)",
            performed_by,
        )
        await commit_roster(self.db, roster_id)

        logger.info("Deleted class roster: %s by %s", roster_id, performed_by)

    async def get_roster(self, roster_id: str) -> RosterResponse:
        """Get a roster by ID.

        Raises:
            RosterNotFoundError: If the roster does not exist.
        """
        roster = await load_roster(self.db, roster_id)
        return self._to_response(roster)

    async def list_rosters_by(
        self,
        teacher_id: str | None = None,
        section_id: str | None = None,
        school_year: str | None = None,
    ) -> list[RosterSummary]:
        """List rosters of one teacher or one section.

        Args:
            teacher_id: Employee id of the teacher.
            section_id: Section identifier.
            school_year: Optional school year filter.

        Returns:
            Rosters ordered by section name, then subject name.

        Raises:
            ValidationError: Unless exactly one of teacher_id and section_id is given.
        """
        if bool(teacher_id) == bool(section_id):
            raise ValidationError(
                "Exactly one of teacher_id or section_id is required",
                field="teacher_id" if teacher_id else "section_id",
            )
        if school_year is not None and not is_valid_school_year(school_year):
            raise ValidationError(
                f"Invalid school year '{school_year}', expected YYYY-YYYY",
                field="school_year",
            )

        query = select(ClassRoster).options(selectinload(ClassRoster.grade_entries))

        if teacher_id:
            query = query.where(ClassRoster.teacher_id == teacher_id)
        else:
            query = query.where(ClassRoster.section_id == section_id)

        if school_year:
            query = query.where(ClassRoster.school_year == school_year)

        query = query.order_by(ClassRoster.section_name, ClassRoster.subject_name)

        rosters = await self._fetch(query)
        return [self._to_summary(roster) for roster in rosters]

    async def list_rosters_for_student(
        self,
        student_id: str,
        school_year: str | None = None,
    ) -> list[RosterResponse]:
        """List the rosters a student is a member of, newest first.

        Args:
            student_id: Student identifier.
            school_year: Optional school year filter.

        Returns:
            Rosters including every member's grade entry.
        """
        if not student_id or not student_id.strip():
            raise ValidationError("student_id is required", field="student_id")

        member_of = select(GradeEntry.roster_id).where(GradeEntry.student_id == student_id)
        query = (
            select(ClassRoster)
            .options(selectinload(ClassRoster.grade_entries))
            .where(ClassRoster.id.in_(member_of))
        )
        if school_year:
            query = query.where(ClassRoster.school_year == school_year)
        query = query.order_by(ClassRoster.created_at.desc())

        rosters = await self._fetch(query)
        return [self._to_response(roster) for roster in rosters]

    def _validate_create(self, request: RosterCreateRequest) -> dict[str, str]:
        """Trim and check creation fields before any I/O."""
        values = {}
        for field in _REQUIRED_FIELDS:
            value = (getattr(request, field) or "").strip()
            if not value:
                raise ValidationError(f"{field} is required", field=field)
            values[field] = value

        if values["grade_level"] not in {level.value for level in GradeLevel}:
            raise ValidationError(
                f"Invalid grade level '{values['grade_level']}'",
                field="grade_level",
            )
        if values["semester"] not in {semester.value for semester in Semester}:
            raise ValidationError(
                f"Invalid semester '{values['semester']}'",
                field="semester",
            )
        if not is_valid_school_year(values["school_year"]):
            raise ValidationError(
                f"Invalid school year '{values['school_year']}', expected YYYY-YYYY",
                field="school_year",
            )
        return values

    async def _fetch(self, query) -> list[ClassRoster]:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch class rosters", e) from e
        return list(result.scalars().all())

    def _to_response(
        self,
        roster: ClassRoster,
        auto_enrolled_count: int | None = None,
    ) -> RosterResponse:
        """Convert a roster model to its response."""
        return RosterResponse(
            id=roster.id,
            section_id=roster.section_id,
            section_name=roster.section_name,
            subject_id=roster.subject_id,
            subject_name=roster.subject_name,
            teacher_id=roster.teacher_id,
            teacher_name=roster.teacher_name,
            grade_level=roster.grade_level,
            semester=roster.semester,
            school_year=roster.school_year,
            student_ids=roster.student_ids,
            student_count=len(roster.grade_entries),
            grade_entries=entries_to_response(roster),
            auto_enrolled_count=auto_enrolled_count,
            created_at=roster.created_at,
            updated_at=roster.updated_at,
        )

    def _to_summary(self, roster: ClassRoster) -> RosterSummary:
        """Convert a roster model to a listing row."""
        return RosterSummary(
            id=roster.id,
            section_id=roster.section_id,
            section_name=roster.section_name,
            subject_id=roster.subject_id,
            subject_name=roster.subject_name,
            teacher_id=roster.teacher_id,
            teacher_name=roster.teacher_name,
            grade_level=roster.grade_level,
            semester=roster.semester,
            school_year=roster.school_year,
            student_count=len(roster.grade_entries),
            created_at=roster.created_at,
        )
