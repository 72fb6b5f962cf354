# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQL-backed directory and enrollment directory.

This module provides:
- DirectoryService: strand/section/subject/teacher lookups
- EnrollmentDirectoryService: eligible-student queries with a sorted
  query path and an unsorted fallback that produce the same ordering
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.directory.base import DirectoryLookup, EnrollmentDirectory, sort_students
from src.domains.roster.exceptions import StorageError
from src.infrastructure.database.models.directory import (
    Section,
    Strand,
    Student,
    StudentEnrollment,
    Subject,
    Teacher,
)
from src.models.directory import (
    EligibleStudent,
    SectionSummary,
    StrandSummary,
    SubjectSummary,
    TeacherSummary,
)

logger = logging.getLogger(__name__)


class DirectoryService(DirectoryLookup):
    """Directory lookups against the portal database.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize directory service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def list_strands(self) -> list[StrandSummary]:
        rows = await self._all(select(Strand).order_by(Strand.name), "strands")
        return [StrandSummary.model_validate(row) for row in rows]

    async def list_sections_by_strand(self, strand_id: str) -> list[SectionSummary]:
        query = select(Section).where(Section.strand_id == strand_id).order_by(Section.name)
        rows = await self._all(query, "sections")
        return [SectionSummary.model_validate(row) for row in rows]

    async def list_subjects_by_strand(self, strand_id: str) -> list[SubjectSummary]:
        query = select(Subject).where(Subject.strand_id == strand_id).order_by(Subject.name)
        rows = await self._all(query, "subjects")
        return [SubjectSummary.model_validate(row) for row in rows]

    async def list_teachers(self) -> list[TeacherSummary]:
        query = select(Teacher).order_by(Teacher.last_name, Teacher.first_name)
        rows = await self._all(query, "teachers")
        return [TeacherSummary.model_validate(row) for row in rows]

    async def get_section(self, section_id: str) -> SectionSummary | None:
        row = await self._one(select(Section).where(Section.id == section_id), "section")
        return SectionSummary.model_validate(row) if row else None

    async def get_subject(self, subject_id: str) -> SubjectSummary | None:
        row = await self._one(select(Subject).where(Subject.id == subject_id), "subject")
        return SubjectSummary.model_validate(row) if row else None

    async def get_teacher(self, teacher_id: str) -> TeacherSummary | None:
        row = await self._one(select(Teacher).where(Teacher.employee_id == teacher_id), "teacher")
        return TeacherSummary.model_validate(row) if row else None

    async def _all(self, query: Select, what: str) -> Sequence:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to fetch {what}", e) from e
        return result.scalars().all()

    async def _one(self, query: Select, what: str):
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to fetch {what}", e) from e
        return result.scalar_one_or_none()


class EnrollmentDirectoryService(EnrollmentDirectory):
    """Eligible-student queries against enrollment records.

    A student is eligible for a term when one of their enrollment records
    matches it with a status in ``eligible_statuses``.

    Attributes:
        db: Async database session.
        eligible_statuses: Enrollment statuses that count as enrolled.
    """

    def __init__(self, db: AsyncSession, eligible_statuses: Sequence[str]) -> None:
        """Initialize enrollment directory.

        Args:
            db: Async database session.
            eligible_statuses: Enrollment statuses that count as enrolled.
        """
        self.db = db
        self.eligible_statuses = list(eligible_statuses)

    async def find_eligible_students(
        self,
        section_id: str,
        school_year: str,
        semester: str,
    ) -> list[EligibleStudent]:
        query = self._term_query(school_year, semester).where(
            StudentEnrollment.section_id == section_id,
        )
        return await self._fetch_ordered(query)

    async def find_students_for_term(
        self,
        school_year: str,
        semester: str,
    ) -> list[EligibleStudent]:
        return await self._fetch_ordered(self._term_query(school_year, semester))

    def _term_query(self, school_year: str, semester: str) -> Select:
        return (
            select(Student)
            .join(StudentEnrollment, StudentEnrollment.student_id == Student.student_id)
            .where(
                StudentEnrollment.school_year == school_year,
                StudentEnrollment.semester == semester,
                StudentEnrollment.status.in_(self.eligible_statuses),
            )
        )

    async def _fetch_ordered(self, query: Select) -> list[EligibleStudent]:
        """Run the query sorted by the database, falling back to unsorted.

        The sorted statement runs inside a savepoint so that a failure does
        not abort the surrounding transaction. Both paths go through
        sort_students, so the final ordering does not depend on which one
        ran or on the database collation.
        """
        ordered = query.order_by(
            func.lower(Student.last_name),
            func.lower(Student.first_name),
            Student.student_id,
        )
        try:
            async with self.db.begin_nested():
                result = await self.db.execute(ordered)
                rows = result.scalars().all()
        except (ProgrammingError, OperationalError) as e:
            logger.warning("Sorted student query failed, sorting client-side: %s", e)
            try:
                result = await self.db.execute(query)
                rows = result.scalars().all()
            except SQLAlchemyError as fallback_error:
                raise StorageError("Failed to fetch eligible students", fallback_error) from fallback_error
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch eligible students", e) from e

        students = [EligibleStudent.model_validate(row) for row in rows]
        return sort_students(students)
