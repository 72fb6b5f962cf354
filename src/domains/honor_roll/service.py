# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Honor roll service.

Averages each student's committed final grades across every roster of a
section in one term and ranks those who reach an honor distinction.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.directory.base import EnrollmentDirectory, sort_students
from src.domains.grade_ledger.rules import HONOR_THRESHOLDS, compute_rating
from src.domains.roster.exceptions import StorageError, ValidationError
from src.infrastructure.database.models.roster import ClassRoster
from src.models.honor_roll import HonorStudent
from src.utils.datetime import is_valid_school_year

logger = logging.getLogger(__name__)

HONOR_MINIMUM = HONOR_THRESHOLDS[-1][0]


class HonorRollService:
    """Service for computing section honor rolls.

    Attributes:
        db: Async database session.
        enrollment: Eligible-student lookups.
    """

    def __init__(self, db: AsyncSession, enrollment: EnrollmentDirectory) -> None:
        """Initialize honor roll service.

        Args:
            db: Async database session.
            enrollment: Enrollment directory implementation.
        """
        self.db = db
        self.enrollment = enrollment

    async def compute(
        self,
        section_id: str,
        school_year: str,
        semester: str,
    ) -> list[HonorStudent]:
        """Compute the honor roll of a section for one term.

        Args:
            section_id: Section identifier.
            school_year: School year, e.g. "2024-2025".
            semester: "1st" or "2nd".

        Returns:
            Students averaging at least the lowest honor threshold, highest
            average first, then by name.

        Raises:
            ValidationError: If the school year is malformed.
            StorageError: If a database read fails.
        """
        if not is_valid_school_year(school_year):
            raise ValidationError(
                f"Invalid school year '{school_year}', expected YYYY-YYYY",
                field="school_year",
            )

        students = sort_students(
            await self.enrollment.find_eligible_students(section_id, school_year, semester)
        )

        query = (
            select(ClassRoster)
            .options(selectinload(ClassRoster.grade_entries))
            .where(
                ClassRoster.section_id == section_id,
                ClassRoster.school_year == school_year,
                ClassRoster.semester == semester,
            )
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to fetch class rosters of section {section_id}", e) from e

        final_grades: dict[str, list[int]] = defaultdict(list)
        for roster in result.scalars().all():
            for entry in roster.grade_entries:
                if entry.final_grade is not None:
                    final_grades[entry.student_id].append(entry.final_grade)

        honors = []
        for student in students:
            grades = final_grades.get(student.student_id)
            if not grades:
                continue
            average = (Decimal(sum(grades)) / len(grades)).quantize(
                Decimal("0.01"),
                rounding=ROUND_HALF_UP,
            )
            if average < HONOR_MINIMUM:
                continue
            honors.append(
                HonorStudent(
                    student_id=student.student_id,
                    student_name=student.display_name,
                    average_grade=float(average),
                    total_subjects=len(grades),
                    distinction=compute_rating(average),
                )
            )

        honors.sort(key=lambda honor: (-honor.average_grade, honor.student_name.casefold()))

        logger.debug(
            "Computed honor roll for section %s (%s %s): %d students",
            section_id,
            school_year,
            semester,
            len(honors),
        )
        return honors
