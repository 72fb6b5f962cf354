# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster membership editing.

This module provides the RosterMembershipService class for:
- Listing students available to add and students already enrolled
- Adding a student from the roster's term pool
- Removing a student together with their grade entry

The pool of a roster is every student the enrollment directory reports for
the roster's school year and semester. Each change bumps the roster
version, so concurrent edits of the same roster conflict instead of
overwriting each other.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domains.activity_log.service import ActivityLogService
from src.domains.directory.base import EnrollmentDirectory, sort_students
from src.domains.roster.exceptions import StudentNotFoundError, ValidationError
from src.domains.roster.persistence import commit_roster, load_roster
from src.infrastructure.database.models.base import generate_uuid
from src.infrastructure.database.models.roster import ClassRoster, GradeEntry
from src.models.directory import EligibleStudent
from src.models.roster import (
    CandidateList,
    MembershipChangeResponse,
    RemoveStudentRequest,
    StudentCandidate,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_MIDDLE_INITIAL = re.compile(r"^(.+?)\s+([^\W\d_])\.$")


def _matches(student: EligibleStudent, search: str | None) -> bool:
    """Case-insensitive substring match on full name or student id."""
    if not search:
        return True
    needle = search.strip().casefold()
    return needle in student.full_name.casefold() or needle in student.student_id.casefold()


def _to_candidate(student: EligibleStudent) -> StudentCandidate:
    return StudentCandidate(
        student_id=student.student_id,
        first_name=student.first_name,
        last_name=student.last_name,
        middle_name=student.middle_name,
        display_name=student.display_name,
    )


def _from_snapshot(entry: GradeEntry) -> EligibleStudent:
    """Rebuild a student from a grade entry's "Last, First M." name snapshot.

    Only the middle initial survives in the snapshot, so it becomes the
    middle name.
    """
    last_name, _, given = entry.student_name.partition(",")
    match = _MIDDLE_INITIAL.match(given.strip())
    first_name, middle_name = match.groups() if match else (given.strip(), None)
    return EligibleStudent(
        student_id=entry.student_id,
        first_name=first_name,
        last_name=last_name.strip(),
        middle_name=middle_name,
    )


class RosterMembershipService:
    """Service for adding and removing roster members.

    Attributes:
        db: Async database session.
        enrollment: Eligible-student lookups.
        activity: Activity log writer sharing the same session.
    """

    def __init__(
        self,
        db: AsyncSession,
        enrollment: EnrollmentDirectory,
        settings: Settings | None = None,
    ) -> None:
        """Initialize membership service.

        Args:
            db: Async database session.
            enrollment: Enrollment directory implementation.
            settings: Application settings. Defaults to get_settings().
        """
        self.db = db
        self.enrollment = enrollment
        self.activity = ActivityLogService(db, settings or get_settings())

    async def list_candidates(
        self,
        roster_id: str,
        search: str | None = None,
    ) -> CandidateList:
        """List students available to add and students already enrolled.

        Args:
            roster_id: Roster identifier.
            search: Optional filter on full name or student id.

        Returns:
            Disjoint available and enrolled lists, both in roster order.

        Raises:
            RosterNotFoundError: If the roster does not exist.
        """
        roster = await load_roster(self.db, roster_id)
        pool = await self._term_pool(roster)
        members = set(roster.student_ids)

        available = [student for student in pool.values() if student.student_id not in members]
        enrolled = [
            pool.get(entry.student_id) or _from_snapshot(entry)
            for entry in roster.grade_entries
        ]

        return CandidateList(
            roster_id=roster.id,
            available=[
                _to_candidate(student)
                for student in sort_students(available)
                if _matches(student, search)
            ],
            enrolled=[
                _to_candidate(student)
                for student in sort_students(enrolled)
                if _matches(student, search)
            ],
        )

    async def add_student(
        self,
        roster_id: str,
        student_id: str,
        performed_by: str,
    ) -> MembershipChangeResponse:
        """Add a student from the roster's term pool.

        Adding a student who is already a member succeeds without changing
        anything, their grade entry included.

        Args:
            roster_id: Roster identifier.
            student_id: Student to add.
            performed_by: Who is adding the student.

        Returns:
            Outcome, with changed=False when the student was already a member.

        Raises:
            RosterNotFoundError: If the roster does not exist.
            StudentNotFoundError: If the student is not in the roster's term pool.
            RosterConflictError: If the roster changed concurrently.
        """
        roster = await load_roster(self.db, roster_id)

        if roster.entry_for(student_id):
            return MembershipChangeResponse(
                roster_id=roster.id,
                student_id=student_id,
                changed=False,
                student_count=len(roster.grade_entries),
            )

        pool = await self._term_pool(roster)
        student = pool.get(student_id)
        if not student:
            raise StudentNotFoundError(
                student_id,
                roster_id,
                reason="is not enrolled for the term of",
            )

        roster.grade_entries.append(
            GradeEntry(
                id=generate_uuid(),
                student_id=student.student_id,
                student_name=student.display_name,
                created_at=utc_now(),
            )
        )
        roster.touch()
        self.activity.record(
            "Student Added to Class",
            f"Added {student.display_name} to {roster.subject_name} ({roster.section_name})",
            performed_by,
            student_id=student.student_id,
        )
        await commit_roster(self.db, roster_id)

        logger.info("Added student %s to class roster %s by %s", student_id, roster_id, performed_by)

        return MembershipChangeResponse(
            roster_id=roster.id,
            student_id=student_id,
            changed=True,
            student_count=len(roster.grade_entries),
        )

    async def remove_student(
        self,
        roster_id: str,
        request: RemoveStudentRequest,
        performed_by: str,
    ) -> MembershipChangeResponse:
        """Remove a member and discard their grade entry.

        Args:
            roster_id: Roster identifier.
            request: Student to remove and the caller's confirmation.
            performed_by: Who is removing the student.

        Returns:
            Outcome, reporting whether the student is back in the pool.

        Raises:
            ValidationError: If the removal was not confirmed.
            RosterNotFoundError: If the roster does not exist.
            StudentNotFoundError: If the student is not a member.
            RosterConflictError: If the roster changed concurrently.
        """
        if request.confirm is not True:
            raise ValidationError(
                "Removing a student discards their grades and must be confirmed",
                field="confirm",
                student_id=request.student_id,
            )

        roster = await load_roster(self.db, roster_id)
        entry = roster.entry_for(request.student_id)
        if not entry:
            raise StudentNotFoundError(request.student_id, roster_id)

        pool = await self._term_pool(roster)

        roster.grade_entries.remove(entry)
        roster.touch()
        self.activity.record(
            "Student Removed from Class",
            f"Removed {entry.student_name} from {roster.subject_name} ({roster.section_name})",
            performed_by,
            student_id=entry.student_id,
        )
        await commit_roster(self.db, roster_id)

        logger.info(
            "Removed student %s from class roster %s by %s",
            request.student_id,
            roster_id,
            performed_by,
        )

        return MembershipChangeResponse(
            roster_id=roster.id,
            student_id=request.student_id,
            changed=True,
            student_count=len(roster.grade_entries),
            returned_to_pool=request.student_id in pool,
        )

    async def _term_pool(self, roster: ClassRoster) -> dict[str, EligibleStudent]:
        """Students eligible for the roster's term, keyed by student id."""
        students = await self.enrollment.find_students_for_term(
            roster.school_year,
            roster.semester,
        )
        return {student.student_id: student for student in sort_students(students)}
