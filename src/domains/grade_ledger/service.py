# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade ledger service.

This module provides the GradeLedgerService class for:
- Batch grade submission with write-once semantics
- The locked/editable projection a grading form is rendered from

A submission batch is validated as a whole before any entry is touched,
and is committed together with a roster version bump so that two
teachers saving the same class cannot lose each other's grades.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domains.activity_log.service import ActivityLogService
from src.domains.grade_ledger.rules import GradeSnapshot, field_state, merge_grades
from src.domains.roster.exceptions import (
    NoChangesError,
    StudentNotFoundError,
    ValidationError,
)
from src.domains.roster.persistence import (
    commit_roster,
    entries_to_response,
    entry_sort_key,
    load_roster,
)
from src.infrastructure.database.models.roster import ClassRoster, GradeEntry
from src.models.grade import GradeEntryDisplayState, GradeEntryResponse, GradeSubmission

logger = logging.getLogger(__name__)


def _snapshot(entry: GradeEntry) -> GradeSnapshot:
    return GradeSnapshot(
        first_quarter_grade=entry.first_quarter_grade,
        second_quarter_grade=entry.second_quarter_grade,
        final_grade=entry.final_grade,
        rating=entry.rating,
        remarks=entry.remarks,
    )


class GradeLedgerService:
    """Service for recording roster grades.

    Attributes:
        db: Async database session.
        settings: Application settings.
        activity: Activity log writer sharing the same session.
    """

    def __init__(self, db: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize grade ledger service.

        Args:
            db: Async database session.
            settings: Application settings. Defaults to get_settings().
        """
        self.db = db
        self.settings = settings or get_settings()
        self.activity = ActivityLogService(db, self.settings)

    async def submit_grades(
        self,
        roster_id: str,
        submissions: list[GradeSubmission],
        performed_by: str,
    ) -> list[GradeEntryResponse]:
        """Record a batch of partial grade updates.

        Values are only written into fields that are still empty; anything
        already recorded is kept as it is. Final grade and rating are
        derived once both quarter grades are recorded.

        Args:
            roster_id: Roster identifier.
            submissions: Per-student partial updates.
            performed_by: Who is submitting the grades.

        Returns:
            Every grade entry of the roster, ordered by student name.

        Raises:
            ValidationError: If the batch is empty, repeats a student or has
                a grade out of range.
            RosterNotFoundError: If the roster does not exist.
            StudentNotFoundError: If a submitted student is not a member.
            NoChangesError: If nothing new would be recorded.
            RosterConflictError: If the roster changed concurrently.
            StorageError: If the commit fails.
        """
        self._validate_batch(submissions)

        roster = await load_roster(self.db, roster_id)

        entries: list[tuple[GradeEntry, GradeSubmission]] = []
        for submission in submissions:
            entry = roster.entry_for(submission.student_id)
            if not entry:
                raise StudentNotFoundError(submission.student_id, roster_id)
            entries.append((entry, submission))

        # Merge everything first; entries are only mutated once something changes
        merges = [
            (
                entry,
                merge_grades(
                    _snapshot(entry),
                    first_quarter_grade=submission.first_quarter_grade,
                    second_quarter_grade=submission.second_quarter_grade,
                    remarks=submission.remarks,
                ),
            )
            for entry, submission in entries
        ]
        if not any(result.changed for _, result in merges):
            raise NoChangesError(roster_id)

        for entry, result in merges:
            for name in result.changed_fields:
                setattr(entry, name, getattr(result.snapshot, name))
            if result.final_grade_derived:
                self.activity.record(
                    "Grade Added",
                    f"Final grade {entry.final_grade} recorded for {entry.student_name} "
                    f"in {roster.subject_name} ({roster.section_name})",
                    performed_by,
                    student_id=entry.student_id,
                )
        roster.touch()

        await commit_roster(self.db, roster_id)

        changed = sum(1 for _, result in merges if result.changed)
        logger.info(
            "Recorded grades for %d students in class roster %s by %s",
            changed,
            roster_id,
            performed_by,
        )

        return entries_to_response(roster)

    async def read_display_state(self, roster_id: str) -> list[GradeEntryDisplayState]:
        """Get which grade inputs of each member are locked.

        Args:
            roster_id: Roster identifier.

        Returns:
            Display state of every member, ordered by student name.

        Raises:
            RosterNotFoundError: If the roster does not exist.
        """
        roster = await load_roster(self.db, roster_id)
        return self.project_display_state(roster)

    @staticmethod
    def project_display_state(roster: ClassRoster) -> list[GradeEntryDisplayState]:
        """Project a loaded roster's entries to their display state."""
        return [
            GradeEntryDisplayState(
                student_id=entry.student_id,
                student_name=entry.student_name,
                first_quarter_grade=field_state(entry.first_quarter_grade),
                second_quarter_grade=field_state(entry.second_quarter_grade),
                remarks=field_state(entry.remarks),
                final_grade=entry.final_grade,
                rating=entry.rating,
            )
            for entry in sorted(roster.grade_entries, key=entry_sort_key)
        ]

    def _validate_batch(self, submissions: list[GradeSubmission]) -> None:
        """Reject the whole batch if any submission is invalid."""
        if not submissions:
            raise ValidationError("At least one grade submission is required", field="submissions")

        min_grade = self.settings.grading.min_grade
        max_grade = self.settings.grading.max_grade
        seen: set[str] = set()

        for submission in submissions:
            if submission.student_id in seen:
                raise ValidationError(
                    f"Student {submission.student_id} appears more than once in the batch",
                    field="student_id",
                    student_id=submission.student_id,
                )
            seen.add(submission.student_id)

            for name in ("first_quarter_grade", "second_quarter_grade"):
                value = getattr(submission, name)
                if value is not None and not min_grade <= value <= max_grade:
                    raise ValidationError(
                        f"{name} {value} for student {submission.student_id} must be "
                        f"between {min_grade} and {max_grade}",
                        field=name,
                        student_id=submission.student_id,
                    )
