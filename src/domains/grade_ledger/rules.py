# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pure grade ledger rules.

Each grade field moves one way only, from absent (None) to set. The merge
below never overwrites a set value, and the final grade and rating are
derived exactly once, from the two committed quarter grades.

Nothing here touches the database, so the rules are usable (and tested)
on their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal

from src.models.common import HonorRating

# Lowest grade of each distinction, highest first
HONOR_THRESHOLDS: tuple[tuple[int, HonorRating], ...] = (
    (98, HonorRating.WITH_HIGHEST_HONORS),
    (95, HonorRating.WITH_HIGH_HONORS),
    (90, HonorRating.WITH_HONORS),
)

INPUT_FIELDS = ("first_quarter_grade", "second_quarter_grade", "remarks")


def round_half_up(value: Decimal | float | int) -> int:
    """Round to the nearest integer, halves away from zero.

    Example:
        >>> round_half_up(Decimal("89.5"))
        90
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_final_grade(first_quarter: int, second_quarter: int) -> int:
    """Average of the two quarter grades, rounded half up."""
    return round_half_up(Decimal(first_quarter + second_quarter) / 2)


def compute_rating(grade: Decimal | float | int) -> str:
    """Honor distinction for a final or average grade.

    Returns ``""`` below the lowest threshold.
    """
    for threshold, rating in HONOR_THRESHOLDS:
        if grade >= threshold:
            return rating.value
    return HonorRating.NONE.value


def normalize_remarks(remarks: str | None) -> str | None:
    """Treat blank remarks as omitted."""
    if remarks is None or not remarks.strip():
        return None
    return remarks.strip()


@dataclass(frozen=True)
class GradeSnapshot:
    """Values of one grade entry; None means absent."""

    first_quarter_grade: int | None = None
    second_quarter_grade: int | None = None
    final_grade: int | None = None
    rating: str | None = None
    remarks: str | None = None


@dataclass(frozen=True)
class MergeResult:
    """Outcome of merging a submission into a snapshot.

    Attributes:
        snapshot: The merged values.
        changed_fields: Fields that went from absent to set.
        final_grade_derived: Whether this merge derived the final grade.
    """

    snapshot: GradeSnapshot
    changed_fields: tuple[str, ...] = field(default_factory=tuple)
    final_grade_derived: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.changed_fields)


def merge_grades(
    current: GradeSnapshot,
    first_quarter_grade: int | None = None,
    second_quarter_grade: int | None = None,
    remarks: str | None = None,
) -> MergeResult:
    """Merge submitted values into a stored snapshot.

    A submitted value is written only into an absent field; a set value
    always wins. Once both quarters are set and the final grade is still
    absent, the final grade and rating are derived.

    Args:
        current: Stored values.
        first_quarter_grade: Submitted first quarter grade, or None.
        second_quarter_grade: Submitted second quarter grade, or None.
        remarks: Submitted remarks, or None.

    Returns:
        The merged snapshot and which fields changed.

    Example:
        >>> result = merge_grades(GradeSnapshot(first_quarter_grade=96), second_quarter_grade=100)
        >>> result.snapshot.final_grade, result.snapshot.rating
        (98, 'With Highest Honors')
    """
    updates: dict = {}
    submitted = {
        "first_quarter_grade": first_quarter_grade,
        "second_quarter_grade": second_quarter_grade,
        "remarks": normalize_remarks(remarks),
    }
    for name, value in submitted.items():
        if value is not None and getattr(current, name) is None:
            updates[name] = value

    merged = replace(current, **updates)

    derived = False
    if (
        merged.final_grade is None
        and merged.first_quarter_grade is not None
        and merged.second_quarter_grade is not None
    ):
        final_grade = compute_final_grade(merged.first_quarter_grade, merged.second_quarter_grade)
        updates["final_grade"] = final_grade
        derived = True
        if merged.rating is None:
            updates["rating"] = compute_rating(final_grade)
        merged = replace(current, **updates)

    return MergeResult(
        snapshot=merged,
        changed_fields=tuple(updates),
        final_grade_derived=derived,
    )


def field_state(value: object) -> str:
    """Display state of an input field: locked once set."""
    return "locked" if value is not None else "editable"
