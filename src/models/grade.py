# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade ledger request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import FieldState


class GradeSubmission(BaseModel):
    """Partial grade update for one student.

    Omitted fields (None) are left as they are. Range checks happen in the
    ledger so that the whole batch can be rejected with the offending
    student and field named.
    """

    student_id: str = Field(min_length=1, description="Member student id")
    first_quarter_grade: int | None = Field(default=None, description="First quarter grade")
    second_quarter_grade: int | None = Field(default=None, description="Second quarter grade")
    remarks: str | None = Field(default=None, description="Free-text remarks")


class SubmitGradesRequest(BaseModel):
    """Batch of grade updates for one roster."""

    submissions: list[GradeSubmission] = Field(
        description="Per-student partial updates",
    )


class GradeEntryResponse(BaseModel):
    """Stored grade entry of a roster member."""

    model_config = ConfigDict(from_attributes=True)

    student_id: str
    student_name: str
    first_quarter_grade: int | None = None
    second_quarter_grade: int | None = None
    final_grade: int | None = None
    rating: str | None = None
    remarks: str | None = None
    created_at: datetime


class GradeEntryDisplayState(BaseModel):
    """Which grade inputs of a member are locked or still editable."""

    student_id: str
    student_name: str
    first_quarter_grade: FieldState
    second_quarter_grade: FieldState
    remarks: FieldState
    final_grade: int | None = Field(default=None, description="Derived final grade, if any")
    rating: str | None = Field(default=None, description="Derived honor rating, if any")
