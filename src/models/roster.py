# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class roster request/response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.grade import GradeEntryResponse


class RosterCreateRequest(BaseModel):
    """Request to create a class roster.

    Values are checked by RosterService so that blank or unknown values are
    reported as roster validation errors.
    """

    section_id: str = Field(description="Section the class is for")
    subject_id: str = Field(description="Subject taught")
    teacher_id: str = Field(description="Employee id of the assigned teacher")
    grade_level: str = Field(description='"Grade 11" or "Grade 12"')
    semester: str = Field(description='"1st" or "2nd"')
    school_year: str = Field(description='School year, e.g. "2024-2025"')


class RosterResponse(BaseModel):
    """Full class roster with its grade entries."""

    id: str
    section_id: str
    section_name: str
    subject_id: str
    subject_name: str
    teacher_id: str
    teacher_name: str
    grade_level: str
    semester: str
    school_year: str
    student_ids: list[str]
    student_count: int
    grade_entries: list[GradeEntryResponse] = Field(default_factory=list)
    auto_enrolled_count: int | None = Field(
        default=None,
        description="Students enrolled automatically at creation",
    )
    created_at: datetime
    updated_at: datetime


class RosterSummary(BaseModel):
    """Roster row for listings."""

    id: str
    section_id: str
    section_name: str
    subject_id: str
    subject_name: str
    teacher_id: str
    teacher_name: str
    grade_level: str
    semester: str
    school_year: str
    student_count: int
    created_at: datetime


class StudentCandidate(BaseModel):
    """Student shown in the membership editor."""

    student_id: str
    first_name: str = ""
    last_name: str = ""
    middle_name: str | None = None
    display_name: str


class CandidateList(BaseModel):
    """Students available to add and students already in the roster."""

    roster_id: str
    available: list[StudentCandidate]
    enrolled: list[StudentCandidate]


class AddStudentRequest(BaseModel):
    """Request to add a student to a roster."""

    student_id: str = Field(min_length=1)


class RemoveStudentRequest(BaseModel):
    """Request to remove a student from a roster.

    Removal discards the student's grade entry, committed grades included,
    so the caller has to confirm explicitly.
    """

    student_id: str = Field(min_length=1)
    confirm: bool = Field(description="Must be true to discard the student's grades")


class MembershipChangeResponse(BaseModel):
    """Outcome of adding or removing a roster member."""

    roster_id: str
    student_id: str
    changed: bool = Field(description="False when the call left the roster as it was")
    student_count: int
    returned_to_pool: bool | None = Field(
        default=None,
        description="After removal: whether the student is still eligible to be re-added",
    )
