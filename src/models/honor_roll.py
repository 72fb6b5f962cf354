# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Honor roll response models."""

from pydantic import BaseModel, Field


class HonorStudent(BaseModel):
    """Student qualifying for an honor distinction in a term."""

    student_id: str
    student_name: str
    average_grade: float = Field(description="Mean final grade, two decimals")
    total_subjects: int = Field(description="Subjects with a final grade")
    distinction: str


class HonorRollResponse(BaseModel):
    """Honor roll of a section for one term."""

    section_id: str
    school_year: str
    semester: str
    students: list[HonorStudent]
