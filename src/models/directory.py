# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory reference models.

Read-only views of strands, sections, subjects, teachers and the students
an enrollment record makes eligible for a class.
"""

from pydantic import BaseModel, ConfigDict, Field


class StrandSummary(BaseModel):
    """Academic strand."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None


class SectionSummary(BaseModel):
    """Section within a strand."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    strand_id: str


class SubjectSummary(BaseModel):
    """Subject offered under a strand."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    strand_id: str


class TeacherSummary(BaseModel):
    """Teacher identified by employee id."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        """Name as shown on class rosters."""
        return f"{self.first_name} {self.last_name}".strip()


class EligibleStudent(BaseModel):
    """Student the enrollment directory reports for a section or term."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    student_id: str = Field(description="School-issued student id")
    first_name: str = ""
    last_name: str = ""
    middle_name: str | None = None

    @property
    def full_name(self) -> str:
        """Given name first, used for search matching."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        """Surname first with middle initial, e.g. "Cruz, Ana M."."""
        name = f"{self.last_name}, {self.first_name}"
        if self.middle_name:
            name = f"{name} {self.middle_name[0]}."
        return name.strip(" ,")
