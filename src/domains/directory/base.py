# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Abstract directory interfaces consumed by the roster services.

The directory (strands, sections, subjects, teachers) and the enrollment
directory (which students are enrolled where) are owned by the
administration and enrollment-approval workflows. The roster core reads
them through these interfaces only.

Implementations must surface persistence failures as StorageError.
"""

from abc import ABC, abstractmethod

from src.models.directory import (
    EligibleStudent,
    SectionSummary,
    StrandSummary,
    SubjectSummary,
    TeacherSummary,
)


def student_sort_key(student: EligibleStudent) -> tuple[str, str, str]:
    """Canonical roster ordering: surname, given name, then student id."""
    return (
        student.last_name.casefold(),
        student.first_name.casefold(),
        student.student_id,
    )


def sort_students(students: list[EligibleStudent]) -> list[EligibleStudent]:
    """Deduplicate by student id and sort by the canonical roster ordering."""
    unique: dict[str, EligibleStudent] = {}
    for student in students:
        unique.setdefault(student.student_id, student)
    return sorted(unique.values(), key=student_sort_key)


class DirectoryLookup(ABC):
    """Read-only strand, section, subject and teacher reference data."""

    @abstractmethod
    async def list_strands(self) -> list[StrandSummary]:
        """List all strands."""

    @abstractmethod
    async def list_sections_by_strand(self, strand_id: str) -> list[SectionSummary]:
        """List the sections of a strand."""

    @abstractmethod
    async def list_subjects_by_strand(self, strand_id: str) -> list[SubjectSummary]:
        """List the subjects of a strand."""

    @abstractmethod
    async def list_teachers(self) -> list[TeacherSummary]:
        """List all teachers."""

    @abstractmethod
    async def get_section(self, section_id: str) -> SectionSummary | None:
        """Get a section by id, or None if it does not exist."""

    @abstractmethod
    async def get_subject(self, subject_id: str) -> SubjectSummary | None:
        """Get a subject by id, or None if it does not exist."""

    @abstractmethod
    async def get_teacher(self, teacher_id: str) -> TeacherSummary | None:
        """Get a teacher by employee id, or None if it does not exist."""


class EnrollmentDirectory(ABC):
    """Read-only view of which students are enrolled for which term.

    Both finders return students deduplicated and ordered with
    student_sort_key, whichever query path produced them.
    """

    @abstractmethod
    async def find_eligible_students(
        self,
        section_id: str,
        school_year: str,
        semester: str,
    ) -> list[EligibleStudent]:
        """Students eligible for classes of one section in one term."""

    @abstractmethod
    async def find_students_for_term(
        self,
        school_year: str,
        semester: str,
    ) -> list[EligibleStudent]:
        """Students eligible for any class in one term."""
