# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory reference tables.

Strands, sections, subjects, teachers, students and enrollment records are
maintained by the administration and enrollment-approval workflows. The
roster core only reads them.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, UUIDMixin
from src.utils.datetime import utc_now


class Strand(Base, UUIDMixin):
    """Academic strand (e.g. STEM, ABM)."""

    __tablename__ = "strands"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Section(Base, UUIDMixin):
    """Section belonging to a strand."""

    __tablename__ = "sections"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    strand_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("strands.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Subject(Base, UUIDMixin):
    """Subject offered under a strand."""

    __tablename__ = "subjects"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    strand_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("strands.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Teacher(Base, UUIDMixin):
    """Teacher profile, referenced by employee id."""

    __tablename__ = "teachers"

    employee_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    @property
    def full_name(self) -> str:
        """Name as shown on class rosters."""
        return f"{self.first_name} {self.last_name}".strip()


class Student(Base, UUIDMixin):
    """Student profile, referenced by school-issued student id."""

    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)


class StudentEnrollment(Base, UUIDMixin):
    """Enrollment record tying a student to one section for one term."""

    __tablename__ = "student_enrollments"
    __table_args__ = (
        Index("ix_student_enrollments_term", "school_year", "semester", "status"),
        Index("ix_student_enrollments_section_term", "section_id", "school_year", "semester"),
    )

    student_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("students.student_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
    )
    school_year: Mapped[str] = mapped_column(String(9), nullable=False)
    semester: Mapped[str] = mapped_column(String(3), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
