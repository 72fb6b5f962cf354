# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class roster and grade entry tables.

A ClassRoster is one class offering (section x subject x semester x school
year). Each member student owns exactly one GradeEntry row, so the roster's
membership is the set of its grade entries' student ids.

Every read-modify-write on a roster bumps ``class_rosters.version`` through
``version_id_col``. The UPDATE only matches the version that was read, which
turns concurrent writers into a StaleDataError instead of a lost update.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin
from src.utils.datetime import utc_now


class ClassRoster(Base, UUIDMixin, TimestampMixin):
    """Class offering with its member students and their grade entries.

    Section, subject and teacher names are snapshots taken when the roster
    is created; later directory renames do not touch them.
    """

    __tablename__ = "class_rosters"
    __table_args__ = (
        UniqueConstraint(
            "section_id",
            "subject_id",
            "semester",
            "school_year",
            name="uq_class_rosters_offering",
        ),
        Index("ix_class_rosters_teacher_year", "teacher_id", "school_year"),
        Index("ix_class_rosters_section_term", "section_id", "school_year", "semester"),
    )

    section_id: Mapped[str] = mapped_column(String(36), nullable=False)
    section_name: Mapped[str] = mapped_column(String(100), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False)
    subject_name: Mapped[str] = mapped_column(String(150), nullable=False)
    teacher_id: Mapped[str] = mapped_column(String(64), nullable=False)
    teacher_name: Mapped[str] = mapped_column(String(200), nullable=False)
    grade_level: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[str] = mapped_column(String(3), nullable=False)
    school_year: Mapped[str] = mapped_column(String(9), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    grade_entries: Mapped[list["GradeEntry"]] = relationship(
        back_populates="roster",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GradeEntry.student_name",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def student_ids(self) -> list[str]:
        """Ids of the current member students."""
        return [entry.student_id for entry in self.grade_entries]

    def entry_for(self, student_id: str) -> "GradeEntry | None":
        """Get the grade entry of a member student, if any."""
        for entry in self.grade_entries:
            if entry.student_id == student_id:
                return entry
        return None

    def touch(self) -> None:
        """Mark the roster modified so the flush bumps its version."""
        self.updated_at = utc_now()


class GradeEntry(Base, UUIDMixin):
    """One student's grades within one roster.

    NULL means "not yet recorded" for every field. A non-NULL value is
    final. ``rating`` is ``""`` once derived for a final grade below the
    honors threshold.
    """

    __tablename__ = "grade_entries"
    __table_args__ = (
        UniqueConstraint("roster_id", "student_id", name="uq_grade_entries_roster_student"),
    )

    roster_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("class_rosters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    first_quarter_grade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    second_quarter_grade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    final_grade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[str | None] = mapped_column(String(32), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    roster: Mapped[ClassRoster] = relationship(back_populates="grade_entries")
