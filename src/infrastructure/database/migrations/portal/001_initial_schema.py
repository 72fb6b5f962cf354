# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial portal database schema.

Creates the directory reference tables, class rosters with their grade
entries, and the activity log.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-06-02
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    """Create portal database tables."""
    # =========================================================================
    # DIRECTORY TABLES
    # =========================================================================

    op.create_table(
        "strands",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
    )

    op.create_table(
        "sections",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "strand_id",
            sa.String(36),
            sa.ForeignKey("strands.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_sections_strand_id", "sections", ["strand_id"])

    op.create_table(
        "subjects",
        _id_column(),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "strand_id",
            sa.String(36),
            sa.ForeignKey("strands.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_subjects_strand_id", "subjects", ["strand_id"])

    op.create_table(
        "teachers",
        _id_column(),
        sa.Column("employee_id", sa.String(64), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.UniqueConstraint("employee_id", name="uq_teachers_employee_id"),
    )

    op.create_table(
        "students",
        _id_column(),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("middle_name", sa.String(100), nullable=True),
        sa.UniqueConstraint("student_id", name="uq_students_student_id"),
    )

    op.create_table(
        "student_enrollments",
        _id_column(),
        sa.Column(
            "student_id",
            sa.String(64),
            sa.ForeignKey("students.student_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "section_id",
            sa.String(36),
            sa.ForeignKey("sections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("school_year", sa.String(9), nullable=False),
        sa.Column("semester", sa.String(3), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        _timestamp_column("created_at"),
    )
    op.create_index("ix_student_enrollments_student_id", "student_enrollments", ["student_id"])
    op.create_index(
        "ix_student_enrollments_term",
        "student_enrollments",
        ["school_year", "semester", "status"],
    )
    op.create_index(
        "ix_student_enrollments_section_term",
        "student_enrollments",
        ["section_id", "school_year", "semester"],
    )

    # =========================================================================
    # ROSTER TABLES
    # =========================================================================

    op.create_table(
        "class_rosters",
        _id_column(),
        sa.Column("section_id", sa.String(36), nullable=False),
        sa.Column("section_name", sa.String(100), nullable=False),
        sa.Column("subject_id", sa.String(36), nullable=False),
        sa.Column("subject_name", sa.String(150), nullable=False),
        sa.Column("teacher_id", sa.String(64), nullable=False),
        sa.Column("teacher_name", sa.String(200), nullable=False),
        sa.Column("grade_level", sa.String(20), nullable=False),
        sa.Column("semester", sa.String(3), nullable=False),
        sa.Column("school_year", sa.String(9), nullable=False),
        sa.Column("version", sa.Integer, nullable=False),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.UniqueConstraint(
            "section_id",
            "subject_id",
            "semester",
            "school_year",
            name="uq_class_rosters_offering",
        ),
    )
    op.create_index(
        "ix_class_rosters_teacher_year",
        "class_rosters",
        ["teacher_id", "school_year"],
    )
    op.create_index(
        "ix_class_rosters_section_term",
        "class_rosters",
        ["section_id", "school_year", "semester"],
    )

    op.create_table(
        "grade_entries",
        _id_column(),
        sa.Column(
            "roster_id",
            sa.String(36),
            sa.ForeignKey("class_rosters.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("student_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("first_quarter_grade", sa.Integer, nullable=True),
        sa.Column("second_quarter_grade", sa.Integer, nullable=True),
        sa.Column("final_grade", sa.Integer, nullable=True),
        sa.Column("rating", sa.String(32), nullable=True),
        sa.Column("remarks", sa.Text, nullable=True),
        _timestamp_column("created_at"),
        sa.UniqueConstraint("roster_id", "student_id", name="uq_grade_entries_roster_student"),
    )
    op.create_index("ix_grade_entries_roster_id", "grade_entries", ["roster_id"])
    op.create_index("ix_grade_entries_student_id", "grade_entries", ["student_id"])

    # =========================================================================
    # ACTIVITY LOG
    # =========================================================================

    op.create_table(
        "activity_logs",
        _id_column(),
        sa.Column("student_id", sa.String(64), nullable=False, server_default="SYSTEM"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("logs_by", sa.String(200), nullable=False),
        _timestamp_column("created_at"),
    )
    op.create_index("ix_activity_logs_created_id", "activity_logs", ["created_at", "id"])
    op.create_index(
        "ix_activity_logs_student_created",
        "activity_logs",
        ["student_id", "created_at"],
    )


def downgrade() -> None:
    """Drop portal database tables."""
    op.drop_table("activity_logs")
    op.drop_table("grade_entries")
    op.drop_table("class_rosters")
    op.drop_table("student_enrollments")
    op.drop_table("students")
    op.drop_table("teachers")
    op.drop_table("subjects")
    op.drop_table("sections")
    op.drop_table("strands")
