# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity log table.

Append-only audit trail of roster and grade changes. Non-student events
use ``SYSTEM`` as their student id.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, UUIDMixin
from src.utils.datetime import utc_now

SYSTEM_STUDENT_ID = "SYSTEM"


class ActivityLog(Base, UUIDMixin):
    """Single activity log entry."""

    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_created_id", "created_at", "id"),
        Index("ix_activity_logs_student_created", "student_id", "created_at"),
    )

    student_id: Mapped[str] = mapped_column(String(64), nullable=False, default=SYSTEM_STUDENT_ID)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    logs_by: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
