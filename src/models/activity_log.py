# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity log request/response models."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ActivityLogQuery(BaseModel):
    """One page request against the activity log.

    The cursor comes from the previous page's ``next_cursor``; every query
    carries its own position.
    """

    student_id: str | None = Field(default=None, description="Only entries about this student")
    search: str | None = Field(default=None, description="Case-insensitive match on name or description")
    start_date: date | None = Field(default=None, description="First day included")
    end_date: date | None = Field(default=None, description="Last day included")
    limit: int | None = Field(default=None, ge=1, description="Page size")
    cursor: str | None = Field(default=None, description="Opaque position from a previous page")


class ActivityLogResponse(BaseModel):
    """Activity log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    name: str
    description: str
    logs_by: str
    created_at: datetime


class ActivityLogPage(BaseModel):
    """Page of activity log entries, newest first."""

    items: list[ActivityLogResponse]
    next_cursor: str | None = None
    has_more: bool = False
