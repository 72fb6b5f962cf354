# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity log service.

Entries are recorded by the roster, membership and grade ledger services
inside their own transactions, so a log entry exists exactly when the
change it describes was committed.

Reading is keyset-paginated, newest first. Each page request carries its
own cursor, which encodes the (created_at, id) of the last row returned.
"""

from __future__ import annotations

import base64
import binascii
import logging

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domains.roster.exceptions import (
    ActivityLogNotFoundError,
    StorageError,
    ValidationError,
)
from src.infrastructure.database.models.activity_log import SYSTEM_STUDENT_ID, ActivityLog
from src.infrastructure.database.models.base import generate_uuid
from src.models.activity_log import ActivityLogPage, ActivityLogQuery, ActivityLogResponse
from src.utils.datetime import end_of_day, format_iso, parse_iso, start_of_day, utc_now

logger = logging.getLogger(__name__)

_CURSOR_SEPARATOR = "|"


def encode_cursor(entry: ActivityLog) -> str:
    """Encode the position right after an entry."""
    raw = f"{format_iso(entry.created_at)}{_CURSOR_SEPARATOR}{entry.id}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> tuple:
    """Decode a cursor into its (created_at, id) position.

    Raises:
        ValidationError: If the cursor was not produced by encode_cursor.
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
        created_at, log_id = raw.split(_CURSOR_SEPARATOR, 1)
        position = parse_iso(created_at)
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ValidationError("Malformed activity log cursor", field="cursor") from e
    if position is None or not log_id:
        raise ValidationError("Malformed activity log cursor", field="cursor")
    return position, log_id


class ActivityLogService:
    """Service for the roster activity log.

    Attributes:
        db: Async database session.
        settings: Application settings.
    """

    def __init__(self, db: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize activity log service.

        Args:
            db: Async database session.
            settings: Application settings. Defaults to get_settings().
        """
        self.db = db
        self.settings = settings or get_settings()

    def record(
        self,
        name: str,
        description: str,
        logs_by: str,
        student_id: str = SYSTEM_STUDENT_ID,
    ) -> ActivityLog:
        """Add a log entry to the current transaction.

        Nothing is flushed here; the entry is committed or rolled back
        together with the caller's change.

        Args:
            name: Short event name, e.g. "Class Created".
            description: Human-readable details.
            logs_by: Who performed the change.
            student_id: Student the event is about, or SYSTEM.

        Returns:
            The pending log entry.
        """
        entry = ActivityLog(
            id=generate_uuid(),
            student_id=student_id,
            name=name,
            description=description,
            logs_by=logs_by,
            created_at=utc_now(),
        )
        self.db.add(entry)
        return entry

    async def query(self, query: ActivityLogQuery) -> ActivityLogPage:
        """Fetch one page of log entries, newest first.

        Args:
            query: Filters, page size and cursor.

        Returns:
            Page of entries with the cursor for the next page.

        Raises:
            ValidationError: If the cursor is malformed or the date range is inverted.
            StorageError: If the database read fails.
        """
        limit = self._page_size(query.limit)

        if query.start_date and query.end_date and query.start_date > query.end_date:
            raise ValidationError("start_date must not be after end_date", field="start_date")

        conditions = []

        if query.student_id:
            conditions.append(ActivityLog.student_id == query.student_id)

        if query.search:
            search_pattern = f"%{query.search}%"
            conditions.append(
                (ActivityLog.name.ilike(search_pattern)) |
                (ActivityLog.description.ilike(search_pattern))
            )

        if query.start_date:
            conditions.append(ActivityLog.created_at >= start_of_day(query.start_date))

        if query.end_date:
            conditions.append(ActivityLog.created_at <= end_of_day(query.end_date))

        if query.cursor:
            created_at, log_id = decode_cursor(query.cursor)
            conditions.append(
                or_(
                    ActivityLog.created_at < created_at,
                    and_(ActivityLog.created_at == created_at, ActivityLog.id < log_id),
                )
            )

        stmt = select(ActivityLog)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        # One extra row tells whether another page exists
        stmt = stmt.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit + 1)

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch activity logs", e) from e
        rows = list(result.scalars().all())

        has_more = len(rows) > limit
        rows = rows[:limit]

        return ActivityLogPage(
            items=[ActivityLogResponse.model_validate(row) for row in rows],
            next_cursor=encode_cursor(rows[-1]) if has_more and rows else None,
            has_more=has_more,
        )

    async def delete_log(self, log_id: str) -> None:
        """Delete a single log entry.

        Args:
            log_id: Log entry identifier.

        Raises:
            ActivityLogNotFoundError: If the entry does not exist.
            StorageError: If the delete fails.
        """
        try:
            result = await self.db.execute(delete(ActivityLog).where(ActivityLog.id == log_id))
            if result.rowcount == 0:
                await self.db.rollback()
                raise ActivityLogNotFoundError(log_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(f"Failed to delete activity log {log_id}", e) from e

        logger.info("Deleted activity log: %s", log_id)

    def _page_size(self, requested: int | None) -> int:
        if requested is None:
            return self.settings.activity_log.page_size
        return min(requested, self.settings.activity_log.max_page_size)
