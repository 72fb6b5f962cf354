# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity log API endpoints.

- GET / - Page through the activity log, newest first
- GET /students/{student_id} - A student's own activity
- DELETE /{log_id} - Delete one entry
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_activity_log_service, get_actor
from src.api.errors import to_http_exception
from src.domains.activity_log.service import ActivityLogService
from src.domains.roster.exceptions import RosterServiceError
from src.models.activity_log import ActivityLogPage, ActivityLogQuery

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ActivityLogPage,
    summary="List activity logs",
    description="Page through activity logs. Pass next_cursor back as cursor for the next page.",
)
async def list_activity_logs(
    search: str | None = Query(None, description="Match on name or description"),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    limit: int | None = Query(None, ge=1),
    cursor: str | None = Query(None),
    service: ActivityLogService = Depends(get_activity_log_service),
) -> ActivityLogPage:
    """List activity log entries."""
    try:
        return await service.query(
            ActivityLogQuery(
                search=search,
                start_date=start_date,
                end_date=end_date,
                limit=limit,
                cursor=cursor,
            )
        )
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/students/{student_id}",
    response_model=ActivityLogPage,
    summary="List a student's activity logs",
)
async def list_student_activity_logs(
    student_id: str,
    limit: int | None = Query(None, ge=1),
    cursor: str | None = Query(None),
    service: ActivityLogService = Depends(get_activity_log_service),
) -> ActivityLogPage:
    """List activity log entries about one student."""
    try:
        return await service.query(
            ActivityLogQuery(student_id=student_id, limit=limit, cursor=cursor)
        )
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{log_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete activity log entry",
)
async def delete_activity_log(
    log_id: str,
    actor: str = Depends(get_actor),
    service: ActivityLogService = Depends(get_activity_log_service),
) -> None:
    """Delete one activity log entry."""
    logger.info("Deleting activity log %s by %s", log_id, actor)

    try:
        await service.delete_log(log_id)
    except RosterServiceError as e:
        raise to_http_exception(e) from e
