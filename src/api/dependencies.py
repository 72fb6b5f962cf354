# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Identify the acting user
- Get service instances wired to the request's session

Example:
    @router.get("/rosters/{roster_id}")
    async def get_roster(
        roster_id: str,
        service: RosterService = Depends(get_roster_service),
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domains.activity_log.service import ActivityLogService
from src.domains.directory.service import DirectoryService, EnrollmentDirectoryService
from src.domains.grade_ledger.service import GradeLedgerService
from src.domains.honor_roll.service import HonorRollService
from src.domains.roster.membership import RosterMembershipService
from src.domains.roster.service import RosterService
from src.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)
from src.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

DEFAULT_ACTOR = "system"


async def init_db() -> None:
    """Initialize the portal database connection pool."""
    await init_database(get_settings())


async def close_db() -> None:
    """Close the portal database connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get portal database session.

    Yields:
        AsyncSession for the portal database.
    """
    async with get_session() as session:
        yield session


async def get_actor(
    x_actor: Annotated[str | None, Header(description="Name of the acting user")] = None,
) -> AsyncGenerator[str, None]:
    """Get the acting user recorded in the activity log.

    Authentication happens upstream; the gateway forwards the
    authenticated user's display name in the X-Actor header. The actor is
    bound to the log context until the request finishes.

    Yields:
        The actor name, or "system" when the header is missing or blank.
    """
    actor = x_actor.strip() if x_actor and x_actor.strip() else DEFAULT_ACTOR
    bind_context(actor=actor)
    try:
        yield actor
    finally:
        clear_context()


# =========================================================================
# Service Dependencies
# =========================================================================


def get_directory_service(db: AsyncSession = Depends(get_db)) -> DirectoryService:
    """Get directory lookup service."""
    return DirectoryService(db=db)


def get_enrollment_directory(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> EnrollmentDirectoryService:
    """Get enrollment directory with the configured eligible statuses."""
    return EnrollmentDirectoryService(
        db=db,
        eligible_statuses=settings.enrollment.eligible_statuses,
    )


def get_roster_service(
    db: AsyncSession = Depends(get_db),
    directory: DirectoryService = Depends(get_directory_service),
    enrollment: EnrollmentDirectoryService = Depends(get_enrollment_directory),
    settings: Settings = Depends(get_settings),
) -> RosterService:
    """Get roster service instance."""
    return RosterService(db=db, directory=directory, enrollment=enrollment, settings=settings)


def get_membership_service(
    db: AsyncSession = Depends(get_db),
    enrollment: EnrollmentDirectoryService = Depends(get_enrollment_directory),
    settings: Settings = Depends(get_settings),
) -> RosterMembershipService:
    """Get roster membership service instance."""
    return RosterMembershipService(db=db, enrollment=enrollment, settings=settings)


def get_grade_ledger_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> GradeLedgerService:
    """Get grade ledger service instance."""
    return GradeLedgerService(db=db, settings=settings)


def get_activity_log_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ActivityLogService:
    """Get activity log service instance."""
    return ActivityLogService(db=db, settings=settings)


def get_honor_roll_service(
    db: AsyncSession = Depends(get_db),
    enrollment: EnrollmentDirectoryService = Depends(get_enrollment_directory),
) -> HonorRollService:
    """Get honor roll service instance."""
    return HonorRollService(db=db, enrollment=enrollment)
