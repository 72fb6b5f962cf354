# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Loading and committing class rosters.

Shared by the roster, membership and grade ledger services so that every
read-modify-write on a roster loads it the same way and maps commit
failures to the same errors.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from src.domains.roster.exceptions import (
    RosterConflictError,
    RosterNotFoundError,
    StorageError,
)
from src.infrastructure.database.models.roster import ClassRoster, GradeEntry
from src.models.grade import GradeEntryResponse

logger = logging.getLogger(__name__)


async def load_roster(db: AsyncSession, roster_id: str) -> ClassRoster:
    """Load a roster together with its grade entries.

    Args:
        db: Async database session.
        roster_id: Roster identifier.

    Returns:
        The roster, with grade_entries loaded.

    Raises:
        RosterNotFoundError: If the roster does not exist.
        StorageError: If the database read fails.
    """
    query = (
        select(ClassRoster)
        .options(selectinload(ClassRoster.grade_entries))
        .where(ClassRoster.id == roster_id)
    )
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to load class roster {roster_id}", e) from e

    roster = result.scalar_one_or_none()
    if not roster:
        raise RosterNotFoundError(roster_id)
    return roster


async def commit_roster(db: AsyncSession, roster_id: str) -> None:
    """Commit pending changes to a roster, rolling back on failure.

    Raises:
        RosterConflictError: If another writer committed a newer version first.
        StorageError: If the commit fails for any other reason.
    """
    try:
        await db.commit()
    except StaleDataError as e:
        await db.rollback()
        logger.warning("Concurrent modification of class roster %s", roster_id)
        raise RosterConflictError(roster_id, e) from e
    except SQLAlchemyError as e:
        await db.rollback()
        raise StorageError(f"Failed to save class roster {roster_id}", e) from e


def entry_sort_key(entry: GradeEntry) -> tuple[str, str]:
    """Order grade entries by their student name snapshot."""
    return (entry.student_name.casefold(), entry.student_id)


def entries_to_response(roster: ClassRoster) -> list[GradeEntryResponse]:
    """Convert a roster's grade entries, ordered by student name."""
    return [
        GradeEntryResponse.model_validate(entry)
        for entry in sorted(roster.grade_entries, key=entry_sort_key)
    ]
