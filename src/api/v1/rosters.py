# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class roster API endpoints.

This module provides endpoints for class roster management:
- POST / - Create a roster and auto-enroll eligible students
- GET / - List rosters of a teacher or a section
- GET /by-student/{student_id} - List rosters a student belongs to
- GET /{roster_id} - Get roster details with grade entries
- DELETE /{roster_id} - Delete a roster and its grades

Membership endpoints:
- GET /{roster_id}/candidates - Students available to add and enrolled
- POST /{roster_id}/students - Add a student
- DELETE /{roster_id}/students/{student_id} - Remove a student

Grade endpoints:
- POST /{roster_id}/grades - Submit a batch of grades
- GET /{roster_id}/grades/display-state - Locked/editable grade inputs
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_actor,
    get_grade_ledger_service,
    get_membership_service,
    get_roster_service,
)
from src.api.errors import to_http_exception
from src.domains.grade_ledger.service import GradeLedgerService
from src.domains.roster.exceptions import RosterServiceError
from src.domains.roster.membership import RosterMembershipService
from src.domains.roster.service import RosterService
from src.models.grade import GradeEntryDisplayState, GradeEntryResponse, SubmitGradesRequest
from src.models.roster import (
    AddStudentRequest,
    CandidateList,
    MembershipChangeResponse,
    RemoveStudentRequest,
    RosterCreateRequest,
    RosterResponse,
    RosterSummary,
)
from src.utils.datetime import default_school_year

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=RosterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create class roster",
    description="Create a class roster and enroll every eligible student of the section.",
)
async def create_roster(
    data: RosterCreateRequest,
    actor: str = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> RosterResponse:
    """Create a class roster.

    Args:
        data: Roster creation request.
        actor: Acting user.
        service: Roster service.

    Returns:
        Created roster.

    Raises:
        HTTPException: If invalid, unknown directory entries, or a duplicate.
    """
    logger.info(
        "Creating class roster: section %s subject %s by %s",
        data.section_id,
        data.subject_id,
        actor,
    )

    try:
        return await service.create_roster(request=data, performed_by=actor)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "",
    response_model=list[RosterSummary],
    summary="List class rosters",
    description="List the rosters of one teacher or one section.",
)
async def list_rosters(
    teacher_id: str | None = Query(None, description="Teacher employee id"),
    section_id: str | None = Query(None, description="Section id"),
    school_year: str | None = Query(None, description="School year; defaults to the current one"),
    service: RosterService = Depends(get_roster_service),
) -> list[RosterSummary]:
    """List rosters of a teacher or a section."""
    try:
        return await service.list_rosters_by(
            teacher_id=teacher_id,
            section_id=section_id,
            school_year=school_year or default_school_year(),
        )
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/by-student/{student_id}",
    response_model=list[RosterResponse],
    summary="List a student's class rosters",
)
async def list_rosters_for_student(
    student_id: str,
    school_year: str | None = Query(None, description="School year; defaults to the current one"),
    service: RosterService = Depends(get_roster_service),
) -> list[RosterResponse]:
    """List rosters the student is a member of, with their grades."""
    try:
        return await service.list_rosters_for_student(
            student_id,
            school_year=school_year or default_school_year(),
        )
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/{roster_id}",
    response_model=RosterResponse,
    summary="Get class roster",
)
async def get_roster(
    roster_id: str,
    service: RosterService = Depends(get_roster_service),
) -> RosterResponse:
    """Get a roster with its grade entries."""
    try:
        return await service.get_roster(roster_id)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{roster_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete class roster",
    description="Delete a roster together with every grade recorded in it.",
)
async def delete_roster(
    roster_id: str,
    actor: str = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> None:
    """Delete a roster.

    Raises:
        HTTPException: If the roster does not exist.
    """
    logger.info("Deleting class roster: %s by %s", roster_id, actor)

    try:
        await service.delete_roster(roster_id, performed_by=actor)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


# =========================================================================
# Membership
# =========================================================================


@router.get(
    "/{roster_id}/candidates",
    response_model=CandidateList,
    summary="List membership candidates",
)
async def list_candidates(
    roster_id: str,
    search: str | None = Query(None, description="Match on full name or student id"),
    service: RosterMembershipService = Depends(get_membership_service),
) -> CandidateList:
    """List students available to add and students already enrolled."""
    try:
        return await service.list_candidates(roster_id, search=search)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.post(
    "/{roster_id}/students",
    response_model=MembershipChangeResponse,
    summary="Add student to roster",
)
async def add_student(
    roster_id: str,
    data: AddStudentRequest,
    actor: str = Depends(get_actor),
    service: RosterMembershipService = Depends(get_membership_service),
) -> MembershipChangeResponse:
    """Add a student from the roster's term pool.

    Adding an existing member succeeds with ``changed`` false.
    """
    try:
        return await service.add_student(roster_id, data.student_id, performed_by=actor)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{roster_id}/students/{student_id}",
    response_model=MembershipChangeResponse,
    summary="Remove student from roster",
    description="Remove a student and discard their grades. Requires confirm=true.",
)
async def remove_student(
    roster_id: str,
    student_id: str,
    confirm: bool = Query(..., description="Must be true to discard the student's grades"),
    actor: str = Depends(get_actor),
    service: RosterMembershipService = Depends(get_membership_service),
) -> MembershipChangeResponse:
    """Remove a student from a roster."""
    logger.info("Removing student %s from class roster %s by %s", student_id, roster_id, actor)

    try:
        return await service.remove_student(
            roster_id,
            RemoveStudentRequest(student_id=student_id, confirm=confirm),
            performed_by=actor,
        )
    except RosterServiceError as e:
        raise to_http_exception(e) from e


# =========================================================================
# Grades
# =========================================================================


@router.post(
    "/{roster_id}/grades",
    response_model=list[GradeEntryResponse],
    summary="Submit grades",
    description="Record quarter grades and remarks. Already recorded values are never changed.",
)
async def submit_grades(
    roster_id: str,
    data: SubmitGradesRequest,
    actor: str = Depends(get_actor),
    service: GradeLedgerService = Depends(get_grade_ledger_service),
) -> list[GradeEntryResponse]:
    """Submit a batch of grades for a roster."""
    logger.info(
        "Submitting %d grade updates for class roster %s by %s",
        len(data.submissions),
        roster_id,
        actor,
    )

    try:
        return await service.submit_grades(roster_id, data.submissions, performed_by=actor)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/{roster_id}/grades/display-state",
    response_model=list[GradeEntryDisplayState],
    summary="Get grade input states",
)
async def read_display_state(
    roster_id: str,
    service: GradeLedgerService = Depends(get_grade_ledger_service),
) -> list[GradeEntryDisplayState]:
    """Get which grade inputs of each member are locked."""
    try:
        return await service.read_display_state(roster_id)
    except RosterServiceError as e:
        raise to_http_exception(e) from e
