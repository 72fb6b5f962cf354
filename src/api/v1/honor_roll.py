# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Honor roll API endpoints."""

import logging

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_honor_roll_service
from src.api.errors import to_http_exception
from src.domains.honor_roll.service import HonorRollService
from src.domains.roster.exceptions import RosterServiceError
from src.models.common import Semester
from src.models.honor_roll import HonorRollResponse
from src.utils.datetime import default_school_year

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/sections/{section_id}",
    response_model=HonorRollResponse,
    summary="Get section honor roll",
    description="Students of a section whose average final grade earns an honor distinction.",
)
async def get_section_honor_roll(
    section_id: str,
    semester: Semester = Query(..., description='"1st" or "2nd"'),
    school_year: str | None = Query(None, description="School year; defaults to the current one"),
    service: HonorRollService = Depends(get_honor_roll_service),
) -> HonorRollResponse:
    """Compute the honor roll of a section."""
    school_year = school_year or default_school_year()

    try:
        students = await service.compute(section_id, school_year, semester.value)
    except RosterServiceError as e:
        raise to_http_exception(e) from e

    return HonorRollResponse(
        section_id=section_id,
        school_year=school_year,
        semester=semester.value,
        students=students,
    )
