# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory API endpoints.

Read-only reference data used to fill the roster creation form:
- GET /strands
- GET /strands/{strand_id}/sections
- GET /strands/{strand_id}/subjects
- GET /teachers
- GET /school-years
"""

import logging

from fastapi import APIRouter, Depends

from src.api.dependencies import get_directory_service
from src.api.errors import to_http_exception
from src.domains.directory.service import DirectoryService
from src.domains.roster.exceptions import RosterServiceError
from src.models.directory import SectionSummary, StrandSummary, SubjectSummary, TeacherSummary
from src.utils.datetime import default_school_year, school_year_options

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/strands", response_model=list[StrandSummary], summary="List strands")
async def list_strands(
    service: DirectoryService = Depends(get_directory_service),
) -> list[StrandSummary]:
    try:
        return await service.list_strands()
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/strands/{strand_id}/sections",
    response_model=list[SectionSummary],
    summary="List sections of a strand",
)
async def list_sections(
    strand_id: str,
    service: DirectoryService = Depends(get_directory_service),
) -> list[SectionSummary]:
    try:
        return await service.list_sections_by_strand(strand_id)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/strands/{strand_id}/subjects",
    response_model=list[SubjectSummary],
    summary="List subjects of a strand",
)
async def list_subjects(
    strand_id: str,
    service: DirectoryService = Depends(get_directory_service),
) -> list[SubjectSummary]:
    try:
        return await service.list_subjects_by_strand(strand_id)
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get("/teachers", response_model=list[TeacherSummary], summary="List teachers")
async def list_teachers(
    service: DirectoryService = Depends(get_directory_service),
) -> list[TeacherSummary]:
    try:
        return await service.list_teachers()
    except RosterServiceError as e:
        raise to_http_exception(e) from e


@router.get("/school-years", summary="Selectable school years")
async def list_school_years() -> dict[str, object]:
    """Get the selectable school years and the default one."""
    return {
        "options": school_year_options(),
        "default": default_school_year(),
    }
