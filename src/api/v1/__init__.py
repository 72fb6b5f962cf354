# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    rosters: Class rosters, membership and grade endpoints.
    directory: Strand, section, subject and teacher reference data.
    activity_logs: Activity log endpoints.
    honor_roll: Section honor roll endpoints.
"""

from fastapi import APIRouter

from src.api.v1 import activity_logs, directory, honor_roll, rosters

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(rosters.router, prefix="/rosters", tags=["Class Rosters"])
router.include_router(directory.router, prefix="/directory", tags=["Directory"])
router.include_router(activity_logs.router, prefix="/activity-logs", tags=["Activity Logs"])
router.include_router(honor_roll.router, prefix="/honor-roll", tags=["Honor Roll"])

__all__ = ["router"]
