# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enums and types for request/response models."""

from enum import Enum
from typing import Literal


class GradeLevel(str, Enum):
    """Senior high school grade level."""

    GRADE_11 = "Grade 11"
    GRADE_12 = "Grade 12"


class Semester(str, Enum):
    """School semester."""

    FIRST = "1st"
    SECOND = "2nd"


class HonorRating(str, Enum):
    """Honor distinction derived from a final or average grade."""

    WITH_HIGHEST_HONORS = "With Highest Honors"
    WITH_HIGH_HONORS = "With High Honors"
    WITH_HONORS = "With Honors"
    NONE = ""


FieldState = Literal["locked", "editable"]
