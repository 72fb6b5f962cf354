# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade ledger domain package.

This package provides write-once grade recording including:
- Batch submission with whole-batch validation
- Final grade and honor rating derivation
- Locked/editable display state
"""

from src.domains.grade_ledger.rules import (
    GradeSnapshot,
    MergeResult,
    compute_final_grade,
    compute_rating,
    merge_grades,
    round_half_up,
)
from src.domains.grade_ledger.service import GradeLedgerService

__all__ = [
    "GradeLedgerService",
    "GradeSnapshot",
    "MergeResult",
    "compute_final_grade",
    "compute_rating",
    "merge_grades",
    "round_half_up",
]
