# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Honor roll domain package."""

from src.domains.honor_roll.service import HonorRollService

__all__ = ["HonorRollService"]
