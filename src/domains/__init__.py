# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

This package contains domain services that encapsulate business logic.
Each domain module provides services that orchestrate reads and writes
against the portal database.

Domains:
    directory: Strand, section, subject, teacher and eligible-student lookups.
    roster: Class roster lifecycle and membership.
    grade_ledger: Write-once quarter grades, final grade and rating.
    activity_log: Audit trail of roster and grade changes.
    honor_roll: Section honor rolls from committed final grades.
"""
