# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the HTTP API.

Services are replaced through dependency overrides, so these tests cover
routing, request parsing and error mapping only.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import (
    get_activity_log_service,
    get_grade_ledger_service,
    get_membership_service,
    get_roster_service,
)
from src.domains.roster.exceptions import (
    ActivityLogNotFoundError,
    DuplicateRosterError,
    NoChangesError,
    RosterConflictError,
    RosterNotFoundError,
    StorageError,
    ValidationError,
)
from src.models.roster import MembershipChangeResponse, RosterResponse

NOW = datetime(2024, 8, 1, tzinfo=timezone.utc)


@pytest.fixture
def roster_service():
    return AsyncMock()


@pytest.fixture
def membership_service():
    return AsyncMock()


@pytest.fixture
def ledger_service():
    return AsyncMock()


@pytest.fixture
def activity_service():
    return AsyncMock()


@pytest.fixture
def client(roster_service, membership_service, ledger_service, activity_service):
    """Test client with every service replaced by a mock."""
    app = create_app()
    app.dependency_overrides[get_roster_service] = lambda: roster_service
    app.dependency_overrides[get_membership_service] = lambda: membership_service
    app.dependency_overrides[get_grade_ledger_service] = lambda: ledger_service
    app.dependency_overrides[get_activity_log_service] = lambda: activity_service
    return TestClient(app)


def make_roster_response(**overrides) -> RosterResponse:
    values = {
        "id": "roster-1",
        "section_id": "sec-a",
        "section_name": "STEM 11-A",
        "subject_id": "subj-math",
        "subject_name": "General Mathematics",
        "teacher_id": "T-001",
        "teacher_name": "Maria Santos",
        "grade_level": "Grade 11",
        "semester": "1st",
        "school_year": "2024-2025",
        "student_ids": [],
        "student_count": 0,
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return RosterResponse(**values)


CREATE_BODY = {
    "section_id": "sec-a",
    "subject_id": "subj-math",
    "teacher_id": "T-001",
    "grade_level": "Grade 11",
    "semester": "1st",
    "school_year": "2024-2025",
}


class TestRosterRoutes:
    """Tests for roster endpoints."""

    def test_create_roster(self, client, roster_service):
        roster_service.create_roster.return_value = make_roster_response(auto_enrolled_count=0)

        response = client.post(
            "/api/v1/rosters",
            json=CREATE_BODY,
            headers={"X-Actor": "Registrar Lim"},
        )

        assert response.status_code == 201
        assert response.json()["auto_enrolled_count"] == 0
        assert roster_service.create_roster.await_args.kwargs["performed_by"] == "Registrar Lim"

    def test_actor_defaults_to_system(self, client, roster_service):
        roster_service.create_roster.return_value = make_roster_response()

        client.post("/api/v1/rosters", json=CREATE_BODY)

        assert roster_service.create_roster.await_args.kwargs["performed_by"] == "system"

    def test_duplicate_roster_is_conflict(self, client, roster_service):
        roster_service.create_roster.side_effect = DuplicateRosterError(
            "sec-a", "subj-math", "1st", "2024-2025"
        )

        response = client.post("/api/v1/rosters", json=CREATE_BODY)

        assert response.status_code == 409

    def test_validation_error_names_field(self, client, roster_service):
        roster_service.create_roster.side_effect = ValidationError(
            "semester is required", field="semester"
        )

        response = client.post("/api/v1/rosters", json=CREATE_BODY)

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "semester"

    def test_get_missing_roster(self, client, roster_service):
        roster_service.get_roster.side_effect = RosterNotFoundError("missing")

        response = client.get("/api/v1/rosters/missing")

        assert response.status_code == 404

    def test_storage_error_hides_driver_message(self, client, roster_service):
        roster_service.get_roster.side_effect = StorageError(
            "Failed to load", Exception("password authentication failed")
        )

        response = client.get("/api/v1/rosters/roster-1")

        assert response.status_code == 503
        assert "password" not in response.text

    def test_delete_roster(self, client, roster_service):
        response = client.delete("/api/v1/rosters/roster-1")

        assert response.status_code == 204
        roster_service.delete_roster.assert_awaited_once_with("roster-1", performed_by="system")

    def test_list_rosters_passes_filters(self, client, roster_service):
        roster_service.list_rosters_by.return_value = []

        response = client.get(
            "/api/v1/rosters",
            params={"teacher_id": "T-001", "school_year": "2024-2025"},
        )

        assert response.status_code == 200
        roster_service.list_rosters_by.assert_awaited_once_with(
            teacher_id="T-001",
            section_id=None,
            school_year="2024-2025",
        )


class TestMembershipRoutes:
    """Tests for membership endpoints."""

    def test_remove_requires_confirm_parameter(self, client, membership_service):
        response = client.delete("/api/v1/rosters/roster-1/students/2024-0001")

        assert response.status_code == 422
        membership_service.remove_student.assert_not_awaited()

    def test_remove_student(self, client, membership_service):
        membership_service.remove_student.return_value = MembershipChangeResponse(
            roster_id="roster-1",
            student_id="2024-0001",
            changed=True,
            student_count=2,
            returned_to_pool=True,
        )

        response = client.delete(
            "/api/v1/rosters/roster-1/students/2024-0001",
            params={"confirm": "true"},
        )

        assert response.status_code == 200
        assert response.json()["returned_to_pool"] is True
        request = membership_service.remove_student.await_args.args[1]
        assert request.confirm is True

    def test_concurrent_change_is_conflict(self, client, membership_service):
        membership_service.add_student.side_effect = RosterConflictError("roster-1")

        response = client.post(
            "/api/v1/rosters/roster-1/students",
            json={"student_id": "2024-0001"},
        )

        assert response.status_code == 409
        assert "modified concurrently" in response.json()["detail"]


class TestGradeRoutes:
    """Tests for grade endpoints."""

    def test_no_changes_is_bad_request(self, client, ledger_service):
        ledger_service.submit_grades.side_effect = NoChangesError("roster-1")

        response = client.post(
            "/api/v1/rosters/roster-1/grades",
            json={"submissions": [{"student_id": "2024-0001", "first_quarter_grade": 90}]},
        )

        assert response.status_code == 400

    def test_submit_grades(self, client, ledger_service):
        ledger_service.submit_grades.return_value = []

        response = client.post(
            "/api/v1/rosters/roster-1/grades",
            json={"submissions": [{"student_id": "2024-0001", "remarks": "Passed"}]},
            headers={"X-Actor": "Maria Santos"},
        )

        assert response.status_code == 200
        submissions = ledger_service.submit_grades.await_args.args[1]
        assert submissions[0].remarks == "Passed"


class TestActivityLogRoutes:
    """Tests for activity log endpoints."""

    def test_delete_missing_log(self, client, activity_service):
        activity_service.delete_log.side_effect = ActivityLogNotFoundError("log-404")

        response = client.delete("/api/v1/activity-logs/log-404")

        assert response.status_code == 404


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
