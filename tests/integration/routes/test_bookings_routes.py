"""
Integration tests for booking API endpoints.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_approve_endpoint_returns_camel_case_result(
    client: TestClient,
    seed_booking: Callable[..., dict[str, Any]],
) -> None:
    seed_booking("bookings", id="b1", duplicate_check_hash="h1")

    response = client.post(
        "/bookings/approve",
        json={"bookingId": "b1", "action": "approve", "adminId": "admin1", "adminName": "Jane"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["bookingId"] == "b1"
    assert data["newStatus"] == "approved"
    assert data["approvedBy"] == "admin1"
    assert data["syncVersion"] == 2
    assert data["message"] == "Booking approved successfully and synced across platforms"
    assert "statusCode" not in data
    assert "status_code" not in data


@pytest.mark.integration
def test_reject_endpoint(
    client: TestClient,
    seed_booking: Callable[..., dict[str, Any]],
    read_booking: Callable[..., Any],
) -> None:
    seed_booking("pending_bookings", id="b1")

    response = client.post(
        "/bookings/approve",
        json={"bookingId": "b1", "action": "reject", "adminId": "admin1", "reason": "Overbooked"},
    )

    assert response.status_code == 200
    assert response.json()["newStatus"] == "rejected"
    assert read_booking("pending_bookings", "b1")["rejection_reason"] == "Overbooked"


@pytest.mark.integration
@pytest.mark.parametrize(
    "body",
    [
        {"action": "approve", "adminId": "admin1"},
        {"bookingId": "b1", "action": "cancel", "adminId": "admin1"},
        {},
    ],
)
def test_approve_endpoint_rejects_bad_requests(client: TestClient, body: dict[str, Any]) -> None:
    response = client.post("/bookings/approve", json=body)

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.integration
def test_approve_endpoint_unknown_booking(client: TestClient) -> None:
    response = client.post(
        "/bookings/approve",
        json={"bookingId": "ghost", "action": "approve", "adminId": "admin1"},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Booking not found"


@pytest.mark.integration
def test_pending_bookings_lists_primary_collection_only(
    client: TestClient,
    seed_booking: Callable[..., dict[str, Any]],
) -> None:
    seed_booking("bookings", id="b1")
    seed_booking("bookings", id="b2", status="approved")
    seed_booking("live_bookings", id="b3")

    response = client.get("/bookings/pending")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert [b["id"] for b in data["pendingBookings"]] == ["b1"]


@pytest.mark.integration
def test_approval_history_after_decisions(
    client: TestClient,
    seed_booking: Callable[..., dict[str, Any]],
) -> None:
    seed_booking("live_bookings", id="b1")
    client.post("/bookings/approve", json={"bookingId": "b1", "action": "approve", "adminId": "a1"})
    client.post(
        "/bookings/approve",
        json={"bookingId": "b1", "action": "reject", "adminId": "a2", "reason": "Owner block"},
    )

    response = client.get("/bookings/b1/approvals")

    assert response.status_code == 200
    approvals = response.json()["approvals"]
    assert [a["action"] for a in approvals] == ["approve", "reject"]
    assert approvals[0]["admin_name"] == "Unknown Admin"
    assert approvals[1]["reason"] == "Owner block"


@pytest.mark.integration
def test_intake_endpoint_creates_then_detects_duplicate(client: TestClient) -> None:
    body = {
        "propertyName": "Villa Mango",
        "guestName": "John Smith",
        "guestEmail": "john@example.com",
        "checkInDate": "2025-07-20",
        "checkOutDate": "2025-07-25",
    }

    created = client.post("/bookings/intake", json=body)
    duplicate = client.post("/bookings/intake", json=body)

    assert created.status_code == 200
    assert created.json()["duplicate"] is False
    assert created.json()["propertyMatch"]["requiresReview"] is True
    assert duplicate.json()["duplicate"] is True


@pytest.mark.integration
def test_intake_endpoint_validation_error(client: TestClient) -> None:
    response = client.post("/bookings/intake", json={"propertyName": "Villa Mango"})

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
    assert "Missing required field: guestName" in response.json()["details"]


@pytest.mark.integration
@pytest.mark.parametrize(
    "body, error",
    [
        (
            {"bookingId": "b1", "action": 1, "adminId": "a1"},
            'Invalid action. Must be "approve" or "reject"',
        ),
        (
            {"bookingId": 5, "action": "approve", "adminId": "a1"},
            "bookingId and adminId must be strings",
        ),
        (
            {"bookingId": "b1", "action": "approve", "adminId": ["a1"]},
            "bookingId and adminId must be strings",
        ),
    ],
)
def test_approve_endpoint_non_string_fields_fail_validation(
    client: TestClient,
    seed_booking: Callable[..., dict[str, Any]],
    body: dict[str, Any],
    error: str,
) -> None:
    seed_booking("bookings", id="b1")

    response = client.post("/bookings/approve", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == error
