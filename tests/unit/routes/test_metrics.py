"""
Unit tests for metrics endpoint.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from villa_bookings.main import app
from villa_bookings.metrics import (
    approval_duration,
    booking_approvals,
    bookings_received,
    post_approval_hook_runs,
    propagation_updates,
    property_matches,
)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.mark.unit
def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]


@pytest.mark.unit
def test_metrics_endpoint_contains_workflow_metrics(client: TestClient) -> None:
    property_matches.labels(method="pmsListingId", confidence="high").inc()
    booking_approvals.labels(action="approve", outcome="success").inc()
    approval_duration.labels(action="approve").observe(0.12)
    propagation_updates.labels(collection="live_bookings", status="success").inc()
    post_approval_hook_runs.labels(hook="calendar_event_creation", status="success").inc()
    bookings_received.labels(outcome="created").inc()

    content = client.get("/metrics").text

    assert "villa_property_matches_total" in content
    assert "villa_booking_approvals_total" in content
    assert "villa_booking_approval_duration_seconds" in content
    assert "villa_booking_propagation_total" in content
    assert "villa_post_approval_hook_runs_total" in content
    assert "villa_bookings_received_total" in content


@pytest.mark.unit
def test_metrics_include_help_and_type_metadata(client: TestClient) -> None:
    content = client.get("/metrics").text

    assert "# HELP" in content
    assert "# TYPE" in content
