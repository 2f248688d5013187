"""
Unit tests for middleware components.
"""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from villa_bookings.middleware import RequestIDMiddleware


@pytest.fixture
def app_with_middleware() -> FastAPI:
    """FastAPI app exposing the request id it sees in state and log context."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo_request_id(request: Request) -> dict[str, str]:
        bound = structlog.contextvars.get_contextvars()
        return {"request_id": request.state.request_id, "bound": bound.get("request_id", "")}

    return app


@pytest.fixture
def client(app_with_middleware: FastAPI) -> TestClient:
    return TestClient(app_with_middleware)


@pytest.mark.unit
def test_generates_uuid_request_id(client: TestClient) -> None:
    response = client.get("/echo")

    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 36  # UUID length
    assert response.json()["request_id"] == response.headers["X-Request-ID"]


@pytest.mark.unit
def test_reuses_incoming_request_id(client: TestClient) -> None:
    response = client.get("/echo", headers={"X-Request-ID": "upstream-abc"})

    assert response.headers["X-Request-ID"] == "upstream-abc"
    assert response.json()["request_id"] == "upstream-abc"


@pytest.mark.unit
def test_binds_request_id_into_log_context(client: TestClient) -> None:
    response = client.get("/echo")

    assert response.json()["bound"] == response.headers["X-Request-ID"]


@pytest.mark.unit
def test_request_id_unique_per_request(client: TestClient) -> None:
    first = client.get("/echo").headers["X-Request-ID"]
    second = client.get("/echo").headers["X-Request-ID"]

    assert first != second
