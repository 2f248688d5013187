"""
Integration tests for booking intake.
"""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from villa_bookings.models.bookings import BOOKING_COLLECTIONS
from villa_bookings.schemas.bookings import BookingIntakePayload
from villa_bookings.services.booking_intake import receive_booking


def make_payload(**overrides: Any) -> BookingIntakePayload:
    data: dict[str, Any] = {
        "propertyName": "Villa Mango",
        "guestName": "John Smith",
        "guestEmail": "john@example.com",
        "checkInDate": "2025-07-20",
        "checkOutDate": "2025-07-25",
        "price": "$1,200",
        **overrides,
    }
    return BookingIntakePayload(**data)


def count_collection(engine: Engine, collection: str) -> int:
    table = BOOKING_COLLECTIONS[collection]
    with engine.connect() as conn:
        return len(conn.execute(select(table.id)).fetchall())


@pytest.mark.integration
def test_new_booking_written_to_pending_and_live(
    db_engine: Engine,
    seed_property: Callable[..., Any],
    read_booking: Callable[[str, str], dict[str, Any] | None],
) -> None:
    seed_property(id="p1", name="Villa Mango", pms_listing_id="PMS-1")

    result = receive_booking(db_engine, make_payload(pmsListingId="PMS-1"))

    assert result.success is True
    assert result.status_code == 200
    assert result.duplicate is False
    assert result.property_match is not None
    assert result.property_match.match_method == "pmsListingId"
    assert result.booking["propertyId"] == "p1"

    pending = read_booking("pending_bookings", result.pending_booking_id)
    live = read_booking("live_bookings", result.live_booking_id)
    assert pending is not None and live is not None
    assert result.pending_booking_id != result.live_booking_id
    for row in (pending, live):
        assert row["status"] == "pending_approval"
        assert row["sync_version"] == 1
        assert row["property_id"] == "p1"
        assert row["duplicate_check_hash"] == "villa mango-john smith-2025-07-20-2025-07-25"
        assert row["raw_payload"]["price"] == 1200.0
    assert count_collection(db_engine, "bookings") == 0


@pytest.mark.integration
def test_unmatched_property_still_stored_for_review(
    db_engine: Engine,
    read_booking: Callable[[str, str], dict[str, Any] | None],
) -> None:
    result = receive_booking(db_engine, make_payload(airbnbListingId="A-unknown"))

    assert result.success is True
    assert result.property_match.requires_review is True
    assert read_booking("pending_bookings", result.pending_booking_id)["property_id"] is None


@pytest.mark.integration
def test_duplicate_booking_is_skipped(db_engine: Engine) -> None:
    first = receive_booking(db_engine, make_payload())
    second = receive_booking(
        db_engine, make_payload(propertyName="VILLA MANGO ", guestName="john smith")
    )

    assert first.duplicate is False
    assert second.success is True
    assert second.duplicate is True
    assert second.duplicate_check_hash == first.duplicate_check_hash
    assert count_collection(db_engine, "pending_bookings") == 1
    assert count_collection(db_engine, "live_bookings") == 1


@pytest.mark.integration
def test_invalid_booking_returns_400_without_writes(db_engine: Engine) -> None:
    result = receive_booking(db_engine, make_payload(guestEmail="nope", checkOutDate="2025-07-19"))

    assert result.success is False
    assert result.status_code == 400
    assert result.error == "Validation failed"
    assert "Invalid email format" in result.details
    assert count_collection(db_engine, "pending_bookings") == 0


@pytest.mark.integration
def test_store_failure_returns_500(db_engine: Engine) -> None:
    with patch(
        "villa_bookings.services.booking_intake.insert_booking",
        side_effect=OperationalError("INSERT ...", {}, Exception("disk full")),
    ):
        result = receive_booking(db_engine, make_payload())

    assert result.success is False
    assert result.status_code == 500
    assert result.error == "Internal server error"
    assert count_collection(db_engine, "pending_bookings") == 0
