"""
Unit tests for booking intake validation and normalization.
"""

from __future__ import annotations

from typing import Any

import pytest

from villa_bookings.schemas.bookings import BookingIntakePayload
from villa_bookings.services.booking_intake import (
    compute_duplicate_check_hash,
    normalize_booking,
    parse_price,
    validate_intake,
)


def make_payload(**overrides: Any) -> BookingIntakePayload:
    data: dict[str, Any] = {
        "propertyName": "Villa Mango",
        "guestName": "John Smith",
        "guestEmail": "john@example.com",
        "checkInDate": "2025-07-20",
        "checkOutDate": "2025-07-25",
        **overrides,
    }
    return BookingIntakePayload(**data)


@pytest.mark.unit
def test_valid_booking_has_no_errors() -> None:
    assert validate_intake(make_payload()) == []


@pytest.mark.unit
def test_missing_fields_are_all_reported() -> None:
    errors = validate_intake(BookingIntakePayload(propertyName="  "))

    assert errors == [
        "Missing required field: propertyName",
        "Missing required field: guestName",
        "Missing required field: guestEmail",
        "Missing required field: checkInDate",
        "Missing required field: checkOutDate",
    ]


@pytest.mark.unit
def test_invalid_email_rejected() -> None:
    assert validate_intake(make_payload(guestEmail="not-an-email")) == ["Invalid email format"]


@pytest.mark.unit
def test_unparseable_dates_rejected() -> None:
    errors = validate_intake(make_payload(checkInDate="soon", checkOutDate="later"))

    assert "Invalid check-in date format" in errors
    assert "Invalid check-out date format" in errors


@pytest.mark.unit
@pytest.mark.parametrize("check_out", ["2025-07-20", "2025-07-19"])
def test_check_out_must_follow_check_in(check_out: str) -> None:
    errors = validate_intake(make_payload(checkOutDate=check_out))

    assert errors == ["Check-out date must be after check-in date"]


@pytest.mark.unit
def test_timestamps_accepted_as_dates() -> None:
    payload = make_payload(checkInDate="2025-07-20T14:00:00Z", checkOutDate="2025-07-25T11:00:00Z")

    assert validate_intake(payload) == []
    booking = normalize_booking(payload)
    assert booking["check_in_date"] == "2025-07-20"
    assert booking["check_out_date"] == "2025-07-25"


@pytest.mark.unit
def test_duplicate_hash_is_case_and_whitespace_insensitive() -> None:
    first = compute_duplicate_check_hash("Villa Mango", "John Smith", "2025-07-20", "2025-07-25")
    second = compute_duplicate_check_hash(" villa mango ", "JOHN SMITH", "2025-07-20", "2025-07-25")

    assert first == second == "villa mango-john smith-2025-07-20-2025-07-25"


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        (1250, 1250.0),
        ("$1,250.50", 1250.5),
        ("฿ 4,000", 4000.0),
        ("free", 0.0),
        (None, 0.0),
    ],
)
def test_parse_price(raw: Any, expected: float) -> None:
    assert parse_price(raw) == expected


@pytest.mark.unit
def test_normalize_booking_defaults() -> None:
    booking = normalize_booking(make_payload(guestEmail=" John@Example.com ", guests="4"))

    assert booking["status"] == "pending_approval"
    assert booking["sync_version"] == 1
    assert booking["source"] == "pms_webhook"
    assert booking["guest_email"] == "john@example.com"
    assert booking["raw_payload"]["guests"] == 4
    assert booking["raw_payload"]["nights"] == 1
    assert booking["raw_payload"]["price"] == 0.0


@pytest.mark.unit
def test_offset_timestamps_are_converted_to_utc_date() -> None:
    payload = make_payload(
        checkInDate="2025-07-20T23:30:00-05:00", checkOutDate="2025-07-25T09:00:00+07:00"
    )

    booking = normalize_booking(payload)

    assert booking["check_in_date"] == "2025-07-21"
    assert booking["check_out_date"] == "2025-07-25"
    assert booking["duplicate_check_hash"] == "villa mango-john smith-2025-07-21-2025-07-25"
