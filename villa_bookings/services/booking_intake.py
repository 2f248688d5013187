"""
Booking intake from PMS/OTA feeds.

Incoming bookings are validated, normalized, de-duplicated by content hash,
resolved to an internal property and written to both pending_bookings and
live_bookings with status pending_approval. A booking whose property cannot
be resolved is still stored, with property_id unset and the match result
returned for manual reconciliation.
"""

from __future__ import annotations

import re
import uuid
from typing import Any

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from villa_bookings.db.readers.bookings import duplicate_hash_exists
from villa_bookings.db.writers.bookings import insert_booking
from villa_bookings.metrics import bookings_received
from villa_bookings.schemas.bookings import BookingIntakePayload, BookingIntakeResult
from villa_bookings.schemas.properties import PropertyMatchInput
from villa_bookings.services.property_matching import resolve_property
from villa_bookings.utils.datetime import parse_booking_date, utc_now

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = {
    "property_name": "propertyName",
    "guest_name": "guestName",
    "guest_email": "guestEmail",
    "check_in_date": "checkInDate",
    "check_out_date": "checkOutDate",
}
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NON_NUMERIC_PRICE = re.compile(r"[^0-9.\-]")
INTAKE_COLLECTIONS = ("pending_bookings", "live_bookings")


def validate_intake(payload: BookingIntakePayload) -> list[str]:
    """
    Collect every validation problem with an incoming booking.

    Returns:
        list[str]: Error messages (empty when the booking is valid)
    """
    errors: list[str] = []

    for attribute, field_name in REQUIRED_FIELDS.items():
        value = getattr(payload, attribute)
        if value is None or not str(value).strip():
            errors.append(f"Missing required field: {field_name}")

    if payload.guest_email and not EMAIL_PATTERN.match(payload.guest_email.strip()):
        errors.append("Invalid email format")

    check_in = check_out = None
    if payload.check_in_date:
        try:
            check_in = parse_booking_date(payload.check_in_date)
        except ValueError:
            errors.append("Invalid check-in date format")
    if payload.check_out_date:
        try:
            check_out = parse_booking_date(payload.check_out_date)
        except ValueError:
            errors.append("Invalid check-out date format")

    if check_in and check_out and check_out <= check_in:
        errors.append("Check-out date must be after check-in date")

    return errors


def compute_duplicate_check_hash(
    property_name: str, guest_name: str, check_in_date: str, check_out_date: str
) -> str:
    """
    Fingerprint of a logical booking, shared by all of its physical copies.

    Example:
        >>> compute_duplicate_check_hash(" Villa Mango ", "John Smith", "2025-07-20", "2025-07-25")
        'villa mango-john smith-2025-07-20-2025-07-25'
    """
    return (
        f"{property_name.lower().strip()}-{guest_name.lower().strip()}-"
        f"{check_in_date}-{check_out_date}"
    )


def parse_price(value: float | str | None) -> float:
    """Strip currency symbols and thousands separators; unparseable -> 0."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(NON_NUMERIC_PRICE.sub("", value))
    except ValueError:
        return 0.0


def _parse_count(value: int | str | None, default: int) -> int:
    try:
        return int(str(value).strip()) if value is not None else default
    except ValueError:
        return default


def normalize_booking(payload: BookingIntakePayload) -> dict[str, Any]:
    """
    Build the booking columns shared by every collection copy.

    Assumes validate_intake() returned no errors.
    """
    check_in = parse_booking_date(payload.check_in_date or "").isoformat()
    check_out = parse_booking_date(payload.check_out_date or "").isoformat()
    property_name = (payload.property_name or "").strip()
    guest_name = (payload.guest_name or "").strip()

    return {
        "guest_name": guest_name,
        "guest_email": (payload.guest_email or "").strip().lower(),
        "property_name": property_name,
        "address": (payload.address or "").strip() or None,
        "check_in_date": check_in,
        "check_out_date": check_out,
        "status": "pending_approval",
        "sync_version": 1,
        "duplicate_check_hash": compute_duplicate_check_hash(
            property_name, guest_name, check_in, check_out
        ),
        "source": payload.source or "pms_webhook",
        "raw_payload": {
            **payload.model_dump(by_alias=True, exclude_none=True),
            "nights": _parse_count(payload.nights, 1),
            "guests": _parse_count(payload.guests, 1),
            "price": parse_price(payload.price),
        },
    }


def receive_booking(engine: Engine, payload: BookingIntakePayload) -> BookingIntakeResult:
    """
    Validate, de-duplicate, resolve and store an incoming booking.

    Args:
        engine: SQLAlchemy engine
        payload: Booking from a PMS/OTA feed

    Returns:
        BookingIntakeResult: status_code 400 on validation errors, 500 on a
        store failure, 200 otherwise (including duplicates)
    """
    errors = validate_intake(payload)
    if errors:
        logger.warning("booking_intake_invalid", errors=errors)
        bookings_received.labels(outcome="invalid").inc()
        return BookingIntakeResult(
            success=False, status_code=400, error="Validation failed", details=errors
        )

    booking = normalize_booking(payload)
    duplicate_check_hash = booking["duplicate_check_hash"]

    try:
        with engine.connect() as conn:
            if duplicate_hash_exists(conn, duplicate_check_hash):
                logger.info("booking_intake_duplicate", duplicate_check_hash=duplicate_check_hash)
                bookings_received.labels(outcome="duplicate").inc()
                return BookingIntakeResult(
                    success=True,
                    duplicate=True,
                    duplicate_check_hash=duplicate_check_hash,
                    message="Duplicate booking detected, skipping creation.",
                )

        match = resolve_property(
            engine,
            PropertyMatchInput(
                pms_listing_id=payload.pms_listing_id,
                pms_provider=payload.pms_provider,
                airbnb_listing_id=payload.airbnb_listing_id,
                booking_com_listing_id=payload.booking_com_listing_id,
                vrbo_listing_id=payload.vrbo_listing_id,
                property_external_id=payload.property_external_id,
                property_name=payload.property_name,
            ),
        )
        booking["property_id"] = match.property_id

        now = utc_now()
        document_ids: dict[str, str] = {}
        with engine.begin() as conn:
            for collection in INTAKE_COLLECTIONS:
                document_ids[collection] = uuid.uuid4().hex
                insert_booking(
                    conn,
                    collection,
                    {**booking, "id": document_ids[collection], "created_at": now, "updated_at": now},
                )
    except SQLAlchemyError as e:
        logger.exception("booking_intake_failed", duplicate_check_hash=duplicate_check_hash)
        bookings_received.labels(outcome="error").inc()
        return BookingIntakeResult(
            success=False, status_code=500, error="Internal server error", details=[str(e)]
        )

    logger.info(
        "booking_intake_created",
        pending_booking_id=document_ids["pending_bookings"],
        live_booking_id=document_ids["live_bookings"],
        property_id=match.property_id,
        requires_review=match.requires_review,
    )
    bookings_received.labels(outcome="created").inc()

    return BookingIntakeResult(
        success=True,
        message="Booking created in pending_bookings and live_bookings",
        duplicate_check_hash=duplicate_check_hash,
        pending_booking_id=document_ids["pending_bookings"],
        live_booking_id=document_ids["live_bookings"],
        property_match=match,
        booking={
            "propertyName": booking["property_name"],
            "propertyId": match.property_id,
            "guestName": booking["guest_name"],
            "checkInDate": booking["check_in_date"],
            "checkOutDate": booking["check_out_date"],
            "status": booking["status"],
        },
    )
