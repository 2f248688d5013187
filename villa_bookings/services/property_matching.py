"""
Deterministic property matching using external listing ids.

Matching never uses the property name or any fuzzy comparison. Identifiers
are tried in a fixed priority order and the first exact hit wins:

1. pmsListingId        (high confidence)
2. airbnbListingId     (medium)
3. bookingComListingId (medium)
4. vrboListingId       (medium)
5. propertyExternalId  (medium, direct lookup by property id)
6. no match            -> requires manual review

A store error at one priority level is recorded and the next level is still
tried.
"""

from __future__ import annotations

from typing import Any, Callable, Optional
from urllib.parse import quote

import structlog
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from villa_bookings.db.readers.properties import find_property_by_external_id, get_property
from villa_bookings.metrics import property_lookup_errors, property_matches
from villa_bookings.schemas.properties import PropertyMatchInput, PropertyMatchResult

logger = structlog.get_logger(__name__)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

Lookup = Callable[[Connection, str], Optional[dict[str, Any]]]


def _by_external_id(field: str) -> Lookup:
    def lookup(conn: Connection, value: str) -> Optional[dict[str, Any]]:
        return find_property_by_external_id(conn, field, value)

    return lookup


def _by_property_id(conn: Connection, value: str) -> Optional[dict[str, Any]]:
    return get_property(conn, value)


# (method, input attribute, lookup, confidence, warning added on a match)
MATCH_PRIORITY: list[tuple[str, str, Lookup, str, Optional[str]]] = [
    ("pmsListingId", "pms_listing_id", _by_external_id("pmsListingId"), "high", None),
    (
        "airbnbListingId",
        "airbnb_listing_id",
        _by_external_id("airbnbListingId"),
        "medium",
        "Matched via Airbnb ID - consider adding pmsListingId for better reliability",
    ),
    (
        "bookingComListingId",
        "booking_com_listing_id",
        _by_external_id("bookingComListingId"),
        "medium",
        "Matched via Booking.com ID - consider adding pmsListingId for better reliability",
    ),
    (
        "vrboListingId",
        "vrbo_listing_id",
        _by_external_id("vrboListingId"),
        "medium",
        "Matched via VRBO ID - consider adding pmsListingId for better reliability",
    ),
    (
        "propertyExternalId",
        "property_external_id",
        _by_property_id,
        "medium",
        "Matched via manual external ID - this is a fallback method",
    ),
]


def match_property(conn: Connection, match_input: PropertyMatchInput) -> PropertyMatchResult:
    """
    Resolve an identifier bundle to an internal property.

    The connection should be dedicated to this call (engine.connect(), not
    a caller's write transaction): it is rolled back after a failed lookup.

    Args:
        conn: Active database connection (read-only use)
        match_input: External identifiers from the booking

    Returns:
        PropertyMatchResult: The matched property, or a failure result with
        requires_review=True. Never raises for a missing match or a store
        error.
    """
    warnings: list[str] = []
    errors: list[str] = []

    logger.info(
        "property_match_started",
        pms_listing_id=match_input.pms_listing_id,
        airbnb_listing_id=match_input.airbnb_listing_id,
        property_name=match_input.property_name,
    )

    for method, attribute, lookup, confidence, match_warning in MATCH_PRIORITY:
        value = getattr(match_input, attribute)
        if not value:
            continue

        try:
            found = lookup(conn, value)
        except SQLAlchemyError as e:
            logger.warning("property_lookup_failed", method=method, value=value, error=str(e))
            property_lookup_errors.labels(method=method).inc()
            errors.append(f"Error matching by {method}: {e}")
            # A failed statement poisons the transaction on PostgreSQL
            if conn.in_transaction():
                conn.rollback()
            continue

        if found is None:
            warnings.append(f"No property found with {method}: {value}")
            continue

        if match_warning:
            warnings.append(match_warning)

        logger.info(
            "property_matched",
            method=method,
            property_id=found["id"],
            confidence=confidence,
        )
        property_matches.labels(method=method, confidence=confidence).inc()
        return PropertyMatchResult(
            success=True,
            property_id=found["id"],
            property=found,
            match_method=method,
            confidence=confidence,
            requires_review=False,
            warnings=warnings,
            errors=errors,
        )

    return _no_match_result(match_input, warnings, errors)


def _no_match_result(
    match_input: PropertyMatchInput, warnings: list[str], errors: list[str]
) -> PropertyMatchResult:
    errors.append("NO PROPERTY MATCH - Manual intervention required")
    warnings.append(f"Property name from booking: {match_input.property_name or 'Unknown'}")

    logger.warning(
        "property_match_failed",
        property_name=match_input.property_name,
        warnings=warnings,
        errors=errors,
    )
    property_matches.labels(method="none", confidence="low").inc()
    return PropertyMatchResult(
        success=False,
        match_method="none",
        confidence="low",
        requires_review=True,
        warnings=warnings,
        errors=errors,
    )


def resolve_property(engine: Engine, match_input: PropertyMatchInput) -> PropertyMatchResult:
    """
    Run match_property on a dedicated connection.

    A store that cannot be reached yields the same review result as an
    unmatched booking, with the connection error recorded.

    Args:
        engine: SQLAlchemy engine
        match_input: External identifiers from the booking

    Returns:
        PropertyMatchResult: Never raises for a store error
    """
    try:
        with engine.connect() as conn:
            return match_property(conn, match_input)
    except SQLAlchemyError as e:
        logger.warning("property_store_unavailable", error=str(e))
        property_lookup_errors.labels(method="connect").inc()
        return _no_match_result(
            match_input, [], [f"Error connecting to property store: {e}"]
        )


def validate_property_for_job_creation(property_doc: dict[str, Any]) -> dict[str, Any]:
    """
    Check that a property carries the data staff jobs need.

    Args:
        property_doc: Property document (name, location.address, location.coordinates)

    Returns:
        dict: {"valid": bool, "missingFields": list[str]}
    """
    location = property_doc.get("location") or {}
    coordinates = location.get("coordinates") or {}

    missing_fields: list[str] = []
    if not property_doc.get("name"):
        missing_fields.append("name")
    if not location.get("address"):
        missing_fields.append("location.address")
    if coordinates.get("latitude") is None:
        missing_fields.append("location.coordinates.latitude")
    if coordinates.get("longitude") is None:
        missing_fields.append("location.coordinates.longitude")

    return {"valid": not missing_fields, "missingFields": missing_fields}


def generate_google_maps_link(property_doc: dict[str, Any]) -> str:
    """
    Derive a Google Maps link for a property.

    Preference: stored link, then coordinates, then an address search.

    Example:
        >>> generate_google_maps_link(
        ...     {"location": {"coordinates": {"latitude": 9.7, "longitude": 100.0}}}
        ... )
        'https://www.google.com/maps/search/?api=1&query=9.7,100.0'
    """
    location = property_doc.get("location") or {}
    if location.get("googleMapsLink"):
        return str(location["googleMapsLink"])

    coordinates = location.get("coordinates") or {}
    latitude = coordinates.get("latitude")
    longitude = coordinates.get("longitude")
    if latitude is not None and longitude is not None:
        return f"{MAPS_SEARCH_URL}{latitude},{longitude}"

    address = location.get("address")
    if address:
        return f"{MAPS_SEARCH_URL}{quote(address, safe='')}"

    return ""
