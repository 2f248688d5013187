from typing import Any, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from villa_bookings.models.approvals import BookingApproval
from villa_bookings.models.bookings import BOOKING_COLLECTIONS, Booking


def get_booking(conn: Connection, collection: str, booking_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch one booking document by id from a single collection.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        collection (str): One of pending_bookings, bookings, live_bookings.
        booking_id (str): Document id.

    Returns:
        Optional[dict[str, Any]]: Booking row as a dict or None if not found.
    """
    table = BOOKING_COLLECTIONS[collection]
    row = conn.execute(select(table).where(table.id == booking_id)).mappings().fetchone()
    return dict(row) if row else None


def locate_booking(
    conn: Connection, booking_id: str
) -> Optional[tuple[str, dict[str, Any]]]:
    """
    Probe the booking collections in fixed order and stop at the first hit.

    Order: pending_bookings, bookings, live_bookings.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        booking_id (str): Document id to look for.

    Returns:
        Optional[tuple[str, dict]]: (collection name, booking) or None.
    """
    for collection in BOOKING_COLLECTIONS:
        booking = get_booking(conn, collection, booking_id)
        if booking is not None:
            return collection, booking
    return None


def duplicate_hash_exists(
    conn: Connection,
    duplicate_check_hash: str,
    collections: Iterable[str] = ("pending_bookings", "live_bookings"),
) -> bool:
    """
    Check whether any document in the given collections carries the hash.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        duplicate_check_hash (str): Content hash of the logical booking.
        collections (Iterable[str]): Collections to search.

    Returns:
        bool: True if at least one document matches.
    """
    for collection in collections:
        table = BOOKING_COLLECTIONS[collection]
        found = conn.execute(
            select(table.id).where(table.duplicate_check_hash == duplicate_check_hash).limit(1)
        ).fetchone()
        if found is not None:
            return True
    return False


def list_pending_bookings(conn: Connection) -> list[dict[str, Any]]:
    """Bookings in the primary collection still waiting for a decision."""
    result = conn.execute(
        select(Booking)
        .where(Booking.status == "pending_approval")
        .order_by(Booking.created_at)
    )
    return [dict(row) for row in result.mappings()]


def list_approval_actions(conn: Connection, booking_id: str) -> list[dict[str, Any]]:
    """Approval audit trail for one booking, oldest first."""
    result = conn.execute(
        select(BookingApproval)
        .where(BookingApproval.booking_id == booking_id)
        .order_by(BookingApproval.timestamp, BookingApproval.id)
    )
    return [dict(row) for row in result.mappings()]
