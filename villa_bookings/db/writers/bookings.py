from typing import Any

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from villa_bookings.models.bookings import BOOKING_COLLECTIONS

logger = structlog.get_logger(__name__)


def insert_booking(conn: Connection, collection: str, row: dict[str, Any]) -> None:
    """
    Insert one booking document into a collection.

    Args:
        conn (Connection): Active connection (within a transaction).
        collection (str): Target collection name.
        row (dict[str, Any]): Column values, including the generated id.
    """
    table = BOOKING_COLLECTIONS[collection]
    conn.execute(insert(table).values(**row))


def update_booking(
    conn: Connection,
    collection: str,
    booking_id: str,
    updates: dict[str, Any],
    expected_version: int | None = None,
) -> int:
    """
    Apply an update to a single booking document.

    Args:
        conn (Connection): Active connection (within a transaction).
        collection (str): Collection holding the document.
        booking_id (str): Document id.
        updates (dict[str, Any]): Column values to set.
        expected_version (int | None): If given, only write when the stored
            sync_version still equals this value (compare-and-swap).

    Returns:
        int: Number of rows updated (0 on a version conflict or missing row).
    """
    table = BOOKING_COLLECTIONS[collection]
    stmt = update(table).where(table.id == booking_id)
    if expected_version is not None:
        stmt = stmt.where(table.sync_version == expected_version)
    result = conn.execute(stmt.values(**updates))
    return result.rowcount


def update_bookings_by_hash(
    conn: Connection,
    collection: str,
    duplicate_check_hash: str,
    updates: dict[str, Any],
) -> int:
    """
    Apply an update to every document in a collection sharing a duplicate hash.

    Args:
        conn (Connection): Active connection (within a transaction).
        collection (str): Collection to patch.
        duplicate_check_hash (str): Hash correlating copies of one booking.
        updates (dict[str, Any]): Column values to set.

    Returns:
        int: Number of rows updated.
    """
    table = BOOKING_COLLECTIONS[collection]
    result = conn.execute(
        update(table)
        .where(table.duplicate_check_hash == duplicate_check_hash)
        .values(**updates)
    )
    logger.debug(
        "bookings_patched_by_hash",
        collection=collection,
        duplicate_check_hash=duplicate_check_hash,
        count=result.rowcount,
    )
    return result.rowcount
