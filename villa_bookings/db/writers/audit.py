"""Append-only writers for approval actions and sync events."""

from typing import Any

from sqlalchemy import insert
from sqlalchemy.engine import Connection

from villa_bookings.models.approvals import BookingApproval
from villa_bookings.models.sync_events import SyncEvent


def insert_approval_action(conn: Connection, row: dict[str, Any]) -> None:
    """
    Append one ApprovalAction audit record.

    Args:
        conn (Connection): Active connection (within a transaction).
        row (dict[str, Any]): booking_id, action, admin_id, admin_name,
            timestamp and the optional notes/reason.
    """
    conn.execute(insert(BookingApproval).values(**row))


def insert_sync_event(conn: Connection, row: dict[str, Any]) -> None:
    """
    Append one SyncEvent record. synced is always written as false.

    Args:
        conn (Connection): Active connection (within a transaction).
        row (dict[str, Any]): type, entity_id, entity_type, triggered_by,
            timestamp, changes, platform.
    """
    conn.execute(insert(SyncEvent).values(**row, synced=False))
