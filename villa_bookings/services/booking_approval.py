"""
Booking approval workflow.

A booking can physically exist in pending_bookings, bookings and live_bookings
at the same time. Approving or rejecting it:

1. validates the request (no I/O on failure)
2. locates the booking by id, probing pending_bookings, bookings, live_bookings
3. updates the document where it was found (authoritative, failure is fatal)
4. patches copies in the other two collections sharing its
   duplicate_check_hash (best effort, logged only)
5. appends one approval action and one sync event (best effort, logged only)
6. runs the enabled post-approval hooks (approve only, isolated)

Nothing is rolled back: a failure after step 3 never undoes the status change.
Without OPTIMISTIC_LOCKING two concurrent decisions on the same booking are
last-write-wins and both audit records are kept.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from villa_bookings.config import MAX_VERSION_RETRIES, OPTIMISTIC_LOCKING, SYNC_EVENT_PLATFORM
from villa_bookings.db.readers.bookings import locate_booking
from villa_bookings.db.writers.audit import insert_approval_action, insert_sync_event
from villa_bookings.db.writers.bookings import update_booking, update_bookings_by_hash
from villa_bookings.errors import (
    ConflictError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from villa_bookings.metrics import (
    approval_duration,
    booking_approvals,
    propagation_updates,
    side_effect_failures,
)
from villa_bookings.models.bookings import BOOKING_COLLECTIONS
from villa_bookings.schemas.bookings import ApprovalResult
from villa_bookings.services.post_approval_hooks import (
    ApprovalContext,
    HookRegistry,
    post_approval_hooks,
)
from villa_bookings.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

VALID_ACTIONS = ("approve", "reject")
DEFAULT_ADMIN_NAME = "Unknown Admin"


def validate_approval_request(booking_id: Any, action: Any, admin_id: Any) -> None:
    """
    Raises:
        ValidationError: If a required field is missing, action is unknown or
            an id is not a string
    """
    if not booking_id or not action or not admin_id:
        raise ValidationError("Missing required fields: bookingId, action, adminId")
    if action not in VALID_ACTIONS:
        raise ValidationError('Invalid action. Must be "approve" or "reject"')
    if not isinstance(booking_id, str) or not isinstance(admin_id, str):
        raise ValidationError("bookingId and adminId must be strings")


def build_status_update(
    action: str,
    admin_id: str,
    current_version: int | None,
    now: datetime,
    notes: str | None = None,
    reason: str | None = None,
) -> dict[str, Any]:
    """
    Build the column values written for an approve/reject decision.

    Args:
        action: "approve" or "reject"
        admin_id: Deciding admin
        current_version: sync_version read from the booking
        now: Server timestamp for this decision
        notes: Optional notes stored on the booking
        reason: Optional rejection reason

    Returns:
        dict[str, Any]: Update payload for the bookings tables
    """
    updates: dict[str, Any] = {
        "status": "approved" if action == "approve" else "rejected",
        "updated_at": now,
        "last_synced_at": now,
        "sync_version": (current_version or 1) + 1,
    }

    if action == "approve":
        updates["approved_at"] = now
        updates["approved_by"] = admin_id
    else:
        updates["rejected_at"] = now
        updates["rejected_by"] = admin_id
        if reason:
            updates["rejection_reason"] = reason

    if notes:
        updates["notes"] = notes

    return updates


def apply_primary_update(
    engine: Engine,
    booking_id: str,
    action: str,
    admin_id: str,
    notes: str | None = None,
    reason: str | None = None,
    optimistic_locking: bool = False,
    max_retries: int = MAX_VERSION_RETRIES,
) -> tuple[str, dict[str, Any], dict[str, Any]]:
    """
    Locate the booking and write the status change where it was found.

    With optimistic_locking the write is conditioned on the sync_version that
    was read; a conflict re-reads the booking and retries.

    Returns:
        tuple: (collection, booking as read, applied updates)

    Raises:
        NotFoundError: Booking is in none of the collections
        ConflictError: sync_version kept changing underneath us
        TransientStoreError: The store failed
    """
    attempts = 1 + (max_retries if optimistic_locking else 0)

    for attempt in range(1, attempts + 1):
        try:
            with engine.begin() as conn:
                located = locate_booking(conn, booking_id)
                if located is None:
                    raise NotFoundError("Booking not found")
                collection, booking = located

                updates = build_status_update(
                    action, admin_id, booking.get("sync_version"), utc_now(), notes, reason
                )
                expected_version = booking.get("sync_version") if optimistic_locking else None
                updated = update_booking(
                    conn, collection, booking_id, updates, expected_version=expected_version
                )
        except SQLAlchemyError as e:
            raise TransientStoreError(str(e)) from e

        if updated:
            return collection, booking, updates

        if not optimistic_locking:
            # Row disappeared between read and write
            raise NotFoundError("Booking not found")

        logger.warning(
            "sync_version_conflict",
            booking_id=booking_id,
            collection=collection,
            expected_version=expected_version,
            attempt=attempt,
        )

    raise ConflictError(
        f"Booking {booking_id} was modified concurrently; gave up after {attempts} attempts"
    )


def propagate_to_duplicates(
    engine: Engine,
    source_collection: str,
    duplicate_check_hash: str | None,
    updates: dict[str, Any],
) -> dict[str, int]:
    """
    Best-effort copy of a status change to the other booking collections.

    Each collection is patched in its own transaction. Failures are logged
    and counted, never raised, retried or rolled back.

    Returns:
        dict[str, int]: collection -> documents updated (failed ones omitted)
    """
    propagated: dict[str, int] = {}

    for collection in BOOKING_COLLECTIONS:
        if collection == source_collection:
            continue

        if not duplicate_check_hash:
            propagation_updates.labels(collection=collection, status="skipped").inc()
            continue

        try:
            with engine.begin() as conn:
                count = update_bookings_by_hash(conn, collection, duplicate_check_hash, updates)
        except Exception as e:
            logger.warning(
                "booking_propagation_failed",
                collection=collection,
                duplicate_check_hash=duplicate_check_hash,
                error=str(e),
            )
            propagation_updates.labels(collection=collection, status="failure").inc()
            continue

        propagated[collection] = count
        propagation_updates.labels(collection=collection, status="success").inc()
        if count:
            logger.info(
                "booking_propagated",
                collection=collection,
                duplicate_check_hash=duplicate_check_hash,
                count=count,
            )

    return propagated


def record_decision(
    engine: Engine,
    booking_id: str,
    action: str,
    admin_id: str,
    admin_name: str,
    booking: dict[str, Any],
    new_status: str,
    collection: str,
    notes: str | None = None,
    reason: str | None = None,
) -> list[str]:
    """
    Append the approval action and the sync event, independently.

    Returns:
        list[str]: Warnings for writes that failed (empty when both succeeded)
    """
    warnings: list[str] = []
    now = utc_now()

    try:
        with engine.begin() as conn:
            insert_approval_action(
                conn,
                {
                    "booking_id": booking_id,
                    "action": action,
                    "admin_id": admin_id,
                    "admin_name": admin_name,
                    "timestamp": now,
                    "notes": notes,
                    "reason": reason,
                    "approval_level": "admin",
                    "notify_guest": True,
                    "notify_staff": True,
                },
            )
    except Exception as e:
        logger.exception("approval_action_write_failed", booking_id=booking_id, error=str(e))
        side_effect_failures.labels(kind="approval_action").inc()
        warnings.append(f"Approval action was not recorded: {e}")

    try:
        with engine.begin() as conn:
            insert_sync_event(
                conn,
                {
                    "type": f"booking_{new_status}",
                    "entity_id": booking_id,
                    "entity_type": "booking",
                    "triggered_by": admin_id,
                    "triggered_by_name": admin_name,
                    "timestamp": now,
                    "changes": {
                        "action": action,
                        "newStatus": new_status,
                        "property": booking.get("property_name"),
                        "guest": booking.get("guest_name"),
                        "notes": notes,
                        "reason": reason,
                        "collection": collection,
                    },
                    "platform": SYNC_EVENT_PLATFORM,
                },
            )
    except Exception as e:
        logger.exception("sync_event_write_failed", booking_id=booking_id, error=str(e))
        side_effect_failures.labels(kind="sync_event").inc()
        warnings.append(f"Sync event was not recorded: {e}")

    return warnings


def approve_or_reject(
    engine: Engine,
    booking_id: str | None,
    action: str | None,
    admin_id: str | None,
    admin_name: str | None = None,
    notes: str | None = None,
    reason: str | None = None,
    hooks: HookRegistry | None = None,
    optimistic_locking: bool | None = None,
) -> ApprovalResult:
    """
    Approve or reject a booking.

    Args:
        engine: SQLAlchemy engine
        booking_id: Booking document id
        action: "approve" or "reject"
        admin_id: Deciding admin
        admin_name: Display name for the audit trail
        notes: Optional notes stored on the booking
        reason: Optional rejection reason
        hooks: Post-approval hook registry (defaults to the configured one)
        optimistic_locking: Override the OPTIMISTIC_LOCKING setting

    Returns:
        ApprovalResult: Always a structured result; status_code carries the
        HTTP-equivalent outcome (200, 400, 404, 409, 500).
    """
    metric_action = action if action in VALID_ACTIONS else "invalid"

    with approval_duration.labels(action=metric_action).time():
        try:
            validate_approval_request(booking_id, action, admin_id)
        except ValidationError as e:
            logger.warning("booking_approval_invalid", booking_id=booking_id, action=action)
            booking_approvals.labels(action=metric_action, outcome="invalid").inc()
            return ApprovalResult(success=False, status_code=e.status_code, error=e.message)

        admin_name = admin_name or DEFAULT_ADMIN_NAME
        use_locking = OPTIMISTIC_LOCKING if optimistic_locking is None else optimistic_locking

        logger.info("booking_approval_started", booking_id=booking_id, action=action)

        try:
            collection, booking, updates = apply_primary_update(
                engine, booking_id, action, admin_id, notes, reason, optimistic_locking=use_locking
            )
        except NotFoundError as e:
            logger.warning("booking_not_found", booking_id=booking_id)
            booking_approvals.labels(action=action, outcome="not_found").inc()
            return ApprovalResult(
                success=False, status_code=e.status_code, booking_id=booking_id, error=e.message
            )
        except ConflictError as e:
            booking_approvals.labels(action=action, outcome="conflict").inc()
            return ApprovalResult(
                success=False, status_code=e.status_code, booking_id=booking_id, error=e.message
            )
        except TransientStoreError as e:
            logger.exception("booking_primary_update_failed", booking_id=booking_id, error=e.message)
            booking_approvals.labels(action=action, outcome="error").inc()
            return ApprovalResult(
                success=False,
                status_code=e.status_code,
                booking_id=booking_id,
                error="Internal server error",
                details=[e.message],
            )

        new_status = updates["status"]
        logger.info(
            "booking_status_updated",
            booking_id=booking_id,
            collection=collection,
            new_status=new_status,
            sync_version=updates["sync_version"],
        )

        propagate_to_duplicates(engine, collection, booking.get("duplicate_check_hash"), updates)

        warnings = record_decision(
            engine,
            booking_id,
            action,
            admin_id,
            admin_name,
            booking,
            new_status,
            collection,
            notes,
            reason,
        )

        if action == "approve":
            registry = post_approval_hooks if hooks is None else hooks
            context = ApprovalContext(
                booking_id=booking_id,
                action=action,
                new_status=new_status,
                admin_id=admin_id,
                collection=collection,
                booking={**booking, **updates},
            )
            for outcome in registry.run(context):
                if not outcome.success:
                    warnings.append(f"Post-approval hook {outcome.name} failed: {outcome.error}")

        booking_approvals.labels(action=action, outcome="success").inc()
        logger.info(f"booking_{new_status}", booking_id=booking_id, admin_id=admin_id)

        return ApprovalResult(
            success=True,
            booking_id=booking_id,
            new_status=new_status,
            approved_by=admin_id,
            collection=collection,
            sync_version=updates["sync_version"],
            message=f"Booking {new_status} successfully and synced across platforms",
            warnings=warnings,
        )
