from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from villa_bookings.db.readers.bookings import list_approval_actions, list_pending_bookings
from villa_bookings.dependencies import get_db_engine
from villa_bookings.schemas.bookings import BookingApprovalRequest, BookingIntakePayload
from villa_bookings.services.booking_approval import approve_or_reject
from villa_bookings.services.booking_intake import receive_booking

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/bookings/approve")
def approve_booking(
    payload: BookingApprovalRequest,
    engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """
    Approve or reject a booking with cross-collection sync.

    Expected payload:
        {
            "bookingId": "b1",
            "action": "approve",
            "adminId": "admin1",
            "adminName": "Jane",
            "notes": "...",
            "reason": "..."
        }

    Returns:
        JSONResponse: ApprovalResult with 200, 400, 404, 409 or 500
    """
    result = approve_or_reject(
        engine,
        booking_id=payload.booking_id,
        action=payload.action,
        admin_id=payload.admin_id,
        admin_name=payload.admin_name,
        notes=payload.notes,
        reason=payload.reason,
    )
    return JSONResponse(
        status_code=result.status_code,
        content=result.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("/bookings/intake")
def intake_booking(
    payload: BookingIntakePayload,
    engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """Receive a booking from a PMS/OTA feed."""
    result = receive_booking(engine, payload)
    return JSONResponse(
        status_code=result.status_code,
        content=result.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/bookings/pending", status_code=status.HTTP_200_OK)
def pending_bookings(engine: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    """Bookings in the primary collection still waiting for a decision."""
    try:
        with engine.connect() as conn:
            bookings = list_pending_bookings(conn)
    except Exception as e:
        logger.exception("pending_bookings_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    return {
        "success": True,
        "pendingBookings": jsonable_encoder(bookings),
        "count": len(bookings),
    }


@router.get("/bookings/{booking_id}/approvals", status_code=status.HTTP_200_OK)
def booking_approval_history(
    booking_id: str,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Approval audit trail for one booking."""
    try:
        with engine.connect() as conn:
            approvals = list_approval_actions(conn, booking_id)
    except Exception as e:
        logger.exception("approval_history_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    return {
        "success": True,
        "bookingId": booking_id,
        "approvals": jsonable_encoder(approvals),
    }
