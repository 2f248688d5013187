from typing import Any, Literal, Optional, Union

from pydantic import Field

from villa_bookings.schemas.properties import CamelModel, PropertyMatchResult

ApprovalAction = Literal["approve", "reject"]
BookingStatus = Literal["pending_approval", "approved", "rejected"]


class BookingApprovalRequest(CamelModel):
    """
    Approve/reject request body.

    Every field is optional at the schema level, and the id and action fields
    accept any JSON value, so that missing or malformed values are reported by
    the workflow's own validation (400) rather than as a schema error.
    """

    booking_id: Optional[Any] = Field(None, description="Booking document id")
    action: Optional[Any] = Field(None, description='"approve" or "reject"')
    admin_id: Optional[Any] = Field(None, description="Id of the deciding admin")
    admin_name: Optional[str] = Field(None, description="Display name of the deciding admin")
    notes: Optional[str] = Field(None, description="Free-form notes stored on the booking")
    reason: Optional[str] = Field(None, description="Rejection reason")


class ApprovalResult(CamelModel):
    """Structured outcome of approve_or_reject. status_code is not serialized."""

    success: bool
    status_code: int = Field(200, exclude=True)
    booking_id: Optional[str] = None
    new_status: Optional[BookingStatus] = None
    approved_by: Optional[str] = None
    collection: Optional[str] = None
    sync_version: Optional[int] = None
    message: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    details: list[str] = Field(default_factory=list)


class BookingIntakePayload(CamelModel):
    """
    Booking received from a PMS/OTA feed.

    Required fields are checked by the intake service so that every problem
    is reported together.
    """

    property_name: Optional[str] = None
    address: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    check_in_date: Optional[str] = None
    check_out_date: Optional[str] = None
    nights: Optional[Union[int, str]] = None
    guests: Optional[Union[int, str]] = None
    price: Optional[Union[float, str]] = None
    source: Optional[str] = Field(None, description="Feed name, e.g. pms_webhook")

    pms_listing_id: Optional[str] = None
    pms_provider: Optional[str] = None
    airbnb_listing_id: Optional[str] = None
    booking_com_listing_id: Optional[str] = None
    vrbo_listing_id: Optional[str] = None
    property_external_id: Optional[str] = None


class BookingIntakeResult(CamelModel):
    success: bool
    status_code: int = Field(200, exclude=True)
    duplicate: bool = False
    message: Optional[str] = None
    duplicate_check_hash: Optional[str] = None
    pending_booking_id: Optional[str] = None
    live_booking_id: Optional[str] = None
    property_match: Optional[PropertyMatchResult] = None
    error: Optional[str] = None
    details: list[str] = Field(default_factory=list)
    booking: Optional[dict[str, Any]] = None
