"""
SQLAlchemy models for the three booking collections.

A booking may exist as separate physical rows in more than one of these
tables at the same time. Rows describing the same logical booking share a
duplicate_check_hash; writes must be fanned out explicitly.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from villa_bookings.config import SCHEMA
from villa_bookings.models.base import Base, JSONType

BOOKING_STATUSES = ("pending_approval", "approved", "rejected")


class BookingColumns:
    """Column set shared by pending_bookings, bookings and live_bookings."""

    id = Column(String, primary_key=True)
    guest_name = Column(String, nullable=True)
    guest_email = Column(String, nullable=True)
    property_name = Column(String, nullable=True)  # Display only
    property_id = Column(String, nullable=True, index=True)
    address = Column(String, nullable=True)
    check_in_date = Column(String, nullable=True)  # ISO date
    check_out_date = Column(String, nullable=True)  # ISO date
    status = Column(String, nullable=False, default="pending_approval", index=True)
    sync_version = Column(Integer, nullable=False, default=1)
    duplicate_check_hash = Column(String, nullable=True, index=True)

    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(String, nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejected_by = Column(String, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    source = Column(String, nullable=True)
    raw_payload = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)


class PendingBooking(BookingColumns, Base):
    """Intake collection: bookings waiting for an admin decision."""

    __tablename__ = "pending_bookings"
    __table_args__ = {"schema": SCHEMA}


class Booking(BookingColumns, Base):
    """Primary collection, watched by the calendar integration listener."""

    __tablename__ = "bookings"
    __table_args__ = {"schema": SCHEMA}


class LiveBooking(BookingColumns, Base):
    """Real-time collection read by the admin dashboards and mobile apps."""

    __tablename__ = "live_bookings"
    __table_args__ = {"schema": SCHEMA}


# Fixed probe order used when locating a booking by id
BOOKING_COLLECTIONS: dict[str, type[BookingColumns]] = {
    "pending_bookings": PendingBooking,
    "bookings": Booking,
    "live_bookings": LiveBooking,
}
