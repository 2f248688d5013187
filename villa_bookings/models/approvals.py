from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, text

from villa_bookings.config import SCHEMA
from villa_bookings.models.base import Base


class BookingApproval(Base):
    """
    ORM model for the approval-action audit trail.

    One row per approve/reject decision. Rows are append-only: nothing in
    this service updates or deletes them.
    """

    __tablename__ = "booking_approvals"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String, nullable=False, index=True)
    action = Column(String, nullable=False)  # approve | reject
    admin_id = Column(String, nullable=False)
    admin_name = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    notes = Column(Text, nullable=True)
    reason = Column(Text, nullable=True)
    approval_level = Column(String, nullable=False, server_default=text("'admin'"))
    notify_guest = Column(Boolean, nullable=False, server_default=text("TRUE"))
    notify_staff = Column(Boolean, nullable=False, server_default=text("TRUE"))
