from sqlalchemy import Boolean, Column, DateTime, Integer, String, text

from villa_bookings.config import SCHEMA
from villa_bookings.models.base import Base, JSONType


class SyncEvent(Base):
    """
    ORM model for cross-platform sync notifications.

    Append-only. synced is always written as false; downstream consumers
    (mobile apps, calendar services) poll or listen on this table themselves.
    """

    __tablename__ = "sync_events"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String, nullable=False, index=True)  # booking_approved, booking_rejected
    entity_id = Column(String, nullable=False, index=True)
    entity_type = Column(String, nullable=False)
    triggered_by = Column(String, nullable=False)
    triggered_by_name = Column(String, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    changes = Column(JSONType, nullable=False)
    platform = Column(String, nullable=False)
    synced = Column(Boolean, nullable=False, server_default=text("FALSE"))
