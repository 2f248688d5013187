"""SQLAlchemy model for managed villa properties."""

from sqlalchemy import Column, DateTime, Float, String
from sqlalchemy.sql import func

from villa_bookings.config import SCHEMA
from villa_bookings.models.base import Base, JSONType


class Property(Base):
    """
    ORM model for a managed rental unit.

    The pmsIntegration block of the original document is flattened into one
    column per channel. Each external listing id column is unique, so a
    single property owns a given PMS/Airbnb/Booking.com/VRBO listing id.
    NULLs are allowed any number of times.
    """

    __tablename__ = "properties"
    __table_args__ = {"schema": SCHEMA}

    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    address = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    google_maps_link = Column(String, nullable=True)

    pms_provider = Column(String, nullable=True)
    pms_listing_id = Column(String, nullable=True, unique=True)
    airbnb_listing_id = Column(String, nullable=True, unique=True)
    booking_com_listing_id = Column(String, nullable=True, unique=True)
    vrbo_listing_id = Column(String, nullable=True, unique=True)

    raw_payload = Column(JSONType, nullable=True)  # Remaining onboarding fields
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
