from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MatchMethod = Literal[
    "pmsListingId",
    "airbnbListingId",
    "bookingComListingId",
    "vrboListingId",
    "propertyExternalId",
    "none",
]
MatchConfidence = Literal["high", "medium", "low"]


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, matching the booking feed payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PropertyMatchInput(CamelModel):
    """
    Identifier bundle attached to an incoming booking.

    property_name is carried for human reviewers only and never takes part
    in matching.
    """

    pms_listing_id: Optional[str] = Field(None, description="Listing id in the PMS")
    pms_provider: Optional[str] = Field(None, description="PMS vendor name")
    airbnb_listing_id: Optional[str] = Field(None, description="Airbnb listing id")
    booking_com_listing_id: Optional[str] = Field(None, description="Booking.com listing id")
    vrbo_listing_id: Optional[str] = Field(None, description="VRBO listing id")
    property_external_id: Optional[str] = Field(
        None, description="Internal property id supplied as a manual override"
    )
    property_name: Optional[str] = Field(None, description="Display name (not used for matching)")


class PropertyMatchResult(CamelModel):
    success: bool
    property_id: Optional[str] = None
    property: Optional[dict[str, Any]] = None
    match_method: MatchMethod
    confidence: MatchConfidence
    requires_review: bool
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class Coordinates(CamelModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Location(CamelModel):
    address: Optional[str] = None
    coordinates: Coordinates = Field(default_factory=Coordinates)
    google_maps_link: Optional[str] = None


class PmsIntegration(CamelModel):
    """External listing ids owned by a property. Empty string clears an id."""

    pms_provider: Optional[str] = None
    pms_listing_id: Optional[str] = None
    airbnb_listing_id: Optional[str] = None
    booking_com_listing_id: Optional[str] = None
    vrbo_listing_id: Optional[str] = None


class PropertyCreatePayload(CamelModel):
    id: Optional[str] = Field(None, description="Property id (generated when omitted)")
    name: Optional[str] = None
    location: Location = Field(default_factory=Location)
    pms_integration: PmsIntegration = Field(default_factory=PmsIntegration)
    extra: dict[str, Any] = Field(default_factory=dict, description="Other onboarding fields")
