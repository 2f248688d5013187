from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection, RowMapping

from villa_bookings.models.properties import Property

# pmsIntegration document field -> column
EXTERNAL_ID_COLUMNS: dict[str, str] = {
    "pmsListingId": "pms_listing_id",
    "airbnbListingId": "airbnb_listing_id",
    "bookingComListingId": "booking_com_listing_id",
    "vrboListingId": "vrbo_listing_id",
}


def property_to_document(row: RowMapping) -> dict[str, Any]:
    """
    Shape a properties row as the nested property document callers expect.

    Args:
        row (RowMapping): A row from the properties table.

    Returns:
        dict[str, Any]: {id, name, location: {...}, pmsIntegration: {...}}
    """
    pms_integration = {
        field: row[column] for field, column in EXTERNAL_ID_COLUMNS.items() if row[column]
    }
    if row["pms_provider"]:
        pms_integration["pmsProvider"] = row["pms_provider"]

    location: dict[str, Any] = {
        "address": row["address"],
        "coordinates": {"latitude": row["latitude"], "longitude": row["longitude"]},
    }
    if row["google_maps_link"]:
        location["googleMapsLink"] = row["google_maps_link"]

    return {
        "id": row["id"],
        "name": row["name"],
        "location": location,
        "pmsIntegration": pms_integration,
    }


def get_property(conn: Connection, property_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch a property document by its own primary key.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        property_id (str): Internal property id.

    Returns:
        Optional[dict[str, Any]]: Property document or None if not found.
    """
    row = conn.execute(select(Property).where(Property.id == property_id)).mappings().fetchone()
    return property_to_document(row) if row else None


def find_property_by_external_id(
    conn: Connection, field: str, value: str
) -> Optional[dict[str, Any]]:
    """
    Exact-match lookup of a property by one pmsIntegration listing id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        field (str): pmsIntegration field name, e.g. "airbnbListingId".
        value (str): Listing id to match exactly.

    Returns:
        Optional[dict[str, Any]]: First matching property document or None.
    """
    column = getattr(Property, EXTERNAL_ID_COLUMNS[field])
    row = (
        conn.execute(select(Property).where(column == value).limit(1)).mappings().fetchone()
    )
    return property_to_document(row) if row else None


def find_external_id_owners(
    conn: Connection, external_ids: dict[str, str], exclude_id: str | None = None
) -> dict[str, str]:
    """
    Find properties that already own any of the given external listing ids.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        external_ids (dict[str, str]): pmsIntegration field -> listing id.
        exclude_id (str | None): Property id to ignore (the one being updated).

    Returns:
        dict[str, str]: pmsIntegration field -> id of the owning property.
    """
    owners: dict[str, str] = {}
    for field, value in external_ids.items():
        if not value or field not in EXTERNAL_ID_COLUMNS:
            continue
        column = getattr(Property, EXTERNAL_ID_COLUMNS[field])
        stmt = select(Property.id).where(column == value)
        if exclude_id is not None:
            stmt = stmt.where(Property.id != exclude_id)
        owner = conn.execute(stmt.limit(1)).scalar()
        if owner is not None:
            owners[field] = owner
    return owners
