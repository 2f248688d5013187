import uuid
from typing import Any

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from villa_bookings.db.readers.properties import EXTERNAL_ID_COLUMNS
from villa_bookings.models.properties import Property
from villa_bookings.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_property(conn: Connection, data: dict[str, Any]) -> str:
    """
    Insert a property document, flattening location and pmsIntegration.

    Args:
        conn (Connection): Active connection (within a transaction).
        data (dict[str, Any]): Property document. "id" is generated if absent.

    Returns:
        str: The property id.
    """
    property_id = data.get("id") or uuid.uuid4().hex
    location = data.get("location") or {}
    coordinates = location.get("coordinates") or {}
    pms_integration = data.get("pmsIntegration") or {}
    now = utc_now()

    row: dict[str, Any] = {
        "id": property_id,
        "name": data.get("name"),
        "address": location.get("address"),
        "latitude": coordinates.get("latitude"),
        "longitude": coordinates.get("longitude"),
        "google_maps_link": location.get("googleMapsLink"),
        "pms_provider": pms_integration.get("pmsProvider"),
        "raw_payload": data.get("extra") or {},
        "created_at": now,
        "updated_at": now,
    }
    for field, column in EXTERNAL_ID_COLUMNS.items():
        row[column] = pms_integration.get(field) or None

    conn.execute(insert(Property).values(**row))
    logger.info("property_inserted", property_id=property_id)
    return property_id


def update_property_integration(
    conn: Connection, property_id: str, pms_integration: dict[str, Any]
) -> int:
    """
    Attach or correct external listing ids on a property.

    Only keys present in pms_integration are written; an empty string clears
    the id.

    Args:
        conn (Connection): Active connection (within a transaction).
        property_id (str): Internal property id.
        pms_integration (dict[str, Any]): pmsIntegration fields to set.

    Returns:
        int: Number of rows updated (0 if the property does not exist).
    """
    values: dict[str, Any] = {"updated_at": utc_now()}
    for field, column in EXTERNAL_ID_COLUMNS.items():
        if field in pms_integration:
            values[column] = pms_integration[field] or None
    if "pmsProvider" in pms_integration:
        values["pms_provider"] = pms_integration["pmsProvider"] or None

    result = conn.execute(update(Property).where(Property.id == property_id).values(**values))
    return result.rowcount
