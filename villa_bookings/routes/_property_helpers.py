"""
Internal helper functions for property route handlers.

Validation helpers raise HTTPException directly so the route bodies stay
linear.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.engine import Connection

from villa_bookings.db.readers.properties import find_external_id_owners, get_property


def get_property_or_404(conn: Connection, property_id: str) -> dict[str, Any]:
    """
    Fetch a property document, raise 404 if it does not exist.

    Raises:
        HTTPException: 404 if the property doesn't exist
    """
    property_doc = get_property(conn, property_id)
    if property_doc is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Property {property_id} not found",
        )
    return property_doc


def validate_property_not_exists_or_409(conn: Connection, property_id: str | None) -> None:
    """
    Raises:
        HTTPException: 409 if a property with this id already exists
    """
    if property_id and get_property(conn, property_id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Property {property_id} already exists",
        )


def validate_external_ids_free_or_409(
    conn: Connection,
    external_ids: dict[str, Any],
    exclude_id: str | None = None,
) -> None:
    """
    Validate that no other property owns any of the given listing ids.

    Args:
        conn: Database connection
        external_ids: pmsIntegration field -> listing id
        exclude_id: Property being updated (its own ids don't count)

    Raises:
        HTTPException: 409 naming each colliding field and its owner
    """
    owners = find_external_id_owners(conn, external_ids, exclude_id=exclude_id)
    if owners:
        collisions = ", ".join(
            f"{field}={external_ids[field]} (property {owner})" for field, owner in owners.items()
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"External listing id already assigned: {collisions}",
        )
