from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from villa_bookings.db.writers.properties import insert_property, update_property_integration
from villa_bookings.dependencies import get_db_engine
from villa_bookings.routes._property_helpers import (
    get_property_or_404,
    validate_external_ids_free_or_409,
    validate_property_not_exists_or_409,
)
from villa_bookings.schemas.properties import (
    PmsIntegration,
    PropertyCreatePayload,
    PropertyMatchInput,
)
from villa_bookings.services.property_matching import (
    generate_google_maps_link,
    resolve_property,
    validate_property_for_job_creation,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/properties/match", status_code=status.HTTP_200_OK)
def match_booking_property(
    payload: PropertyMatchInput,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Resolve booking identifiers to an internal property.

    A missing match is a normal outcome (success=false, requiresReview=true),
    not an HTTP error.
    """
    return resolve_property(engine, payload).model_dump(by_alias=True)


@router.post("/properties", status_code=status.HTTP_201_CREATED)
def create_property(
    payload: PropertyCreatePayload,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Register a property with its external listing ids.

    Returns:
        dict: The stored property document
    """
    data = payload.model_dump(by_alias=True, exclude_none=True)
    try:
        with engine.begin() as conn:
            validate_property_not_exists_or_409(conn, payload.id)
            validate_external_ids_free_or_409(conn, data.get("pmsIntegration", {}))
            property_id = insert_property(conn, data)
            property_doc = get_property_or_404(conn, property_id)

        logger.info("property_created", property_id=property_id)
        return property_doc

    except HTTPException:
        raise
    except IntegrityError as e:
        logger.warning("property_create_conflict", error=str(e))
        raise HTTPException(status_code=409, detail="External listing id already assigned")
    except Exception as e:
        logger.exception("property_create_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/{property_id}", status_code=status.HTTP_200_OK)
def read_property(
    property_id: str,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    with engine.connect() as conn:
        return get_property_or_404(conn, property_id)


@router.patch("/properties/{property_id}/pms-integration", status_code=status.HTTP_200_OK)
def update_pms_integration(
    property_id: str,
    payload: PmsIntegration,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Attach or correct external listing ids on an existing property.

    Only fields present in the body are written; an empty string clears one.
    """
    update_data = payload.model_dump(by_alias=True, exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        with engine.begin() as conn:
            get_property_or_404(conn, property_id)
            validate_external_ids_free_or_409(conn, update_data, exclude_id=property_id)
            update_property_integration(conn, property_id, update_data)
            property_doc = get_property_or_404(conn, property_id)

        logger.info(
            "property_integration_updated",
            property_id=property_id,
            fields=sorted(update_data),
        )
        return property_doc

    except HTTPException:
        raise
    except IntegrityError as e:
        logger.warning("property_update_conflict", property_id=property_id, error=str(e))
        raise HTTPException(status_code=409, detail="External listing id already assigned")
    except Exception as e:
        logger.exception("property_update_failed", property_id=property_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/{property_id}/job-readiness", status_code=status.HTTP_200_OK)
def property_job_readiness(
    property_id: str,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Report missing job-creation fields and the derived Google Maps link."""
    with engine.connect() as conn:
        property_doc = get_property_or_404(conn, property_id)

    readiness = validate_property_for_job_creation(property_doc)
    return {
        "propertyId": property_id,
        **readiness,
        "googleMapsLink": generate_google_maps_link(property_doc),
    }
