"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP villa_property_matches_total Total property resolution attempts by outcome
        # TYPE villa_property_matches_total counter
        villa_property_matches_total{confidence="high",method="pmsListingId"} 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """
    Return metrics in Prometheus text exposition format.

    Returns:
        Response: Metrics with Content-Type: text/plain
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
