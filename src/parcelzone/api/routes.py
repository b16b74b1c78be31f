"""API route handlers for parcelzone.

POST /api/v1/lookup  — coordinate → parcel, zoning, height/bulk, rules
POST /api/v1/geocode — address → coordinate
POST /api/v1/analyze — address → geocode + full lookup
"""

import logging
import math

from fastapi import APIRouter, HTTPException

from parcelzone.api.schemas import (
    AddressRequest,
    AnalyzeResponse,
    ErrorResponse,
    GeocodeResponse,
    LookupRequest,
    ResolutionResponse,
)
from parcelzone.core.types import Coordinate, GeocodeAnswer
from parcelzone.pipeline.display import far_display, height_display, parcel_label
from parcelzone.pipeline.lookup import lookup_address, resolve_coordinate, result_to_dict
from parcelzone.retrieval.geocode import geocode

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["lookup"])

ADDRESS_NOT_FOUND = "Address not found. Try a different search."


def _parse_degrees(val: float | str | None) -> float | None:
    """Accept a number or a numeric string; reject anything not finite."""
    if val is None or isinstance(val, bool):
        return None
    try:
        num = float(val)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def _geocode_response(answer: GeocodeAnswer) -> GeocodeResponse:
    return GeocodeResponse(
        lat=answer.coordinate.lat,
        lng=answer.coordinate.lng,
        display_name=answer.display_label,
    )


@router.post(
    "/lookup",
    response_model=ResolutionResponse,
    response_model_exclude_unset=True,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid lat or lng"},
        500: {"model": ErrorResponse, "description": "Lookup failed"},
    },
)
async def lookup(request: LookupRequest):
    """Resolve parcel, zoning district, height/bulk district and rules at a point."""
    lat = _parse_degrees(request.lat)
    lng = _parse_degrees(request.lng)
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="Invalid lat or lng")

    try:
        result = await resolve_coordinate(Coordinate(lat=lat, lng=lng))
    except Exception:
        logger.exception("Lookup failed for (%s, %s)", lat, lng)
        raise HTTPException(status_code=500, detail="Lookup failed")

    return ResolutionResponse(**result_to_dict(result))


@router.post(
    "/geocode",
    response_model=GeocodeResponse,
    responses={404: {"model": ErrorResponse, "description": "Address not found"}},
)
async def geocode_route(request: AddressRequest):
    """Geocode an address to its best-matching coordinate."""
    answer = await geocode(request.address)
    if answer is None:
        raise HTTPException(status_code=404, detail=ADDRESS_NOT_FOUND)
    return _geocode_response(answer)


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_exclude_unset=True,
    responses={
        404: {"model": ErrorResponse, "description": "Address not found"},
        500: {"model": ErrorResponse, "description": "Lookup failed"},
    },
)
async def analyze(request: AddressRequest):
    """Geocode an address and run the full parcel/zoning lookup there."""
    try:
        found = await lookup_address(request.address)
    except Exception:
        logger.exception("Lookup failed for address: %s", request.address)
        raise HTTPException(status_code=500, detail="Lookup failed")

    if found is None:
        raise HTTPException(status_code=404, detail=ADDRESS_NOT_FOUND)

    result = found.result
    return AnalyzeResponse(
        address=found.address,
        geocode=_geocode_response(found.geocode),
        parcel_label=parcel_label(result),
        height_display=height_display(result),
        far_display=far_display(result),
        **result_to_dict(result),
    )
