"""Concurrent containment queries and reconciliation of their answers.

The parcels dataset carries its own zoning columns. When the dedicated
zoning-district layer has no feature at the point (the two layers disagree on
coverage near boundaries), the parcel's embedded zoning stands in for it.
"""

import asyncio
import logging
from typing import TypeVar

from parcelzone.core.types import Coordinate, ParcelRecord, ParcelZoning, ZoningDistrictRecord
from parcelzone.observability.tracing import trace
from parcelzone.retrieval.socrata import (
    HEIGHT_BULK_DISTRICTS,
    PARCELS,
    ZONING_DISTRICTS,
    find_containing,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def first_present(*candidates: T | None) -> T | None:
    """Return the first candidate that is not None, in priority order."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def zoning_from_parcel(parcel: ParcelRecord | None) -> ZoningDistrictRecord | None:
    """Zoning answer synthesized from a parcel's embedded zoning columns."""
    if parcel is None or not parcel.embedded_zone_code:
        return None
    return ZoningDistrictRecord(
        zone_code=parcel.embedded_zone_code,
        zone_name=parcel.embedded_zone_label or "",
    )


def merge_zoning(
    dedicated: ZoningDistrictRecord | None,
    parcel: ParcelRecord | None,
) -> ZoningDistrictRecord | None:
    """Dedicated zoning-district answer first, parcel-embedded zoning second."""
    return first_present(dedicated, zoning_from_parcel(parcel))


@trace(name="resolve_parcel_zoning", span_type="CHAIN")
async def resolve(coordinate: Coordinate) -> ParcelZoning:
    """Query parcels, zoning districts and height/bulk districts concurrently.

    Each query absorbs its own upstream failures, so an exception surfacing
    here is unexpected and propagates to the caller.
    """
    parcel, zoning, height_bulk = await asyncio.gather(
        find_containing(PARCELS, coordinate),
        find_containing(ZONING_DISTRICTS, coordinate),
        find_containing(HEIGHT_BULK_DISTRICTS, coordinate),
    )

    merged = merge_zoning(zoning, parcel)
    if zoning is None and merged is not None:
        logger.info(
            "Zoning layer empty at (%s, %s); using parcel zoning %s",
            coordinate.lat, coordinate.lng, merged.zone_code,
            extra={"zone_code": merged.zone_code, "step": "parcel_fallback"},
        )

    return ParcelZoning(parcel=parcel, zoning=merged, height_bulk=height_bulk)
