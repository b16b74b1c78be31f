"""Address and coordinate lookup pipeline.

  1. Geocode address → coordinate (address flow only)
  2. Resolve coordinate → parcel, zoning district, height/bulk district
  3. Match the merged zone code against the static rules catalog
"""

import logging
import time
from dataclasses import asdict
from typing import Any

from parcelzone.core.types import AddressLookup, Coordinate, ResolutionResult
from parcelzone.observability.tracing import trace
from parcelzone.pipeline.resolve import resolve
from parcelzone.retrieval.geocode import geocode
from parcelzone.rules.catalog import match_rule

logger = logging.getLogger(__name__)


@trace(name="resolve_coordinate", span_type="CHAIN")
async def resolve_coordinate(coordinate: Coordinate) -> ResolutionResult:
    """Run dataset resolution and rules matching for a point."""
    start = time.monotonic()
    merged = await resolve(coordinate)
    zone_code = merged.zoning.zone_code if merged.zoning else None
    match = match_rule(zone_code)

    logger.info(
        "Resolved (%.6f, %.6f): parcel=%s zoning=%s rule=%s",
        coordinate.lat, coordinate.lng,
        merged.parcel.parcel_id if merged.parcel else "N/A",
        zone_code or "N/A",
        "matched" if match.matched else match.diagnostic,
        extra={"zone_code": zone_code, "duration_ms": round((time.monotonic() - start) * 1000)},
    )

    return ResolutionResult(
        parcel=merged.parcel,
        zoning=merged.zoning,
        height_bulk=merged.height_bulk,
        zoning_rule=match.rule,
        zoning_rule_diagnostic=match.diagnostic,
    )


@trace(name="lookup_address", span_type="CHAIN")
async def lookup_address(address: str) -> AddressLookup | None:
    """Run the full address → zoning pipeline.

    Returns:
        AddressLookup, or None if the address cannot be geocoded.
    """
    answer = await geocode(address)
    if answer is None:
        logger.warning("Geocoding failed for: %s", address[:60], extra={"step": "geocode"})
        return None

    logger.info(
        "Geocoded: %s → %s (%.6f, %.6f)",
        address[:60], answer.display_label[:80], answer.coordinate.lat, answer.coordinate.lng,
    )
    result = await resolve_coordinate(answer.coordinate)
    return AddressLookup(address=address.strip(), geocode=answer, result=result)


def result_to_dict(result: ResolutionResult) -> dict[str, Any]:
    """Serialize a ResolutionResult to a JSON-safe dict.

    Absent records are explicit nulls; the diagnostic is only included when set.
    """
    data: dict[str, Any] = {
        "parcel": asdict(result.parcel) if result.parcel else None,
        "zoning": asdict(result.zoning) if result.zoning else None,
        "height_bulk": asdict(result.height_bulk) if result.height_bulk else None,
        "zoning_rule": asdict(result.zoning_rule) if result.zoning_rule else None,
    }
    if result.zoning_rule_diagnostic:
        data["zoning_rule_diagnostic"] = result.zoning_rule_diagnostic
    return data
