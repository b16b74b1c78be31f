"""Nominatim address resolution — free-text address to coordinates.

Uses the public OpenStreetMap Nominatim search API. No API key required, but
the usage policy requires a distinct User-Agent and ~1 req/sec. One request
per call, no retries.
"""

import logging
import math

import httpx

from parcelzone.config import settings
from parcelzone.core.types import Coordinate, GeocodeAnswer
from parcelzone.observability.tracing import trace

logger = logging.getLogger(__name__)


def _parse_degrees(val) -> float | None:
    """Parse a Nominatim coordinate string ('37.7891') into a finite float."""
    if val is None:
        return None
    try:
        num = float(val)
    except (ValueError, TypeError):
        return None
    return num if math.isfinite(num) else None


@trace(name="geocode", span_type="TOOL")
async def geocode(address: str) -> GeocodeAnswer | None:
    """Geocode an address to its single best match.

    Returns:
        GeocodeAnswer with the top result's coordinate and display label,
        or None if the input is blank or geocoding fails for any reason.
    """
    query = address.strip()
    if not query:
        return None

    params = {
        "q": query,
        "format": "json",
        "limit": "1",
        "addressdetails": "1",
    }
    headers = {"User-Agent": settings.geocoder_user_agent}

    try:
        async with httpx.AsyncClient(timeout=settings.geocode_timeout) as client:
            resp = await client.get(settings.nominatim_url, params=params, headers=headers)
            if not resp.is_success:
                logger.warning("Nominatim error %s: %s", resp.status_code, resp.text[:200])
                return None
            data = resp.json()
    except Exception as e:
        logger.warning("Geocode request failed for %r: %s", query[:60], e)
        return None

    if not isinstance(data, list) or not data:
        logger.info("No geocoding results for: %s", query[:60])
        return None

    top = data[0] if isinstance(data[0], dict) else {}
    lat = _parse_degrees(top.get("lat"))
    lng = _parse_degrees(top.get("lon"))
    if lat is None or lng is None:
        logger.warning("Unparsable coordinates from Nominatim: %r, %r", top.get("lat"), top.get("lon"))
        return None

    label = top.get("display_name")
    if label is None:
        label = f"{lat}, {lng}"
    return GeocodeAnswer(coordinate=Coordinate(lat=lat, lng=lng), display_label=str(label))
