"""DataSF point-in-polygon lookups via the Socrata SODA API.

One generic containment query, parameterized per dataset:

  - Parcels:             acdm-wktn (blklot, block_num, lot_num, zoning_code, zoning_district)
  - Zoning districts:    8br2-hhp3 (zoning / zoning_sim, districtname)
  - Height/bulk:         gc9v-7i5s (heightlimit, bulkdistrict)

All endpoints are public, no authentication required. An app token only
raises the throttling limit.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from parcelzone.config import settings
from parcelzone.core.types import (
    Coordinate,
    HeightBulkRecord,
    ParcelRecord,
    ZoningDistrictRecord,
)
from parcelzone.observability.tracing import start_span

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DatasetConfig(Generic[T]):
    """Everything that differs between containment datasets."""

    name: str
    url: str
    geometry_column: str
    decode: Callable[[dict[str, Any]], T | None]


def where_point(coordinate: Coordinate, geometry_column: str) -> str:
    """Build the SoQL containment predicate. SoQL WKT points are POINT(longitude latitude)."""
    return f"intersects({geometry_column}, 'POINT({coordinate.lng} {coordinate.lat})')"


def _text(val) -> str | None:
    return str(val) if val is not None else None


# ---------------------------------------------------------------------------
# Row decoders — return None when the row's identifying field is missing
# ---------------------------------------------------------------------------

def decode_parcel(row: dict[str, Any]) -> ParcelRecord | None:
    blklot = row.get("blklot")
    if blklot is None or str(blklot) == "":
        return None
    return ParcelRecord(
        parcel_id=str(blklot),
        block_number=_text(row.get("block_num")) or "",
        lot_number=_text(row.get("lot_num")) or "",
        embedded_zone_code=_text(row.get("zoning_code")),
        embedded_zone_label=_text(row.get("zoning_district")),
    )


def decode_zoning(row: dict[str, Any]) -> ZoningDistrictRecord | None:
    # Older snapshots only populate the simplified code column
    code = row.get("zoning")
    if code is None:
        code = row.get("zoning_sim")
    if code is None or str(code) == "":
        return None
    return ZoningDistrictRecord(
        zone_code=str(code),
        zone_name=_text(row.get("districtname")) or "",
    )


def decode_height_bulk(row: dict[str, Any]) -> HeightBulkRecord | None:
    return HeightBulkRecord(
        height_limit_label=_text(row.get("heightlimit")) or "",
        bulk_district_label=_text(row.get("bulkdistrict")) or "",
    )


PARCELS = DatasetConfig(
    name="parcels",
    url=settings.parcels_url,
    geometry_column=settings.parcels_geometry_column,
    decode=decode_parcel,
)
ZONING_DISTRICTS = DatasetConfig(
    name="zoning",
    url=settings.zoning_url,
    geometry_column=settings.zoning_geometry_column,
    decode=decode_zoning,
)
HEIGHT_BULK_DISTRICTS = DatasetConfig(
    name="height_bulk",
    url=settings.height_bulk_url,
    geometry_column=settings.height_bulk_geometry_column,
    decode=decode_height_bulk,
)


async def _query_socrata(dataset: DatasetConfig, coordinate: Coordinate) -> list | None:
    """Execute a one-row containment query. Returns the JSON rows, or None on a bad response."""
    params = {
        "$where": where_point(coordinate, dataset.geometry_column),
        "$limit": "1",
    }
    headers = {}
    if settings.socrata_app_token:
        headers["X-App-Token"] = settings.socrata_app_token

    async with httpx.AsyncClient(timeout=settings.dataset_timeout) as client:
        resp = await client.get(dataset.url, params=params, headers=headers)
        if not resp.is_success:
            logger.warning(
                "DataSF %s error %s: %s", dataset.name, resp.status_code, resp.text[:300],
                extra={"dataset": dataset.name, "step": "upstream_error"},
            )
            return None
        data = resp.json()

    if not isinstance(data, list):
        logger.warning(
            "DataSF %s returned %s, expected a list", dataset.name, type(data).__name__,
            extra={"dataset": dataset.name, "step": "malformed_body"},
        )
        return None
    return data


async def find_containing(dataset: DatasetConfig[T], coordinate: Coordinate) -> T | None:
    """Return the first feature of ``dataset`` whose polygon contains ``coordinate``.

    Never raises — upstream errors, malformed bodies, empty results and unusable
    rows all come back as None.
    """
    try:
        with start_span(name=f"find_containing_{dataset.name}", span_type="TOOL") as span:
            span.set_inputs({"dataset": dataset.name, "lat": coordinate.lat, "lng": coordinate.lng})
            rows = await _query_socrata(dataset, coordinate)
            if not rows:
                if rows is not None:
                    logger.debug(
                        "DataSF %s: no feature contains (%s, %s)",
                        dataset.name, coordinate.lat, coordinate.lng,
                        extra={"dataset": dataset.name, "step": "not_found"},
                    )
                span.set_outputs({"found": False})
                return None

            if not isinstance(rows[0], dict):
                logger.warning(
                    "DataSF %s returned a %s row, expected an object", dataset.name, type(rows[0]).__name__,
                    extra={"dataset": dataset.name, "step": "malformed_body"},
                )
                span.set_outputs({"found": False})
                return None

            record = dataset.decode(rows[0])
            if record is None:
                logger.info(
                    "DataSF %s: matched a feature without its key field",
                    dataset.name,
                    extra={"dataset": dataset.name, "step": "row_unusable"},
                )
            span.set_outputs({"found": record is not None})
            return record
    except Exception as e:
        logger.warning(
            "DataSF %s query failed: %s", dataset.name, e,
            extra={"dataset": dataset.name, "step": "upstream_error"},
        )
        return None
