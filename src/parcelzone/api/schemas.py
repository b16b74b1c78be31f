"""Pydantic request/response models for the parcelzone API.

These are the API contract — decoupled from the internal domain dataclasses.
Route handlers bridge them via pipeline.lookup.result_to_dict().
"""

from pydantic import BaseModel, Field


class LookupRequest(BaseModel):
    """Request body for POST /api/v1/lookup. Numeric strings are accepted."""

    lat: float | str | None = Field(None, examples=[37.7793])
    lng: float | str | None = Field(None, examples=[-122.4193])


class AddressRequest(BaseModel):
    """Request body for POST /api/v1/geocode and /api/v1/analyze."""

    address: str = Field(
        ...,
        min_length=1,
        max_length=300,
        examples=["350 Mission Street, San Francisco"],
    )


class ParcelResponse(BaseModel):
    parcel_id: str
    block_number: str = ""
    lot_number: str = ""
    embedded_zone_code: str | None = None
    embedded_zone_label: str | None = None


class ZoningResponse(BaseModel):
    zone_code: str
    zone_name: str = ""


class HeightBulkResponse(BaseModel):
    height_limit_label: str = ""
    bulk_district_label: str = ""


class ZoningRuleResponse(BaseModel):
    zone_code: str
    name: str
    description: str | None = None
    permitted_uses: list[str] | None = None
    conditional_uses: list[str] | None = None
    prohibited_uses: list[str] | None = None
    max_height_note: str | None = None
    bulk_note: str | None = None
    far: str | None = None
    code_sections: list[str] | None = None


class ResolutionResponse(BaseModel):
    """Parcel, districts and rules at a point. Absent records are null.

    ``zoning_rule_diagnostic`` is only present when no rule matched.
    """

    parcel: ParcelResponse | None = None
    zoning: ZoningResponse | None = None
    height_bulk: HeightBulkResponse | None = None
    zoning_rule: ZoningRuleResponse | None = None
    zoning_rule_diagnostic: str | None = None


class GeocodeResponse(BaseModel):
    lat: float
    lng: float
    display_name: str


class AnalyzeResponse(ResolutionResponse):
    """Full address lookup — where the address was found plus the resolution there."""

    address: str
    geocode: GeocodeResponse
    parcel_label: str | None = None
    height_display: str = ""
    far_display: str = ""


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
