"""Domain types for parcel and zoning resolution.

All shared dataclasses live here to prevent circular imports and establish a
single source of truth for the domain model. A field set to ``None`` always
means "absent" (no feature found, or the upstream was unusable), never a
silent default.
"""

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Geocoding types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coordinate:
    """A WGS-84 point in degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class GeocodeAnswer:
    """Top-ranked geocoder match for an address."""

    coordinate: Coordinate
    display_label: str


# ---------------------------------------------------------------------------
# Dataset records (one per containment query)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParcelRecord:
    """A land parcel row. The parcels dataset also carries a zoning code."""

    parcel_id: str
    block_number: str = ""
    lot_number: str = ""
    embedded_zone_code: str | None = None
    embedded_zone_label: str | None = None


@dataclass(frozen=True)
class ZoningDistrictRecord:
    """A zoning district row. ``zone_code`` is never empty."""

    zone_code: str
    zone_name: str = ""


@dataclass(frozen=True)
class HeightBulkRecord:
    """A height/bulk district row. Either label may be an empty string."""

    height_limit_label: str = ""
    bulk_district_label: str = ""


# ---------------------------------------------------------------------------
# Zoning rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ZoningRule:
    """Human-readable rules for one zoning district, from the static catalog."""

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


@dataclass(frozen=True)
class RuleMatch:
    """Outcome of a rules lookup — either a rule, or a diagnostic explaining its absence."""

    rule: ZoningRule | None = None
    diagnostic: str | None = None

    @property
    def matched(self) -> bool:
        return self.rule is not None


# ---------------------------------------------------------------------------
# Pipeline results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParcelZoning:
    """Merged output of the three containment queries."""

    parcel: ParcelRecord | None = None
    zoning: ZoningDistrictRecord | None = None
    height_bulk: HeightBulkRecord | None = None


@dataclass(frozen=True)
class ResolutionResult:
    """Full answer for a coordinate — datasets plus matched zoning rules."""

    parcel: ParcelRecord | None = None
    zoning: ZoningDistrictRecord | None = None
    height_bulk: HeightBulkRecord | None = None
    zoning_rule: ZoningRule | None = None
    zoning_rule_diagnostic: str | None = None


@dataclass(frozen=True)
class AddressLookup:
    """Address-driven lookup: the geocode that located it and the resolution at that point."""

    address: str
    geocode: GeocodeAnswer
    result: ResolutionResult = field(default_factory=ResolutionResult)
