"""Core domain types shared across all parcelzone modules."""

from parcelzone.core.types import (
    AddressLookup,
    Coordinate,
    GeocodeAnswer,
    HeightBulkRecord,
    ParcelRecord,
    ParcelZoning,
    ResolutionResult,
    RuleMatch,
    ZoningDistrictRecord,
    ZoningRule,
)

__all__ = [
    "AddressLookup",
    "Coordinate",
    "GeocodeAnswer",
    "HeightBulkRecord",
    "ParcelRecord",
    "ParcelZoning",
    "ResolutionResult",
    "RuleMatch",
    "ZoningDistrictRecord",
    "ZoningRule",
]
