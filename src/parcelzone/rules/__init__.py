"""Static zoning rules catalog and zone-code matching."""

from parcelzone.rules.catalog import (
    RulesCatalogError,
    get_catalog,
    load_catalog,
    match_rule,
    normalize_zone_code,
)

__all__ = ["RulesCatalogError", "get_catalog", "load_catalog", "match_rule", "normalize_zone_code"]
