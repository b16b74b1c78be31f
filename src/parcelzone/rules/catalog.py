"""Zoning rules lookup from the static JSON catalog.

Matching is flexible: a trailing parenthetical suffix is stripped and the
comparison is case-insensitive, so 'RH-2 (Residential House, Two-Family)',
'RH-2' and 'rh-2' all resolve to the same catalog entry.
"""

import json
import logging
import re
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from parcelzone.config import settings
from parcelzone.core.types import RuleMatch, ZoningRule

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "zoning_rules.json"

NO_DISTRICT_MESSAGE = "No zoning district found."
NO_RULES_DATA_MESSAGE = "No rules data available."

_PAREN_SUFFIX = re.compile(r"\s*\([^)]*\)\s*$")

_LIST_FIELDS = ("permitted_uses", "conditional_uses", "prohibited_uses", "code_sections")
_TEXT_FIELDS = ("description", "max_height_note", "bulk_note", "far")


class RulesCatalogError(Exception):
    """The rules catalog file is missing or cannot be parsed."""


def normalize_zone_code(code: str) -> str:
    """Normalize a zone code for matching.

    'RH-2 (Residential House, Two-Family)' → 'rh-2'
    '  NC-2 ' → 'nc-2'

    Stacked suffixes ('RH-1 (D) (legacy)') are all stripped, so normalizing
    an already-normalized code never changes it.
    """
    stripped = _PAREN_SUFFIX.sub("", code)
    while stripped != code:
        code, stripped = stripped, _PAREN_SUFFIX.sub("", stripped)
    return stripped.strip().lower()


def _parse_rule(entry: dict) -> ZoningRule:
    if not isinstance(entry, dict) or not entry.get("zone_code") or not entry.get("name"):
        raise RulesCatalogError(f"Rule entry missing zone_code or name: {entry!r}")
    kwargs = {"zone_code": str(entry["zone_code"]), "name": str(entry["name"])}
    for key in _TEXT_FIELDS:
        if entry.get(key) is not None:
            kwargs[key] = str(entry[key])
    for key in _LIST_FIELDS:
        if entry.get(key) is not None:
            kwargs[key] = [str(item) for item in entry[key]]
    return ZoningRule(**kwargs)


def parse_catalog(data) -> tuple[ZoningRule, ...]:
    """Build rule records from the decoded catalog JSON (``{"rules": [...]}``).

    A document without a ``rules`` list yields an empty catalog. Entries whose
    normalized codes collide are reported; the first one keeps matching.
    """
    rules_data = data.get("rules") if isinstance(data, dict) else None
    if not isinstance(rules_data, list):
        logger.warning("Zoning rules catalog has no 'rules' list")
        return ()

    rules = tuple(_parse_rule(entry) for entry in rules_data)

    seen: dict[str, str] = {}
    for rule in rules:
        key = normalize_zone_code(rule.zone_code)
        if key in seen:
            logger.warning(
                "Duplicate zone code in rules catalog: %r shadowed by %r",
                rule.zone_code, seen[key],
                extra={"zone_code": rule.zone_code},
            )
        else:
            seen[key] = rule.zone_code
    return rules


def load_catalog(path: str | Path | None = None) -> tuple[ZoningRule, ...]:
    """Read and parse a rules catalog file."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise RulesCatalogError(f"Cannot load zoning rules from {catalog_path}: {e}") from e
    rules = parse_catalog(data)
    version = data.get("version", "unknown") if isinstance(data, dict) else "unknown"
    logger.info("Loaded %d zoning rules (version %s)", len(rules), version)
    return rules


@lru_cache(maxsize=1)
def get_catalog() -> tuple[ZoningRule, ...]:
    """Process-wide catalog, loaded once on first use and never reloaded."""
    return load_catalog(settings.rules_catalog_path or None)


def match_rule(zone_code: str | None, rules: Sequence[ZoningRule] | None = None) -> RuleMatch:
    """Look up zoning rules by zone code.

    Returns a RuleMatch with the rule and no diagnostic on success, or no rule
    and a diagnostic explaining why.
    """
    if zone_code is None or str(zone_code).strip() == "":
        return RuleMatch(diagnostic=NO_DISTRICT_MESSAGE)

    catalog = get_catalog() if rules is None else rules
    if not catalog:
        return RuleMatch(diagnostic=NO_RULES_DATA_MESSAGE)

    normalized = normalize_zone_code(zone_code)
    for rule in catalog:
        if normalize_zone_code(rule.zone_code) == normalized:
            return RuleMatch(rule=rule)

    return RuleMatch(diagnostic=f'No rules found for zone "{zone_code}".')
