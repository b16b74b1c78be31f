"""parcelzone CLI — what can be built at an address."""

import asyncio
import sys

from parcelzone.config import settings
from parcelzone.observability.logging import setup_logging
from parcelzone.observability.tracing import configure_tracing
from parcelzone.pipeline.display import far_display, height_display, parcel_label, zone_name


def main() -> None:
    """Run a zoning lookup: parcelzone <address>"""
    setup_logging(json_format=False, level=settings.log_level)
    configure_tracing(settings.mlflow_tracking_uri, settings.mlflow_experiment_name)

    if len(sys.argv) < 2:
        print("Usage: parcelzone <address>")
        print('  Example: parcelzone "350 Mission Street, San Francisco"')
        sys.exit(1)

    address = " ".join(sys.argv[1:])
    asyncio.run(_address_lookup(address))


async def _address_lookup(address: str) -> None:
    """Address → geocode → dataset lookups → rules, printed as a report."""
    from parcelzone.pipeline.lookup import lookup_address

    print("\nparcelzone Zoning Lookup")
    print(f"{'=' * 50}")
    print(f"Looking up: {address}\n")

    found = await lookup_address(address)
    if not found:
        print("Address not found. Try a different search.")
        return

    result = found.result
    coord = found.geocode.coordinate
    print(f"Address:      {found.geocode.display_label}")
    print(f"Coordinates:  {coord.lat:.6f}, {coord.lng:.6f}")
    print()

    print(f"{'─' * 50}")
    label = parcel_label(result)
    print(f"Parcel:       {label or 'No parcel found'}")

    if result.zoning:
        name = zone_name(result)
        print(f"Zoning:       {result.zoning.zone_code}" + (f" ({name})" if name else ""))
    else:
        print("Zoning:       —")
    print(f"Height:       {height_display(result)}")
    if result.height_bulk and result.height_bulk.bulk_district_label:
        print(f"Bulk:         {result.height_bulk.bulk_district_label}")
    print(f"FAR:          {far_display(result)}")
    print()

    rule = result.zoning_rule
    if rule is None:
        print(result.zoning_rule_diagnostic or "No zoning rules available.")
        return

    print(f"{'─' * 50}")
    print(f"Zoning Rules: {rule.name}")
    if rule.description:
        print(f"  {rule.description}")
    for heading, uses in (
        ("Permitted", rule.permitted_uses),
        ("Conditional", rule.conditional_uses),
        ("Prohibited", rule.prohibited_uses),
    ):
        if uses:
            print(f"\n  {heading}:")
            for use in uses:
                print(f"    - {use}")
    if rule.bulk_note:
        print(f"\n  Bulk: {rule.bulk_note}")
    if rule.code_sections:
        print(f"  Code: {', '.join(rule.code_sections)}")
