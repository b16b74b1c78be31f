"""Presentation helpers shared by the CLI and API — what a results card shows."""

from parcelzone.core.types import ResolutionResult

HEIGHT_UNAVAILABLE = "Height limit not available"
NOT_AVAILABLE = "—"


def parcel_label(result: ResolutionResult) -> str | None:
    """'3707/001 / 3707 / 001' style identifier, blanks dropped; None without a parcel."""
    parcel = result.parcel
    if parcel is None or not parcel.parcel_id:
        return None
    parts = [parcel.parcel_id, parcel.block_number, parcel.lot_number]
    return " / ".join(p for p in parts if p)


def zone_name(result: ResolutionResult) -> str:
    """District name from the zoning layer, else the catalog rule's name."""
    if result.zoning is not None:
        return result.zoning.zone_name
    if result.zoning_rule is not None:
        return result.zoning_rule.name
    return ""


def height_display(result: ResolutionResult) -> str:
    """Height limit label, else the rule's max-height note."""
    if result.height_bulk is not None and result.height_bulk.height_limit_label.strip():
        return result.height_bulk.height_limit_label.strip()
    if result.zoning_rule is not None and result.zoning_rule.max_height_note:
        return result.zoning_rule.max_height_note
    return HEIGHT_UNAVAILABLE


def far_display(result: ResolutionResult) -> str:
    if result.zoning_rule is not None and result.zoning_rule.far is not None:
        return result.zoning_rule.far
    return NOT_AVAILABLE
