"""Tests for the address/coordinate lookup pipeline."""

import pytest
from unittest.mock import AsyncMock, patch

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
from parcelzone.pipeline.lookup import lookup_address, resolve_coordinate, result_to_dict
from parcelzone.retrieval.socrata import HEIGHT_BULK_DISTRICTS, PARCELS, ZONING_DISTRICTS

MISSION_ST = Coordinate(lat=37.7891, lng=-122.397)
MID_PACIFIC = Coordinate(lat=30.0, lng=-140.0)


def _datasets(parcel=None, zoning=None, height_bulk=None):
    answers = {
        PARCELS.name: parcel,
        ZONING_DISTRICTS.name: zoning,
        HEIGHT_BULK_DISTRICTS.name: height_bulk,
    }

    async def fake_find(dataset, coordinate):
        return answers[dataset.name]

    return patch("parcelzone.pipeline.resolve.find_containing", side_effect=fake_find)


class TestResolveCoordinate:
    @pytest.mark.asyncio
    async def test_full_match(self):
        parcel = ParcelRecord(parcel_id="3708001", block_number="3708", lot_number="001")
        zoning = ZoningDistrictRecord(zone_code="C-3-O", zone_name="DOWNTOWN-OFFICE")
        height_bulk = HeightBulkRecord(height_limit_label="550-S", bulk_district_label="S")

        with _datasets(parcel, zoning, height_bulk):
            result = await resolve_coordinate(MISSION_ST)

        assert result.parcel == parcel
        assert result.zoning == zoning
        assert result.height_bulk == height_bulk
        assert result.zoning_rule is not None
        assert result.zoning_rule.zone_code == "C-3-O"
        assert result.zoning_rule_diagnostic is None

    @pytest.mark.asyncio
    async def test_boundary_prefers_dedicated_zoning(self):
        """Parcel says NC-2, zoning layer says 'NC-2 (Neighborhood Commercial)' — layer wins, rule still matches."""
        parcel = ParcelRecord(parcel_id="1", embedded_zone_code="NC-2")
        zoning = ZoningDistrictRecord(zone_code="NC-2 (Neighborhood Commercial)", zone_name="NC")

        with _datasets(parcel, zoning):
            result = await resolve_coordinate(MISSION_ST)

        assert result.zoning.zone_code == "NC-2 (Neighborhood Commercial)"
        assert result.zoning_rule.zone_code == "NC-2"

        with _datasets(parcel):
            fallback = await resolve_coordinate(MISSION_ST)

        assert fallback.zoning.zone_code == "NC-2"
        assert fallback.zoning_rule == result.zoning_rule

    @pytest.mark.asyncio
    async def test_outside_all_coverage(self):
        with _datasets():
            result = await resolve_coordinate(MID_PACIFIC)

        assert result == ResolutionResult(
            parcel=None,
            zoning=None,
            height_bulk=None,
            zoning_rule=None,
            zoning_rule_diagnostic="No zoning district found.",
        )

    @pytest.mark.asyncio
    async def test_unknown_zone_code(self):
        with _datasets(zoning=ZoningDistrictRecord(zone_code="ZZZ-NOPE")):
            result = await resolve_coordinate(MISSION_ST)

        assert result.zoning_rule is None
        assert result.zoning_rule_diagnostic == 'No rules found for zone "ZZZ-NOPE".'

    @pytest.mark.asyncio
    async def test_uses_merged_zoning_for_rules(self):
        merged = ParcelZoning(zoning=ZoningDistrictRecord(zone_code="RM-1"))
        with patch("parcelzone.pipeline.lookup.resolve", new_callable=AsyncMock, return_value=merged), \
             patch("parcelzone.pipeline.lookup.match_rule", return_value=RuleMatch(diagnostic="x")) as mock_match:
            await resolve_coordinate(MISSION_ST)

        mock_match.assert_called_once_with("RM-1")


class TestLookupAddress:
    @pytest.mark.asyncio
    async def test_geocode_then_resolve(self):
        answer = GeocodeAnswer(coordinate=MISSION_ST, display_label="350 Mission Street, San Francisco")
        expected = ResolutionResult(zoning_rule_diagnostic="No zoning district found.")

        with patch("parcelzone.pipeline.lookup.geocode", new_callable=AsyncMock, return_value=answer), \
             patch("parcelzone.pipeline.lookup.resolve_coordinate", new_callable=AsyncMock,
                   return_value=expected) as mock_resolve:
            found = await lookup_address(" 350 Mission St ")

        assert found == AddressLookup(address="350 Mission St", geocode=answer, result=expected)
        mock_resolve.assert_awaited_once_with(MISSION_ST)

    @pytest.mark.asyncio
    async def test_geocode_failure(self):
        with patch("parcelzone.pipeline.lookup.geocode", new_callable=AsyncMock, return_value=None), \
             patch("parcelzone.pipeline.lookup.resolve_coordinate", new_callable=AsyncMock) as mock_resolve:
            assert await lookup_address("nowhere at all") is None

        mock_resolve.assert_not_awaited()


class TestResultToDict:
    def test_absent_fields_are_explicit_nulls(self):
        data = result_to_dict(ResolutionResult(zoning_rule_diagnostic="No zoning district found."))
        assert data == {
            "parcel": None,
            "zoning": None,
            "height_bulk": None,
            "zoning_rule": None,
            "zoning_rule_diagnostic": "No zoning district found.",
        }

    def test_diagnostic_omitted_on_match(self):
        rule = ZoningRule(zone_code="RH-2", name="Residential - House, Two Family")
        data = result_to_dict(ResolutionResult(
            zoning=ZoningDistrictRecord(zone_code="RH-2"),
            zoning_rule=rule,
        ))
        assert "zoning_rule_diagnostic" not in data
        assert data["zoning"] == {"zone_code": "RH-2", "zone_name": ""}
        assert data["zoning_rule"]["name"] == "Residential - House, Two Family"
        assert data["zoning_rule"]["permitted_uses"] is None

    def test_empty_height_labels_kept(self):
        data = result_to_dict(ResolutionResult(height_bulk=HeightBulkRecord()))
        assert data["height_bulk"] == {"height_limit_label": "", "bulk_district_label": ""}
