"""Tests for concurrent dataset resolution and the zoning fallback merge."""

import asyncio

import pytest
from unittest.mock import patch

from parcelzone.core.types import (
    Coordinate,
    HeightBulkRecord,
    ParcelRecord,
    ParcelZoning,
    ZoningDistrictRecord,
)
from parcelzone.pipeline.resolve import first_present, merge_zoning, resolve, zoning_from_parcel
from parcelzone.retrieval.socrata import HEIGHT_BULK_DISTRICTS, PARCELS, ZONING_DISTRICTS

POINT = Coordinate(lat=37.7599, lng=-122.4148)


def _fake_datasets(parcel=None, zoning=None, height_bulk=None, fail: str | None = None):
    answers = {
        PARCELS.name: parcel,
        ZONING_DISTRICTS.name: zoning,
        HEIGHT_BULK_DISTRICTS.name: height_bulk,
    }

    async def fake_find(dataset, coordinate):
        assert coordinate == POINT
        if dataset.name == fail:
            raise RuntimeError(f"{dataset.name} exploded")
        return answers[dataset.name]

    return patch("parcelzone.pipeline.resolve.find_containing", side_effect=fake_find)


class TestFirstPresent:
    def test_first_wins(self):
        assert first_present("a", "b") == "a"

    def test_skips_none(self):
        assert first_present(None, "b") == "b"

    def test_all_none(self):
        assert first_present(None, None) is None

    def test_empty_string_counts_as_present(self):
        assert first_present("", "b") == ""


class TestZoningFromParcel:
    def test_embedded_code_and_label(self):
        parcel = ParcelRecord(parcel_id="1", embedded_zone_code="RM-1", embedded_zone_label="RESIDENTIAL- MIXED")
        assert zoning_from_parcel(parcel) == ZoningDistrictRecord(zone_code="RM-1", zone_name="RESIDENTIAL- MIXED")

    def test_missing_label_defaults_empty(self):
        parcel = ParcelRecord(parcel_id="1", embedded_zone_code="RM-1")
        assert zoning_from_parcel(parcel) == ZoningDistrictRecord(zone_code="RM-1", zone_name="")

    def test_empty_code(self):
        assert zoning_from_parcel(ParcelRecord(parcel_id="1", embedded_zone_code="")) is None

    def test_no_parcel(self):
        assert zoning_from_parcel(None) is None


class TestMergeZoning:
    def test_dedicated_preferred_over_parcel(self):
        dedicated = ZoningDistrictRecord(zone_code="NC-2 (Neighborhood Commercial)", zone_name="NC-2")
        parcel = ParcelRecord(parcel_id="1", embedded_zone_code="NC-2")
        assert merge_zoning(dedicated, parcel) is dedicated

    def test_parcel_fallback(self):
        parcel = ParcelRecord(parcel_id="1", embedded_zone_code="RM-1", embedded_zone_label="Mixed")
        assert merge_zoning(None, parcel) == ZoningDistrictRecord(zone_code="RM-1", zone_name="Mixed")

    def test_both_absent(self):
        assert merge_zoning(None, ParcelRecord(parcel_id="1")) is None
        assert merge_zoning(None, None) is None


class TestResolve:
    @pytest.mark.asyncio
    async def test_all_present(self):
        parcel = ParcelRecord(parcel_id="3611001", embedded_zone_code="RH-2")
        zoning = ZoningDistrictRecord(zone_code="RH-3", zone_name="RESIDENTIAL- HOUSE, THREE FAMILY")
        height_bulk = HeightBulkRecord(height_limit_label="40-X", bulk_district_label="X")

        with _fake_datasets(parcel, zoning, height_bulk):
            result = await resolve(POINT)

        assert result == ParcelZoning(parcel=parcel, zoning=zoning, height_bulk=height_bulk)

    @pytest.mark.asyncio
    async def test_parcel_fallback_when_zoning_layer_empty(self):
        parcel = ParcelRecord(parcel_id="3611001", embedded_zone_code="RM-1")

        with _fake_datasets(parcel=parcel):
            result = await resolve(POINT)

        assert result.zoning == ZoningDistrictRecord(zone_code="RM-1", zone_name="")
        assert result.parcel is parcel

    @pytest.mark.asyncio
    async def test_outside_coverage(self):
        with _fake_datasets():
            result = await resolve(POINT)

        assert result == ParcelZoning(parcel=None, zoning=None, height_bulk=None)

    @pytest.mark.asyncio
    async def test_queries_run_concurrently(self):
        started: list[str] = []
        release = asyncio.Event()

        async def fake_find(dataset, coordinate):
            started.append(dataset.name)
            if len(started) == 3:
                release.set()
            await asyncio.wait_for(release.wait(), timeout=1)
            return None

        with patch("parcelzone.pipeline.resolve.find_containing", side_effect=fake_find):
            await resolve(POINT)

        assert sorted(started) == ["height_bulk", "parcels", "zoning"]

    @pytest.mark.asyncio
    async def test_unexpected_failure_propagates(self):
        with _fake_datasets(fail=ZONING_DISTRICTS.name):
            with pytest.raises(RuntimeError, match="zoning exploded"):
                await resolve(POINT)
