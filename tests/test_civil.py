"""Tests for coarse civil bands and timezone polygon glow."""

import pytest

from deadlinesun.civil import (
    ZONE_KEYS,
    build_civil_bands,
    civil_minute_difference_for_zone,
    extract_zone_id,
    normalize_timezone_features,
    polygon_intensities,
    zone_intensity,
)
from deadlinesun.clock import parse_instant
from deadlinesun.models import TimezonePolygonFeature

PRAGUE_22H_WINTER = parse_instant("2026-01-01T21:00:00Z")

_SQUARE = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]}
_MULTI = {"type": "MultiPolygon", "coordinates": [[[[0, 0], [1, 0], [1, 1], [0, 0]]]]}


# ── Coarse hourly bands ───────────────────────────────────────────

class TestBuildCivilBands:

    def test_single_matching_offset(self):
        bands = build_civil_bands(PRAGUE_22H_WINTER, 22 * 60, 15)
        assert len(bands) == 1
        band = bands[0]
        assert band.offset_hours == 1
        assert band.center_longitude == 15.0
        assert band.start_longitude == 7.5
        assert band.end_longitude == 22.5
        assert band.minute_difference == 0.0
        assert band.intensity == 1.0

    def test_linear_falloff(self):
        ms = parse_instant("2026-01-01T21:07:30Z")
        (band,) = build_civil_bands(ms, 22 * 60, 15)
        assert band.minute_difference == pytest.approx(7.5)
        assert band.intensity == pytest.approx(0.5)

    def test_window_floored_at_one_minute(self):
        (band,) = build_civil_bands(PRAGUE_22H_WINTER, 22 * 60, 0)
        assert band.intensity == 1.0
        ms = parse_instant("2026-01-01T21:00:30Z")
        (band,) = build_civil_bands(ms, 22 * 60, -5)
        assert band.intensity == pytest.approx(0.5)

    def test_band_at_window_edge_kept_with_zero_intensity(self):
        ms = parse_instant("2026-01-01T21:15:00Z")
        (band,) = build_civil_bands(ms, 22 * 60, 15)
        assert band.offset_hours == 1
        assert band.minute_difference == 15.0
        assert band.intensity == 0.0

    def test_outside_window_dropped(self):
        ms = parse_instant("2026-01-01T21:20:00Z")
        assert build_civil_bands(ms, 22 * 60, 15) == ()

    def test_offsets_a_day_apart_both_glow(self):
        ms = parse_instant("2026-01-01T22:00:00Z")
        bands = build_civil_bands(ms, 12 * 60, 10)
        assert [b.offset_hours for b in bands] == [-10, 14]
        assert bands[0].center_longitude == bands[1].center_longitude == -150.0

    def test_dateline_band(self):
        ms = parse_instant("2026-01-01T12:00:00Z")
        bands = build_civil_bands(ms, 0, 5)
        assert [b.offset_hours for b in bands] == [-12, 12]
        band = bands[0]
        assert band.center_longitude == 180.0
        assert band.start_longitude == 172.5
        assert band.end_longitude == -172.5

    def test_wide_window_covers_all_offsets(self):
        bands = build_civil_bands(PRAGUE_22H_WINTER, 0, 720)
        assert [b.offset_hours for b in bands] == list(range(-12, 15))
        for band in bands:
            assert 0.0 <= band.intensity <= 1.0


# ── Zone wall clock ───────────────────────────────────────────────

class TestZoneIntensity:

    def test_computes_intensity_for_matching_civil_time(self):
        intensity = zone_intensity("Europe/Prague", PRAGUE_22H_WINTER, 22 * 60, 15)
        assert intensity is not None
        assert intensity > 0.9

    def test_follows_daylight_saving(self):
        summer = parse_instant("2026-07-01T20:00:00Z")
        assert zone_intensity("Europe/Prague", summer, 22 * 60, 15) == 1.0
        # the nominal +1 band reads 21:00 at the same instant; only +2 glows
        assert [b.offset_hours for b in build_civil_bands(summer, 22 * 60, 15)] == [2]

    def test_half_hour_zone(self):
        ms = parse_instant("2026-01-01T16:30:00Z")
        assert zone_intensity("Asia/Kolkata", ms, 22 * 60, 15) == 1.0

    def test_unknown_zone(self):
        assert zone_intensity("Mars/Olympus_Mons", PRAGUE_22H_WINTER, 22 * 60, 15) is None
        assert civil_minute_difference_for_zone("Mars/Olympus_Mons", PRAGUE_22H_WINTER, 0) is None

    def test_outside_window(self):
        assert zone_intensity("Asia/Tokyo", PRAGUE_22H_WINTER, 22 * 60, 15) is None

    def test_minute_difference_counts_seconds(self):
        ms = parse_instant("2026-01-01T21:00:30Z")
        assert civil_minute_difference_for_zone("Europe/Prague", ms, 22 * 60) == pytest.approx(0.5)


# ── Polygon normalization ─────────────────────────────────────────

class TestExtractZoneId:

    def test_extracts_tzid_from_known_keys(self):
        assert extract_zone_id({"tzid": "Europe/Prague"}) == "Europe/Prague"
        assert extract_zone_id({"timezone": "America/New_York"}) == "America/New_York"
        assert extract_zone_id({"name": "UTC"}) is None

    def test_key_order(self):
        assert ZONE_KEYS[0] == "tzid"
        props = {"tz_name": "Asia/Seoul", "TZID": "Asia/Tokyo", "name": "Japan"}
        assert extract_zone_id(props) == "Asia/Tokyo"

    def test_skips_values_without_slash(self):
        assert extract_zone_id({"tzid": "CET", "zone": "Europe/Berlin"}) == "Europe/Berlin"

    def test_non_string_and_empty(self):
        assert extract_zone_id({"tzid": 42}) is None
        assert extract_zone_id({}) is None
        assert extract_zone_id(None) is None


class TestNormalizeTimezoneFeatures:

    def test_keeps_only_polygons_with_zone(self):
        collection = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "id": 1, "geometry": _SQUARE, "properties": {"tzid": "Europe/Prague"}},
                {"type": "Feature", "id": "b", "geometry": _MULTI, "properties": {"timezone": "Asia/Tokyo"}},
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}, "properties": {"tzid": "Europe/Rome"}},
                {"type": "Feature", "geometry": None, "properties": {"tzid": "Europe/Rome"}},
                {"type": "Feature", "geometry": _SQUARE, "properties": None},
                {"type": "Feature", "geometry": _SQUARE, "properties": {"name": "nowhere"}},
                "not a feature",
            ],
        }
        features = normalize_timezone_features(collection)
        assert [f.zone_id for f in features] == ["Europe/Prague", "Asia/Tokyo"]
        assert [f.id for f in features] == [1, "b"]
        assert features[0].geometry == _SQUARE

    def test_empty_collection(self):
        assert normalize_timezone_features({"type": "FeatureCollection", "features": []}) == ()
        assert normalize_timezone_features({}) == ()

    def test_non_list_features_dropped(self):
        assert normalize_timezone_features({"type": "FeatureCollection", "features": 5}) == ()
        assert normalize_timezone_features({"features": {"type": "Feature"}}) == ()


class TestPolygonIntensities:

    def test_glowing_features_in_input_order(self):
        features = [
            TimezonePolygonFeature(zone_id="Asia/Tokyo", geometry=_SQUARE),
            TimezonePolygonFeature(zone_id="Europe/Prague", geometry=_SQUARE, id="cz"),
            TimezonePolygonFeature(zone_id="Europe/Berlin", geometry=_MULTI),
            TimezonePolygonFeature(zone_id="Bogus/Zone", geometry=_SQUARE),
        ]
        glowing = polygon_intensities(features, PRAGUE_22H_WINTER, 22 * 60, 15)
        assert [g.feature.zone_id for g in glowing] == ["Europe/Prague", "Europe/Berlin"]
        assert all(g.intensity == 1.0 for g in glowing)
