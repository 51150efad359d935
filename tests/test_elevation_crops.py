"""Tests for elevation_crops.py — zone lookup, ranking, and crop filters."""

import dataclasses

import pytest
from elevation_crops import (
    DIFFICULTY_RANK,
    ELEVATION_ZONES,
    VALID_CATEGORIES,
    VALID_DIFFICULTIES,
    get_climate_description,
    get_crop_recommendations,
    get_crops_by_category,
    get_elevation_zone_name,
    get_top_crops,
    get_zones,
    is_crop_suitable,
)


# ── Zone table ──

class TestZoneTable:
    def test_five_zones(self):
        assert len(get_zones()) == 5

    def test_zones_are_contiguous(self):
        for lower, upper in zip(ELEVATION_ZONES, ELEVATION_ZONES[1:]):
            assert lower.max_elevation == upper.min_elevation

    def test_first_zone_starts_at_sea_level(self):
        assert ELEVATION_ZONES[0].min_elevation == 0

    def test_crop_enums_valid(self):
        for zone in ELEVATION_ZONES:
            assert zone.crops
            for crop in zone.crops:
                assert crop.category in VALID_CATEGORIES
                assert crop.difficulty in VALID_DIFFICULTIES

    def test_zones_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ELEVATION_ZONES[0].name = "Changed"

    def test_to_dict_without_crops(self):
        d = ELEVATION_ZONES[1].to_dict(include_crops=False)
        assert d['name'] == 'Low Elevation'
        assert 'crops' not in d


# ── Recommendations ──

class TestGetCropRecommendations:
    @pytest.mark.parametrize("elevation,expected", [
        (0, 'Sea Level to Lowlands'),
        (250, 'Sea Level to Lowlands'),
        (500, 'Low Elevation'),
        (999.9, 'Low Elevation'),
        (1000, 'Mid Elevation'),
        (2500, 'High Elevation'),
        (3000, 'Very High Elevation'),
        (4999, 'Very High Elevation'),
    ])
    def test_zone_lookup(self, elevation, expected):
        assert get_crop_recommendations(elevation)['zone'].name == expected

    def test_boundary_is_min_inclusive(self):
        below = get_crop_recommendations(499.999)['zone']
        at = get_crop_recommendations(500)['zone']
        assert below.name == 'Sea Level to Lowlands'
        assert at.name == 'Low Elevation'

    def test_above_table_falls_back_to_last_zone(self):
        assert get_crop_recommendations(8848)['zone'] is ELEVATION_ZONES[-1]

    def test_negative_falls_back_to_last_zone(self):
        assert get_crop_recommendations(-50)['zone'] is ELEVATION_ZONES[-1]

    def test_returns_full_crop_list(self):
        result = get_crop_recommendations(100)
        assert result['recommendations'] == result['zone'].crops
        assert len(result['recommendations']) == 10


# ── Top crops ──

class TestGetTopCrops:
    def test_low_elevation_top_three_easy(self):
        top = get_top_crops(800, 3)
        assert len(top) == 3
        assert all(c.difficulty == 'easy' for c in top)
        assert [c.name for c in top] == ['Tomatoes', 'Corn', 'Peppers']

    def test_sorted_by_difficulty(self):
        ranks = [DIFFICULTY_RANK[c.difficulty] for c in get_top_crops(100, 100)]
        assert ranks == sorted(ranks)

    def test_stable_within_difficulty(self):
        easy = [c.name for c in get_top_crops(100, 100) if c.difficulty == 'easy']
        assert easy == ['Bananas', 'Pineapple', 'Papaya', 'Cassava']

    def test_default_count(self):
        assert len(get_top_crops(1500)) == 3

    def test_count_larger_than_zone(self):
        assert len(get_top_crops(3500, 10)) == 4

    def test_zero_count(self):
        assert get_top_crops(800, 0) == []


# ── Filters ──

class TestFilters:
    def test_by_category(self):
        names = [c.name for c in get_crops_by_category(100, 'fruit')]
        assert names == ['Bananas', 'Pineapple', 'Mango', 'Papaya']

    def test_category_no_match(self):
        assert get_crops_by_category(3500, 'fruit') == []

    def test_suitable_case_insensitive(self):
        assert is_crop_suitable('rice', 100) is True
        assert is_crop_suitable('RICE', 100) is True

    def test_suitable_exact_name_only(self):
        assert is_crop_suitable('Coffee', 800) is True
        assert is_crop_suitable('Coffee', 1500) is False

    def test_not_suitable_in_other_zone(self):
        assert is_crop_suitable('Rice', 2500) is False

    def test_zone_name_and_climate(self):
        assert get_elevation_zone_name(1500) == 'Mid Elevation'
        assert get_climate_description(1500) == 'Cool Temperate'
