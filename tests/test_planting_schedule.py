"""Tests for planting_schedule.py — climate zones, month ranges, calendar, recommendations."""

import pytest
from planting_schedule import (
    CLIMATE_ZONES,
    MONTHS,
    PLANTING_SCHEDULES,
    generate_monthly_calendar,
    get_climate_zone,
    get_crops_for_zone,
    get_current_planting_recommendations,
    get_maintenance_activities,
    get_schedule,
    get_weather_considerations,
    is_month_in_range,
)


# ── Climate zone classification ──

class TestGetClimateZone:
    @pytest.mark.parametrize("temp,expected", [
        (30, 'tropical'),
        (25, 'tropical'),
        (24.999, 'subtropical'),
        (20, 'subtropical'),
        (19.9, 'temperate'),
        (15, 'temperate'),
        (14.999, 'continental'),
        (-10, 'continental'),
    ])
    def test_thresholds(self, temp, expected):
        assert get_climate_zone(temp) == expected

    def test_every_result_is_a_known_zone(self):
        for t in range(-20, 45):
            assert get_climate_zone(t) in CLIMATE_ZONES


# ── Month ranges ──

class TestIsMonthInRange:
    def test_wrap_includes_december(self):
        assert is_month_in_range('December', 'November', 'February') is True

    def test_wrap_includes_january(self):
        assert is_month_in_range('January', 'November', 'February') is True

    def test_wrap_excludes_march(self):
        assert is_month_in_range('March', 'November', 'February') is False

    def test_plain_range_excludes_outside(self):
        assert is_month_in_range('June', 'March', 'April') is False

    def test_plain_range_inclusive_ends(self):
        assert is_month_in_range('March', 'March', 'April') is True
        assert is_month_in_range('April', 'March', 'April') is True

    def test_single_month_range(self):
        assert is_month_in_range('July', 'July', 'July') is True
        assert is_month_in_range('August', 'July', 'July') is False

    def test_unknown_month_does_not_raise(self):
        assert is_month_in_range('Smarch', 'March', 'April') is False


# ── Schedule lookups ──

class TestScheduleLookup:
    def test_known_pair(self):
        schedule = get_schedule('Tomato', 'temperate')
        assert schedule.harvest_time == 'July-October'
        assert schedule.climate_zone == 'temperate'
        assert len(schedule.growth_stages) == 5

    def test_missing_pair_is_none(self):
        assert get_schedule('Banana', 'temperate') is None
        assert get_schedule('Durian', 'tropical') is None

    def test_rice_tropical_windows(self):
        windows = get_schedule('Rice', 'tropical').planting_windows
        assert [(w.start, w.end, w.optimal) for w in windows] == [
            ('June', 'July', True),
            ('November', 'December', False),
        ]

    def test_crops_for_subtropical(self):
        assert get_crops_for_zone('subtropical') == ['Coffee', 'Avocado', 'Lettuce']

    def test_no_continental_data(self):
        assert get_crops_for_zone('continental') == []

    def test_all_month_names_valid(self):
        for zones in PLANTING_SCHEDULES.values():
            for schedule in zones.values():
                for window in schedule.planting_windows:
                    assert window.start in MONTHS
                    assert window.end in MONTHS

    def test_to_dict_is_plain(self):
        d = get_schedule('Spinach', 'temperate').to_dict()
        assert d['crop'] == 'Spinach'
        assert isinstance(d['growth_stages'][0]['tips'], list)
        assert d['planting_windows'][0]['start'] == 'March'


# ── Calendar ──

class TestGenerateMonthlyCalendar:
    @pytest.mark.parametrize("zone", list(CLIMATE_ZONES))
    def test_always_twelve_months_in_order(self, zone):
        calendar = generate_monthly_calendar(zone)
        assert [m['month'] for m in calendar] == list(MONTHS)

    def test_unknown_zone_still_twelve(self):
        calendar = generate_monthly_calendar('polar')
        assert len(calendar) == 12
        assert all(m['activities']['planting'] == [] for m in calendar)

    def test_continental_lists_empty_but_maintenance_present(self):
        january = generate_monthly_calendar('continental')[0]
        assert january['activities']['planting'] == []
        assert january['activities']['harvesting'] == []
        assert january['activities']['maintenance'] == [
            'Plan crop rotation', 'Order seeds', 'Maintain equipment',
        ]
        assert january['weather_considerations'] == []

    def test_subtropical_march(self):
        march = generate_monthly_calendar('subtropical')[2]
        assert march['activities']['planting'] == ['Coffee (Optimal)', 'Avocado (Optimal)']
        assert march['activities']['harvesting'] == ['Lettuce']

    def test_alternative_label(self):
        november = generate_monthly_calendar('tropical')[10]
        assert 'Rice (Alternative)' in november['activities']['planting']
        assert 'Tomato (Optimal)' in november['activities']['planting']

    def test_harvest_is_literal_substring(self):
        calendar = {m['month']: m for m in generate_monthly_calendar('temperate')}
        # 'July-October' names July and October only
        assert 'Tomato' in calendar['July']['activities']['harvesting']
        assert 'Tomato' in calendar['October']['activities']['harvesting']
        assert 'Tomato' not in calendar['August']['activities']['harvesting']

    def test_weather_considerations(self):
        january = generate_monthly_calendar('tropical')[0]
        assert january['weather_considerations'] == [
            'Dry season - increase irrigation',
            'Cool temperatures ideal for cool-season crops',
        ]


# ── Current recommendations ──

class TestCurrentRecommendations:
    def test_tropical_june(self):
        result = get_current_planting_recommendations('June', 'tropical')
        assert [p['crop'] for p in result['plant_now']] == ['Rice', 'Coffee']
        assert all(p['optimal'] for p in result['plant_now'])
        assert result['plant_now'][0]['reason'] == 'Monsoon season provides adequate water'

    def test_temperate_march(self):
        result = get_current_planting_recommendations('March', 'temperate')
        crops = [p['crop'] for p in result['plant_now']]
        assert crops == ['Tomato', 'Wheat', 'Onion', 'Carrot', 'Lettuce', 'Spinach', 'Cabbage']
        wheat = next(p for p in result['plant_now'] if p['crop'] == 'Wheat')
        assert wheat['optimal'] is False

    def test_plant_soon_always_empty(self):
        for month in MONTHS:
            assert get_current_planting_recommendations(month, 'temperate')['plant_soon'] == []

    def test_harvest_now(self):
        result = get_current_planting_recommendations('October', 'tropical')
        assert 'Rice' in result['harvest_now']
        assert 'Coffee' in result['harvest_now']

    def test_unknown_zone_empty(self):
        result = get_current_planting_recommendations('June', 'continental')
        assert result == {'plant_now': [], 'plant_soon': [], 'harvest_now': []}


# ── Static tables ──

class TestStaticTables:
    def test_maintenance_independent_of_zone(self):
        assert get_maintenance_activities('May', 'tropical') == get_maintenance_activities('May', 'continental')

    def test_maintenance_unknown_month(self):
        assert get_maintenance_activities('Smarch', 'temperate') == []

    def test_weather_only_tropical_and_temperate(self):
        assert get_weather_considerations('January', 'temperate') == [
            'Plan for spring planting', 'Protect plants from frost',
        ]
        assert get_weather_considerations('January', 'subtropical') == []
