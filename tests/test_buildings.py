import pytest
from decimal import Decimal

from timebank.core.buildings import (
    building_exists,
    calculate_periods,
    get_building_config,
    normalize_building_code,
)


class TestBuildingConfig:
    def test_known_codes(self):
        for code in ("OMS", "OHS", "OIS", "SES"):
            assert building_exists(code)

    def test_lookup_normalizes(self):
        assert normalize_building_code(" ohs ") == "OHS"
        assert get_building_config("ohs").name == "Orono High School"

    def test_unknown_falls_back_to_oms(self):
        assert get_building_config("XYZ").code == "OMS"
        assert get_building_config(None).code == "OMS"
        assert building_exists("XYZ") is False
        assert building_exists(None) is False

    def test_time_range_buildings(self):
        config = get_building_config("SES")
        assert config.schedule_type == "time_range"
        assert config.increment == 15
        assert config.periods == []


class TestCalculatePeriods:
    @pytest.mark.parametrize("period, duration, expected", [
        ("Period 6 - 11:40 - 12:06", "Full Period", "0.5"),
        ("Period 7 - 12:08 - 12:34", "Full Period", "0.5"),
        ("Period 6/7 - 11:40 - 12:34", "Full Period", "1"),
        ("Period 3 - 9:52 - 10:39", "Half Period", "0.5"),
        ("Period 3 - 9:52 - 10:39", "Full Period", "1"),
        ("Period 10 - 2:03 - 2:50", None, "1"),
        (None, "half", "0.5"),
    ])
    def test_hours(self, period, duration, expected):
        assert calculate_periods(period, duration) == Decimal(expected)
