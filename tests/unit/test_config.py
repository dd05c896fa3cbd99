import dataclasses

import pytest

from gpx_route_analyzer.config import (
    DEFAULT_CONFIG,
    SMOOTHING_THRESHOLDS,
    CalculationConfig,
    SmoothingLevel,
    vertical_threshold_for,
)
from gpx_route_analyzer.distance import EARTH_RADIUS_M


class TestSmoothingLevels:
    def test_thresholds(self):
        assert SMOOTHING_THRESHOLDS == {
            SmoothingLevel.OFF: 0.0,
            SmoothingLevel.LOW: 3.0,
            SmoothingLevel.MEDIUM: 6.0,
            SmoothingLevel.HIGH: 9.0,
        }

    def test_lookup_by_enum_or_string(self):
        assert vertical_threshold_for(SmoothingLevel.HIGH) == 9.0
        assert vertical_threshold_for("low") == 3.0
        assert vertical_threshold_for("off") == 0.0

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown smoothing level"):
            vertical_threshold_for("extreme")


class TestCalculationConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.climb_min_grade == 3.0
        assert DEFAULT_CONFIG.climb_end_grade == 2.0
        assert DEFAULT_CONFIG.climb_min_distance == 300.0
        assert DEFAULT_CONFIG.grade_window_size == 10
        assert DEFAULT_CONFIG.stop_speed_threshold == 0.5
        assert DEFAULT_CONFIG.loop_threshold_meters == 500.0

    def test_earth_radius_is_not_configurable(self):
        # Distances always use the module constant in distance.py
        assert "earth_radius" not in {f.name for f in dataclasses.fields(CalculationConfig)}
        assert EARTH_RADIUS_M == 6_371_000

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.climb_min_grade = 5.0

    def test_custom_values(self):
        config = CalculationConfig(climb_min_grade=4.0, grade_window_size=20)
        assert config.climb_min_grade == 4.0
        assert config.grade_window_size == 20
        assert config.climb_end_grade == 2.0
