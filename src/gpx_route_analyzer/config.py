"""Calculation constants and smoothing levels.

Everything here is passed explicitly into the calculation functions; nothing
is read from the environment or from disk.
"""

from dataclasses import dataclass
from enum import Enum


class SmoothingLevel(str, Enum):
    """User-facing selector for the elevation gain vertical threshold."""
    OFF = "off"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Vertical threshold in meters for each smoothing level
SMOOTHING_THRESHOLDS: dict[SmoothingLevel, float] = {
    SmoothingLevel.OFF: 0.0,
    SmoothingLevel.LOW: 3.0,
    SmoothingLevel.MEDIUM: 6.0,
    SmoothingLevel.HIGH: 9.0,
}

DEFAULT_SMOOTHING_LEVEL = SmoothingLevel.MEDIUM


def vertical_threshold_for(level: SmoothingLevel | str) -> float:
    """Return the vertical threshold (meters) for a smoothing level.

    Accepts either a SmoothingLevel or its string value ("off", "low", ...).

    Raises:
        ValueError: If the level is not recognised.
    """
    try:
        level = SmoothingLevel(level)
    except ValueError:
        valid = ", ".join(lvl.value for lvl in SmoothingLevel)
        raise ValueError(f"Unknown smoothing level: {level!r} (expected one of: {valid})") from None
    return SMOOTHING_THRESHOLDS[level]


@dataclass(frozen=True)
class CalculationConfig:
    # Climb detection
    climb_min_grade: float = 3.0  # percent; grade that starts a climb
    climb_end_grade: float = 2.0  # percent; grade below which a climb ends
    climb_min_distance: float = 300.0  # meters
    # Gradient calculation
    grade_window_size: int = 10  # points in the centered rolling window
    max_grade: float = 30.0  # percent; grades are clamped to +/- this value
    # Stop detection
    stop_speed_threshold: float = 0.5  # m/s; at or below this counts as stopped
    # Douglas-Peucker simplification
    simplify_tolerance: float = 0.0001  # degrees
    # Loop detection
    loop_threshold_meters: float = 500.0  # meters between first and last point


DEFAULT_CONFIG = CalculationConfig()
