"""Climb detection and categorization for route elevation data.

Climbs are found with a single pass over the smoothed grade series. A climb
starts once the grade reaches the start threshold and ends when it drops below
a lower end threshold.
"""

from typing import Sequence

from gpx_route_analyzer.config import DEFAULT_CONFIG, CalculationConfig
from gpx_route_analyzer.models import Climb, ClimbCategory, EnhancedPoint

# Minimum distance * avg_grade score for each category, hardest first
CATEGORY_THRESHOLDS: list[tuple[float, ClimbCategory]] = [
    (80_000, ClimbCategory.HC),
    (64_000, ClimbCategory.CAT_1),
    (32_000, ClimbCategory.CAT_2),
    (16_000, ClimbCategory.CAT_3),
    (8_000, ClimbCategory.CAT_4),
]


def categorize_climb(
    distance: float,
    avg_grade: float,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> ClimbCategory | None:
    """Classify a climb by its distance (m) x average grade (%) score.

    Climbs shorter than the minimum distance or shallower than the minimum
    grade are never categorized.
    """
    if avg_grade < config.climb_min_grade or distance < config.climb_min_distance:
        return None

    score = distance * avg_grade
    for threshold, category in CATEGORY_THRESHOLDS:
        if score > threshold:
            return category
    return None


def climb_category_label(category: ClimbCategory | None) -> str:
    """Display label for a climb category."""
    if category is None:
        return "Uncategorized"
    if category is ClimbCategory.HC:
        return "Hors Catégorie"
    return f"Category {category.value}"


def detect_climbs(
    points: Sequence[EnhancedPoint],
    config: CalculationConfig = DEFAULT_CONFIG,
) -> list[Climb]:
    """Detect climbs along a route from its rolling grade series.

    Algorithm:
    1. Walk points from the second one, starting a climb when the grade
       reaches config.climb_min_grade
    2. Inside a climb, sum positive elevation changes only and track the
       steepest grade seen
    3. End the climb when the grade falls below config.climb_end_grade, or
       at the last point
    4. Keep it if it spans at least config.climb_min_distance meters,
       otherwise treat it as noise

    Missing elevations are treated as 0, so callers should skip detection
    for tracks without elevation data.

    Returns:
        Ordered, non-overlapping climbs
    """
    if len(points) < 2:
        return []

    climbs: list[Climb] = []
    in_climb = False
    start_idx = 0
    start_distance = 0.0
    elevation_gain = 0.0
    max_grade = 0.0
    last_idx = len(points) - 1

    for i in range(1, len(points)):
        pt = points[i]
        grade = pt.grade
        elev = pt.elevation if pt.elevation is not None else 0.0
        prev_elev = points[i - 1].elevation if points[i - 1].elevation is not None else 0.0

        if not in_climb and grade >= config.climb_min_grade:
            in_climb = True
            start_idx = i
            start_distance = pt.distance
            elevation_gain = 0.0
            max_grade = grade

        if not in_climb:
            continue

        # Descents inside a climb are ignored
        delta = elev - prev_elev
        if delta > 0:
            elevation_gain += delta
        if grade > max_grade:
            max_grade = grade

        if grade < config.climb_end_grade or i == last_idx:
            climb_distance = pt.distance - start_distance
            if climb_distance >= config.climb_min_distance:
                avg_grade = elevation_gain / climb_distance * 100
                climbs.append(Climb(
                    start_idx=start_idx,
                    end_idx=i,
                    start_distance=start_distance,
                    end_distance=pt.distance,
                    distance=climb_distance,
                    elevation_gain=elevation_gain,
                    avg_grade=avg_grade,
                    max_grade=max_grade,
                    category=categorize_climb(climb_distance, avg_grade, config),
                ))
            in_climb = False

    return climbs
