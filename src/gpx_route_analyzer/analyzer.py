from dataclasses import dataclass
from typing import Sequence

from gpx_route_analyzer.config import DEFAULT_CONFIG
from gpx_route_analyzer.distance import haversine_distance
from gpx_route_analyzer.models import EnhancedPoint, RouteStats, SegmentStats, TrackPoint

# Speed at or below this threshold (m/s) counts as stopped
MOVING_SPEED_THRESHOLD = DEFAULT_CONFIG.stop_speed_threshold  # ~1.8 km/h


@dataclass
class ElevationStats:
    gain: float  # meters
    loss: float  # meters
    min: float  # meters
    max: float  # meters


@dataclass
class TimeStats:
    total_time: float | None  # seconds
    moving_time: float | None  # seconds
    avg_speed: float | None  # m/s
    max_speed: float | None  # m/s


def _elevation(pt: TrackPoint) -> float:
    return pt.elevation if pt.elevation is not None else 0.0


def calculate_elevation_stats(points: Sequence[TrackPoint], vertical_threshold: float) -> ElevationStats:
    """Accumulate elevation gain and loss with a vertical hysteresis threshold.

    Elevation is compared against the last "confirmed" elevation. Once the
    cumulative change reaches vertical_threshold, the whole change is added to
    gain or loss and the reference moves to the current point. Small GPS
    altitude jitter therefore never accumulates.

    Min/max elevation are plain extrema and ignore the threshold.
    Missing elevations are treated as 0.
    """
    if not points:
        return ElevationStats(gain=0.0, loss=0.0, min=0.0, max=0.0)

    gain = 0.0
    loss = 0.0
    reference = _elevation(points[0])
    min_elevation = reference
    max_elevation = reference

    for pt in points:
        elevation = _elevation(pt)
        if elevation < min_elevation:
            min_elevation = elevation
        if elevation > max_elevation:
            max_elevation = elevation

        diff = elevation - reference
        if abs(diff) >= vertical_threshold:
            if diff > 0:
                gain += diff
            else:
                loss += abs(diff)
            reference = elevation

    return ElevationStats(gain=gain, loss=loss, min=min_elevation, max=max_elevation)


def calculate_time_stats(
    points: Sequence[TrackPoint],
    total_distance: float | None = None,
    stop_speed: float = MOVING_SPEED_THRESHOLD,
) -> TimeStats:
    """Calculate total time, moving time and speeds from timestamps.

    All fields are None when the first or last point has no timestamp.
    Segments with a missing timestamp or zero elapsed time are skipped.
    avg_speed is total route distance over moving time; total_distance is
    computed from the points when not given.
    """
    if not points or points[0].time is None or points[-1].time is None:
        return TimeStats(total_time=None, moving_time=None, avg_speed=None, max_speed=None)

    total_time = (points[-1].time - points[0].time).total_seconds()
    moving_seconds = 0.0
    max_speed = 0.0
    route_distance = 0.0

    for i in range(1, len(points)):
        prev, curr = points[i - 1], points[i]
        dist = haversine_distance(prev.lat, prev.lon, curr.lat, curr.lon)
        route_distance += dist

        if prev.time is None or curr.time is None:
            continue
        elapsed = (curr.time - prev.time).total_seconds()
        if elapsed == 0:
            continue

        speed = dist / elapsed
        if speed > stop_speed:
            moving_seconds += elapsed
        if speed > max_speed:
            max_speed = speed

    if total_distance is None:
        total_distance = route_distance
    avg_speed = total_distance / moving_seconds if moving_seconds > 0 else None

    return TimeStats(
        total_time=total_time,
        moving_time=moving_seconds,
        avg_speed=avg_speed,
        max_speed=max_speed,
    )


def calculate_route_stats(
    points: Sequence[EnhancedPoint],
    vertical_threshold: float,
    stop_speed: float = MOVING_SPEED_THRESHOLD,
) -> RouteStats:
    """Reduce enhanced points into aggregate route statistics."""
    if not points:
        return RouteStats(
            total_distance=0.0,
            total_elevation_gain=0.0,
            total_elevation_loss=0.0,
            min_elevation=0.0,
            max_elevation=0.0,
            total_time=None,
            moving_time=None,
            avg_speed=None,
            max_speed=None,
        )

    total_distance = points[-1].distance
    elev = calculate_elevation_stats(points, vertical_threshold)
    times = calculate_time_stats(points, total_distance=total_distance, stop_speed=stop_speed)

    return RouteStats(
        total_distance=total_distance,
        total_elevation_gain=elev.gain,
        total_elevation_loss=elev.loss,
        min_elevation=elev.min,
        max_elevation=elev.max,
        total_time=times.total_time,
        moving_time=times.moving_time,
        avg_speed=times.avg_speed,
        max_speed=times.max_speed,
    )


def calculate_segment_stats(
    points: Sequence[EnhancedPoint],
    start_distance: float,
    end_distance: float,
    vertical_threshold: float,
) -> SegmentStats | None:
    """Summarize the part of a route between two cumulative distances.

    Gain and loss count only point-to-point steps larger than
    vertical_threshold. Time fields are always None.

    Returns None if no points fall within [start_distance, end_distance].
    """
    if start_distance > end_distance:
        start_distance, end_distance = end_distance, start_distance

    selected = [pt for pt in points if start_distance <= pt.distance <= end_distance]
    if not selected:
        return None

    elevations = [_elevation(pt) for pt in selected]
    gain = 0.0
    loss = 0.0
    for prev, curr in zip(elevations, elevations[1:]):
        diff = curr - prev
        if diff > vertical_threshold:
            gain += diff
        elif -diff > vertical_threshold:
            loss += -diff

    return SegmentStats(
        total_distance=end_distance - start_distance,
        total_elevation_gain=gain,
        total_elevation_loss=loss,
        min_elevation=min(elevations),
        max_elevation=max(elevations),
        total_time=None,
        moving_time=None,
        avg_speed=None,
        max_speed=None,
        start_distance=start_distance,
        end_distance=end_distance,
    )
