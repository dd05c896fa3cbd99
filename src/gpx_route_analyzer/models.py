import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _finite(value: float | None) -> float | None:
    """NaN and infinity have no JSON representation; report them as None."""
    if value is not None and not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class TrackPoint:
    lat: float
    lon: float
    elevation: float | None  # meters
    time: datetime | None

    def to_dict(self) -> dict:
        return {
            "lat": _finite(self.lat),
            "lon": _finite(self.lon),
            "elevation": _finite(self.elevation),
            "time": _isoformat(self.time),
        }


@dataclass(frozen=True)
class EnhancedPoint(TrackPoint):
    distance: float = 0.0  # meters, cumulative from the first point
    grade: float = 0.0  # percent, smoothed and clamped

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["distance"] = _finite(self.distance)
        data["grade"] = _finite(self.grade)
        return data


@dataclass(frozen=True)
class SimplifiedPoint:
    lat: float
    lon: float
    ele: float  # meters; 0.0 where the source point had no elevation

    def to_dict(self) -> dict:
        return {"lat": _finite(self.lat), "lon": _finite(self.lon), "ele": _finite(self.ele)}


class ClimbCategory(str, Enum):
    """Climb category, from hardest (HC) to easiest (4)."""
    HC = "HC"
    CAT_1 = "1"
    CAT_2 = "2"
    CAT_3 = "3"
    CAT_4 = "4"


@dataclass(frozen=True)
class Climb:
    """A detected climb segment along a route."""
    start_idx: int             # Point index where the climb starts
    end_idx: int               # Point index where the climb ends
    start_distance: float      # Distance from route start (meters)
    end_distance: float        # Distance at end of climb (meters)
    distance: float            # Climb length (meters)
    elevation_gain: float      # Positive elevation change within the climb (meters)
    avg_grade: float           # percent
    max_grade: float           # percent
    category: ClimbCategory | None

    def to_dict(self) -> dict:
        return {
            "start_idx": self.start_idx,
            "end_idx": self.end_idx,
            "start_distance": _finite(self.start_distance),
            "end_distance": _finite(self.end_distance),
            "distance": _finite(self.distance),
            "elevation_gain": _finite(self.elevation_gain),
            "avg_grade": _finite(self.avg_grade),
            "max_grade": _finite(self.max_grade),
            "category": self.category.value if self.category is not None else None,
        }


@dataclass(frozen=True)
class RouteStats:
    total_distance: float  # meters
    total_elevation_gain: float  # meters
    total_elevation_loss: float  # meters
    min_elevation: float  # meters
    max_elevation: float  # meters
    total_time: float | None  # seconds
    moving_time: float | None  # seconds
    avg_speed: float | None  # m/s (based on moving time)
    max_speed: float | None  # m/s

    def to_dict(self) -> dict:
        return {
            "total_distance": _finite(self.total_distance),
            "total_elevation_gain": _finite(self.total_elevation_gain),
            "total_elevation_loss": _finite(self.total_elevation_loss),
            "min_elevation": _finite(self.min_elevation),
            "max_elevation": _finite(self.max_elevation),
            "total_time": _finite(self.total_time),
            "moving_time": _finite(self.moving_time),
            "avg_speed": _finite(self.avg_speed),
            "max_speed": _finite(self.max_speed),
        }


@dataclass(frozen=True)
class SegmentStats(RouteStats):
    """Statistics for a distance sub-range of a route."""
    start_distance: float = 0.0  # meters
    end_distance: float = 0.0  # meters

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["start_distance"] = _finite(self.start_distance)
        data["end_distance"] = _finite(self.end_distance)
        return data


@dataclass(frozen=True)
class RouteMetadata:
    name: str | None = None
    description: str | None = None

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True)
class ParseResult:
    points: list[TrackPoint]
    has_elevation: bool
    has_time: bool
    metadata: RouteMetadata = field(default_factory=RouteMetadata)


@dataclass(frozen=True)
class ParseError:
    message: str
    details: str | None = None

    def to_dict(self) -> dict:
        return {"message": self.message, "details": self.details}


@dataclass(frozen=True)
class AnalysisResult:
    """Complete analysis of one GPX route."""
    points: list[EnhancedPoint]  # Full-resolution points with metrics
    simplified_points: list[SimplifiedPoint]  # For map rendering
    stats: RouteStats
    climbs: list[Climb]
    has_elevation: bool
    has_time: bool
    is_loop: bool  # True if start and end are within the loop threshold
    file_name: str | None = None
    metadata: RouteMetadata = field(default_factory=RouteMetadata)

    def to_dict(self) -> dict:
        """Convert to a plain structure for JSON serialization."""
        return {
            "file_name": self.file_name,
            "metadata": self.metadata.to_dict(),
            "points": [pt.to_dict() for pt in self.points],
            "simplified_points": [pt.to_dict() for pt in self.simplified_points],
            "stats": self.stats.to_dict(),
            "climbs": [climb.to_dict() for climb in self.climbs],
            "has_elevation": self.has_elevation,
            "has_time": self.has_time,
            "is_loop": self.is_loop,
        }
