import json
from datetime import datetime, timezone

from gpx_route_analyzer.models import (
    AnalysisResult,
    Climb,
    ClimbCategory,
    EnhancedPoint,
    RouteMetadata,
    RouteStats,
    SegmentStats,
    SimplifiedPoint,
    TrackPoint,
)


def _stats(**overrides):
    values = dict(
        total_distance=10000.0,
        total_elevation_gain=150.0,
        total_elevation_loss=100.0,
        min_elevation=5.0,
        max_elevation=155.0,
        total_time=3600.0,
        moving_time=3300.0,
        avg_speed=3.03,
        max_speed=10.0,
    )
    values.update(overrides)
    return RouteStats(**values)


class TestTrackPoint:
    def test_construction(self):
        pt = TrackPoint(lat=37.7749, lon=-122.4194, elevation=10.0, time=None)
        assert pt.lat == 37.7749
        assert pt.lon == -122.4194
        assert pt.elevation == 10.0
        assert pt.time is None

    def test_to_dict_formats_time(self):
        t = datetime(2024, 6, 15, 8, 0, 0, tzinfo=timezone.utc)
        pt = TrackPoint(lat=0.0, lon=0.0, elevation=None, time=t)
        assert pt.to_dict() == {"lat": 0.0, "lon": 0.0, "elevation": None, "time": "2024-06-15T08:00:00+00:00"}


class TestEnhancedPoint:
    def test_is_a_track_point(self):
        pt = EnhancedPoint(lat=1.0, lon=2.0, elevation=3.0, time=None, distance=50.0, grade=4.5)
        assert isinstance(pt, TrackPoint)
        assert pt.to_dict()["distance"] == 50.0
        assert pt.to_dict()["grade"] == 4.5


class TestClimb:
    def test_to_dict_uses_category_value(self):
        climb = Climb(
            start_idx=3, end_idx=40, start_distance=300.0, end_distance=4000.0, distance=3700.0,
            elevation_gain=250.0, avg_grade=6.76, max_grade=11.0, category=ClimbCategory.CAT_2,
        )
        assert climb.to_dict()["category"] == "2"

    def test_uncategorized(self):
        climb = Climb(
            start_idx=0, end_idx=5, start_distance=0.0, end_distance=400.0, distance=400.0,
            elevation_gain=14.0, avg_grade=3.5, max_grade=4.0, category=None,
        )
        assert climb.to_dict()["category"] is None


class TestSegmentStats:
    def test_extends_route_stats(self):
        stats = SegmentStats(
            total_distance=500.0, total_elevation_gain=20.0, total_elevation_loss=0.0,
            min_elevation=100.0, max_elevation=120.0, total_time=None, moving_time=None,
            avg_speed=None, max_speed=None, start_distance=1000.0, end_distance=1500.0,
        )
        data = stats.to_dict()
        assert data["start_distance"] == 1000.0
        assert data["total_distance"] == 500.0


class TestAnalysisResult:
    def test_to_dict_is_json_serializable(self):
        t = datetime(2024, 6, 15, 8, 0, 0, tzinfo=timezone.utc)
        result = AnalysisResult(
            points=[
                EnhancedPoint(lat=1.0, lon=2.0, elevation=3.0, time=t, distance=0.0, grade=0.0),
                EnhancedPoint(lat=1.001, lon=2.0, elevation=None, time=None, distance=111.2, grade=-1.0),
            ],
            simplified_points=[SimplifiedPoint(lat=1.0, lon=2.0, ele=3.0), SimplifiedPoint(lat=1.001, lon=2.0, ele=0.0)],
            stats=_stats(total_time=None, moving_time=None, avg_speed=None, max_speed=None),
            climbs=[],
            has_elevation=True,
            has_time=True,
            is_loop=True,
            file_name="ride.gpx",
            metadata=RouteMetadata(name="Morning Ride"),
        )
        data = json.loads(json.dumps(result.to_dict()))
        assert data["file_name"] == "ride.gpx"
        assert data["metadata"] == {"name": "Morning Ride", "description": None}
        assert data["points"][0]["time"] == "2024-06-15T08:00:00+00:00"
        assert data["points"][1]["elevation"] is None
        assert data["simplified_points"][1]["ele"] == 0.0
        assert data["stats"]["avg_speed"] is None
        assert data["is_loop"] is True


class TestNonFiniteValues:
    def test_nan_and_infinity_become_none(self):
        pt = EnhancedPoint(
            lat=1.0, lon=2.0, elevation=float("nan"), time=None, distance=float("inf"), grade=0.0,
        )
        data = pt.to_dict()
        assert data["elevation"] is None
        assert data["distance"] is None
        assert data["grade"] == 0.0
        assert SimplifiedPoint(lat=1.0, lon=2.0, ele=float("nan")).to_dict()["ele"] is None

    def test_stats_are_strict_json(self):
        stats = _stats(max_elevation=float("nan"), avg_speed=None)
        text = json.dumps(stats.to_dict(), allow_nan=False)
        assert json.loads(text)["max_elevation"] is None
