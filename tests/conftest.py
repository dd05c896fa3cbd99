import os
from datetime import datetime, timedelta, timezone

import pytest

from gpx_route_analyzer.models import TrackPoint

SAMPLE_GPX_PATH = os.path.join(
    os.path.dirname(__file__), "functional", "data", "sample_ride.gpx"
)


def make_gpx(tracks: list[list[list[dict]]]) -> str:
    """Build GPX 1.1 text from tracks -> segments -> point dicts.

    Point dicts take lat, lon and optional ele and time (ISO string).
    """
    parts = [
        '<?xml version="1.0"?>',
        '<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">',
    ]
    for segments in tracks:
        parts.append("<trk>")
        for segment in segments:
            parts.append("<trkseg>")
            for pt in segment:
                parts.append(f'<trkpt lat="{pt["lat"]}" lon="{pt["lon"]}">')
                if pt.get("ele") is not None:
                    parts.append(f"<ele>{pt['ele']}</ele>")
                if pt.get("time") is not None:
                    parts.append(f"<time>{pt['time']}</time>")
                parts.append("</trkpt>")
            parts.append("</trkseg>")
        parts.append("</trk>")
    parts.append("</gpx>")
    return "\n".join(parts)


@pytest.fixture
def sample_gpx_text():
    with open(SAMPLE_GPX_PATH, "r", encoding="utf-8") as f:
        return f.read()


@pytest.fixture
def simple_track_points():
    """A short list of track points for unit testing: flat, ~100m apart."""
    base_time = datetime(2024, 6, 15, 8, 0, 0, tzinfo=timezone.utc)
    return [
        TrackPoint(lat=37.7749, lon=-122.4194, elevation=10.0, time=base_time),
        TrackPoint(
            lat=37.7758,
            lon=-122.4183,
            elevation=10.0,
            time=base_time + timedelta(seconds=20),
        ),
        TrackPoint(
            lat=37.7767,
            lon=-122.4172,
            elevation=10.0,
            time=base_time + timedelta(seconds=40),
        ),
    ]


@pytest.fixture
def two_point_gpx():
    return make_gpx([[[
        {"lat": 37.7749, "lon": -122.4194, "ele": 10.0, "time": "2024-06-15T08:00:00Z"},
        {"lat": 37.7758, "lon": -122.4194, "ele": 12.0, "time": "2024-06-15T08:00:20Z"},
    ]]])


@pytest.fixture
def gpx_builder():
    return make_gpx
