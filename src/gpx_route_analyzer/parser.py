import logging
from datetime import datetime, timezone

import gpxpy
import gpxpy.gpx

from gpx_route_analyzer.models import ParseError, ParseResult, RouteMetadata, TrackPoint

logger = logging.getLogger(__name__)


def _normalize_time(value: datetime | None) -> datetime | None:
    """Return an aware datetime using datetime.timezone in place of gpxpy's tzinfo.

    Timestamps without a zone in the document are taken as UTC, so every
    point in a track can be compared with every other.
    """
    if value is None:
        return None
    offset = value.utcoffset()
    if offset is None:
        return value.replace(tzinfo=timezone.utc)
    return value.replace(tzinfo=timezone(offset))


def parse_gpx_string(gpx_text: str) -> ParseResult | ParseError:
    """Parse GPX text into a flat list of TrackPoints.

    Points from every track and segment are concatenated in document order,
    so a multi-segment recording is treated as one continuous route.

    Returns a ParseError (never raises) when the document cannot be parsed,
    has no tracks, has only empty tracks, or has fewer than 2 points.
    """
    try:
        gpx = gpxpy.parse(gpx_text)
    except (gpxpy.gpx.GPXException, ValueError) as e:
        logger.warning("Failed to parse GPX document: %s", e)
        return ParseError(
            message="Failed to parse GPX file",
            details=str(e) or "Unknown parsing error",
        )

    if not gpx.tracks:
        return ParseError(
            message="No tracks found in GPX file",
            details="The file must contain at least one track with points",
        )

    points: list[TrackPoint] = []
    has_elevation = False
    has_time = False
    for track in gpx.tracks:
        for segment in track.segments:
            for pt in segment.points:
                points.append(
                    TrackPoint(
                        lat=pt.latitude,
                        lon=pt.longitude,
                        elevation=pt.elevation,
                        time=_normalize_time(pt.time),
                    )
                )
                if pt.elevation is not None:
                    has_elevation = True
                if pt.time is not None:
                    has_time = True

    if not points:
        return ParseError(
            message="No valid points found in GPX tracks",
            details="All tracks appear to be empty",
        )

    if len(points) < 2:
        return ParseError(
            message="Insufficient points",
            details="At least 2 points are required for analysis",
        )

    logger.debug(
        "Parsed %d points from %d track(s) (elevation=%s, time=%s)",
        len(points), len(gpx.tracks), has_elevation, has_time,
    )
    return ParseResult(
        points=points,
        has_elevation=has_elevation,
        has_time=has_time,
        metadata=RouteMetadata(name=gpx.name, description=gpx.description),
    )


def parse_gpx(filepath: str) -> ParseResult | ParseError:
    """Read a GPX file from disk and parse it.

    File system errors (e.g. FileNotFoundError) propagate to the caller.
    """
    with open(filepath, "r", encoding="utf-8") as f:
        return parse_gpx_string(f.read())


def is_parse_error(result: ParseResult | ParseError) -> bool:
    return isinstance(result, ParseError)
