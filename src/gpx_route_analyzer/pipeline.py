"""End-to-end GPX processing: parse, measure, summarize, detect climbs, simplify."""

import json
import logging
from dataclasses import dataclass

from gpx_route_analyzer.analyzer import calculate_route_stats
from gpx_route_analyzer.climb import detect_climbs
from gpx_route_analyzer.config import (
    DEFAULT_CONFIG,
    DEFAULT_SMOOTHING_LEVEL,
    CalculationConfig,
    SmoothingLevel,
    vertical_threshold_for,
)
from gpx_route_analyzer.distance import (
    calculate_cumulative_distances,
    calculate_rolling_grades,
    enhance_points,
    is_loop_route,
)
from gpx_route_analyzer.models import AnalysisResult, ParseError
from gpx_route_analyzer.parser import parse_gpx_string
from gpx_route_analyzer.simplify import adaptive_tolerance, simplify_with_elevation

logger = logging.getLogger(__name__)

RESPONSE_SUCCESS = "SUCCESS"
RESPONSE_ERROR = "ERROR"


class GPXProcessingError(Exception):
    """Raised when a GPX document cannot be turned into an analysis."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message if details is None else f"{message}: {details}")
        self.message = message
        self.details = details


@dataclass(frozen=True)
class AnalysisResponse:
    """Tagged outcome of processing one GPX document.

    type is RESPONSE_SUCCESS with data set, or RESPONSE_ERROR with error
    (and optionally details) set.
    """
    type: str
    data: AnalysisResult | None = None
    error: str | None = None
    details: str | None = None

    @property
    def ok(self) -> bool:
        return self.type == RESPONSE_SUCCESS

    @classmethod
    def success(cls, data: AnalysisResult) -> "AnalysisResponse":
        return cls(type=RESPONSE_SUCCESS, data=data)

    @classmethod
    def failure(cls, error: str, details: str | None = None) -> "AnalysisResponse":
        return cls(type=RESPONSE_ERROR, error=error, details=details)

    def to_dict(self) -> dict:
        if self.ok:
            return {"type": self.type, "data": self.data.to_dict()}
        return {"type": self.type, "error": self.error, "details": self.details}

    def to_json(self) -> str:
        """Render as strict JSON; non-finite numbers are already None in to_dict()."""
        return json.dumps(self.to_dict(), allow_nan=False)


def analyze_route(
    gpx_text: str,
    smoothing_level: SmoothingLevel | str = DEFAULT_SMOOTHING_LEVEL,
    file_name: str | None = None,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> AnalysisResult:
    """Run the full analysis pipeline on GPX text.

    Raises:
        GPXProcessingError: If the document fails parsing or validation.
        ValueError: If smoothing_level is not recognised.
    """
    vertical_threshold = vertical_threshold_for(smoothing_level)

    parsed = parse_gpx_string(gpx_text)
    if isinstance(parsed, ParseError):
        raise GPXProcessingError(parsed.message, parsed.details)

    points = parsed.points
    distances = calculate_cumulative_distances(points)
    grades = calculate_rolling_grades(
        points, distances, window_size=config.grade_window_size, max_grade=config.max_grade
    )
    enhanced = enhance_points(points, distances, grades)

    stats = calculate_route_stats(enhanced, vertical_threshold, stop_speed=config.stop_speed_threshold)
    climbs = detect_climbs(enhanced, config) if parsed.has_elevation else []

    tolerance = adaptive_tolerance(len(points))
    simplified = simplify_with_elevation(points, tolerance)
    logger.debug(
        "Analyzed %d points: %.0f m, %d climb(s), %d simplified points (tolerance %g)",
        len(points), stats.total_distance, len(climbs), len(simplified), tolerance,
    )

    return AnalysisResult(
        points=enhanced,
        simplified_points=simplified,
        stats=stats,
        climbs=climbs,
        has_elevation=parsed.has_elevation,
        has_time=parsed.has_time,
        is_loop=is_loop_route(points, config.loop_threshold_meters),
        file_name=file_name,
        metadata=parsed.metadata,
    )


def process_gpx(
    gpx_text: str,
    smoothing_level: SmoothingLevel | str = DEFAULT_SMOOTHING_LEVEL,
    file_name: str | None = None,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> AnalysisResponse:
    """Process GPX text into a tagged success or error response.

    Never raises: parse failures, a bad smoothing level and unexpected
    processing errors are all reported as error responses.
    """
    try:
        vertical_threshold_for(smoothing_level)
    except ValueError as e:
        return AnalysisResponse.failure(str(e))

    try:
        result = analyze_route(gpx_text, smoothing_level, file_name, config)
    except GPXProcessingError as e:
        logger.info("GPX processing failed for %s: %s", file_name or "<input>", e)
        return AnalysisResponse.failure(e.message, e.details)
    except Exception:
        logger.exception("Unexpected error processing %s", file_name or "<input>")
        return AnalysisResponse.failure("Processing failed")
    return AnalysisResponse.success(result)
