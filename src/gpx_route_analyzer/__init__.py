"""GPX Route Analyzer - distance, grade, climb and simplification analysis of cycling routes."""

from gpx_route_analyzer.pipeline import AnalysisResponse, GPXProcessingError, analyze_route, process_gpx

__version_date__ = "2026-10-17"

__all__ = [
    "AnalysisResponse",
    "GPXProcessingError",
    "analyze_route",
    "process_gpx",
]
