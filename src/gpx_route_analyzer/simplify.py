"""Douglas-Peucker simplification of a route for lightweight rendering.

Points are treated as (lon, lat, elevation) in Euclidean 3-space. Mixing
degrees and meters is not geodesically meaningful, but at rendering
tolerances it keeps elevation features from being flattened away.
"""

from typing import Sequence

import numpy as np

from gpx_route_analyzer.config import DEFAULT_CONFIG
from gpx_route_analyzer.models import SimplifiedPoint, TrackPoint

# (point count upper bound, tolerance in degrees)
ADAPTIVE_TOLERANCES = [
    (1_000, 0.00005),
    (10_000, 0.0001),
    (50_000, 0.0002),
]
MAX_TOLERANCE = 0.0005


def adaptive_tolerance(point_count: int) -> float:
    """Pick a simplification tolerance (degrees) from the route's point count."""
    for limit, tolerance in ADAPTIVE_TOLERANCES:
        if point_count < limit:
            return tolerance
    return MAX_TOLERANCE


def _square_segment_distances(coords: np.ndarray, first: int, last: int) -> np.ndarray:
    """Squared distance from each point strictly between first and last to the
    segment coords[first] -> coords[last].

    The projection is clamped to the segment, so points beyond either end are
    measured to the nearest endpoint.
    """
    p1 = coords[first]
    seg = coords[last] - p1
    inner = coords[first + 1:last]
    seg_sq = float(np.dot(seg, seg))

    if seg_sq == 0:
        nearest = np.broadcast_to(p1, inner.shape)
    else:
        t = (inner - p1) @ seg / seg_sq
        t = np.clip(t, 0.0, 1.0)
        nearest = p1 + t[:, np.newaxis] * seg

    diff = inner - nearest
    return np.einsum("ij,ij->i", diff, diff)


def _douglas_peucker_indices(coords: np.ndarray, sq_tolerance: float) -> list[int]:
    """Return sorted indices of the points kept by Douglas-Peucker.

    Uses an explicit stack of (first, last) ranges instead of recursion so
    very long, unsimplifiable tracks cannot exhaust the call stack.
    """
    last_idx = len(coords) - 1
    keep = np.zeros(len(coords), dtype=bool)
    keep[0] = keep[last_idx] = True

    stack = [(0, last_idx)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        sq_dists = _square_segment_distances(coords, first, last)
        offset = int(np.argmax(sq_dists))
        if sq_dists[offset] > sq_tolerance:
            index = first + 1 + offset
            keep[index] = True
            stack.append((index, last))
            stack.append((first, index))

    return np.flatnonzero(keep).tolist()


def simplify_with_elevation(
    points: Sequence[TrackPoint],
    tolerance: float = DEFAULT_CONFIG.simplify_tolerance,
) -> list[SimplifiedPoint]:
    """Simplify a route with 3D Douglas-Peucker.

    The first and last points are always kept, and kept points are copied
    verbatim (never interpolated). Missing elevation is treated as 0.
    Routes with 2 or fewer points are returned unchanged.
    """
    if not points:
        return []

    simplified = [
        SimplifiedPoint(
            lat=pt.lat,
            lon=pt.lon,
            ele=pt.elevation if pt.elevation is not None else 0.0,
        )
        for pt in points
    ]
    if len(simplified) <= 2:
        return simplified

    coords = np.array([(p.lon, p.lat, p.ele) for p in simplified], dtype=float)
    kept = _douglas_peucker_indices(coords, tolerance * tolerance)
    return [simplified[i] for i in kept]
