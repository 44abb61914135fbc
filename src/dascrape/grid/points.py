from __future__ import annotations

from typing import Iterable, List, Tuple

from ..config import ExtractionConfig
from ..models import Point, Rectangle


def line_endpoints(line: Rectangle, settings: ExtractionConfig) -> Tuple[Point, Point]:
    """Start and end point of a horizontal or vertical line."""
    start = Point(line.x, line.y)
    if line.height <= settings.line_thickness_max:  # horizontal
        end = Point(line.x + line.width, line.y)
    else:  # vertical
        end = Point(line.x, line.y + line.height)
    return start, end


def _is_new_point(candidate: Point, points: List[Point], limit_sq: float) -> bool:
    return not any(
        (candidate.x - p.x) ** 2 + (candidate.y - p.y) ** 2 < limit_sq for p in points
    )


def build_points(lines: Iterable[Rectangle], settings: ExtractionConfig) -> List[Point]:
    """Collect line endpoints, coalescing sub-pixel jitter.

    A point is kept only if no earlier point lies within
    ``point_merge_distance_sq`` (squared distance) of it.
    """
    points: List[Point] = []
    limit_sq = settings.point_merge_distance_sq
    for line in lines:
        for endpoint in line_endpoints(line, settings):
            if _is_new_point(endpoint, points, limit_sq):
                points.append(endpoint)
    return points
