"""Cell reconstruction from a deduplicated point grid.

Each point is paired with its nearest neighbour to the right (same
horizontal line) and its nearest neighbour below (same vertical line);
together they span one cell.  Points on the right or bottom border have no
such neighbours and produce nothing.
"""

from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Iterable, List, Optional

from ..config import ExtractionConfig
from ..models import Cell, Point
from .lines import PathOperator, extract_lines
from .points import build_points

logger = logging.getLogger("dascrape.grid")


def _right_neighbour(
    point: Point, points: List[Point], tol: float
) -> Optional[Point]:
    best: Optional[Point] = None
    for candidate in points:
        if abs(candidate.y - point.y) < tol and candidate.x > point.x:
            if best is None or candidate.x - point.x < best.x - point.x:
                best = candidate
    return best


def _down_neighbour(point: Point, points: List[Point], tol: float) -> Optional[Point]:
    best: Optional[Point] = None
    for candidate in points:
        if abs(candidate.x - point.x) < tol and candidate.y > point.y:
            if best is None or candidate.y - point.y < best.y - point.y:
                best = candidate
    return best


def row_major_key(tolerance: float):
    """Sort key ordering rectangles by approximate y, then x.

    Two rectangles whose y differs by less than *tolerance* are ordered by x.
    """

    def _compare(a, b) -> int:
        if abs(a.y - b.y) < tolerance:
            return (a.x > b.x) - (a.x < b.x)
        return 1 if a.y > b.y else -1

    return cmp_to_key(_compare)


def sort_cells(cells: List[Cell], settings: ExtractionConfig) -> List[Cell]:
    """Return *cells* in reading order (rows top-down, cells left-right)."""
    return sorted(cells, key=row_major_key(settings.cell_row_tolerance))


def cells_from_points(points: List[Point], settings: ExtractionConfig) -> List[Cell]:
    """Build sorted cells from grid points."""
    tol = settings.neighbour_tolerance
    cells: List[Cell] = []
    for point in points:
        right = _right_neighbour(point, points, tol)
        down = _down_neighbour(point, points, tol)
        if right is None or down is None:
            continue
        cells.append(
            Cell(
                x=point.x,
                y=point.y,
                width=right.x - point.x,
                height=down.y - point.y,
            )
        )
    return sort_cells(cells, settings)


def reconstruct_cells(
    operators: Iterable[PathOperator], settings: Optional[ExtractionConfig] = None
) -> List[Cell]:
    """Reconstruct the table grid drawn by *operators*.

    The returned order (approximate y, then x) is relied upon by element
    binding and row grouping: the first matching cell in this order wins.
    """
    settings = settings or ExtractionConfig()
    lines = extract_lines(operators, settings)
    points = build_points(lines, settings)
    cells = cells_from_points(points, settings)
    logger.debug(
        "Grid: %d lines -> %d points -> %d cells", len(lines), len(points), len(cells)
    )
    return cells
