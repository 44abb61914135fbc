"""Grid reconstruction — drawn lines to table cells.

Public API
----------
- :func:`reconstruct_cells` — drawing operators → sorted :class:`~dascrape.models.Cell` list
- :func:`extract_lines` / :func:`build_points` / :func:`cells_from_points` — individual steps
- :class:`PathOperator` / :class:`OpKind` — drawing operator model
"""

from .cells import cells_from_points, reconstruct_cells, row_major_key, sort_cells
from .lines import OpKind, PathOperator, extract_lines, is_line
from .points import build_points, line_endpoints

__all__ = [
    "OpKind",
    "PathOperator",
    "build_points",
    "cells_from_points",
    "extract_lines",
    "is_line",
    "line_endpoints",
    "reconstruct_cells",
    "row_major_key",
    "sort_cells",
]
