from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..config import ExtractionConfig
from ..models import Cell, Element, Row
from .binding import bind_elements
from .headers import find_header_cells
from .overhang import split_overhangs

logger = logging.getLogger("dascrape.table")


def group_rows(cells: Iterable[Cell], settings: ExtractionConfig) -> List[Row]:
    """Group cells into rows by approximate y.

    A cell joins the first row whose leading cell is within
    ``cell_row_tolerance`` of it; otherwise it starts a new row.  Rows come
    back sorted by y and the cells of each row by x.
    """
    rows: List[Row] = []
    tol = settings.cell_row_tolerance
    for cell in cells:
        row = next((r for r in rows if abs(r[0].y - cell.y) < tol), None)
        if row is None:
            rows.append([cell])
        else:
            row.append(cell)

    rows.sort(key=lambda r: r[0].y)
    for row in rows:
        row.sort(key=lambda c: c.x)
    return rows


def assemble_rows(
    cells: List[Cell], headers: Dict[str, Cell], settings: ExtractionConfig
) -> List[Row]:
    """Group already-bound cells into rows and repair overhangs under *headers*."""
    rows = group_rows(cells, settings)
    split_overhangs(rows, headers, settings)
    logger.debug("Built %d row(s) from %d cell(s)", len(rows), len(cells))
    return rows


def build_rows(
    cells: List[Cell],
    elements: Iterable[Element],
    settings: Optional[ExtractionConfig] = None,
    headers: Optional[Dict[str, Cell]] = None,
) -> List[Row]:
    """Bind elements to cells, group the cells into rows and repair overhangs.

    *headers* defaults to the header cells located with ``settings.labels``
    after binding; overhang repair needs them to know which column a cell
    belongs to.
    """
    settings = settings or ExtractionConfig()
    bind_elements(cells, elements)
    if headers is None:
        headers = find_header_cells(cells, settings.labels)
    return assemble_rows(cells, headers, settings)
