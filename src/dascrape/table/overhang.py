"""Repair of text runs that leaked across cell boundaries.

When adjacent columns are close together the PDF text layer may merge
their text into a single run, padding the gap with a run of spaces.  Such
a run is bound to the left-most cell it touches but is not contained by
it.  Each overhang run is re-joined with the other runs on the same line
of its cell, split on wide space runs, and the pieces are redistributed
to the cell itself and the cells to its right.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from ..config import ExtractionConfig
from ..geometry import contains, horizontal_overlap_percentage
from ..models import Cell, Element, Row
from ..text.elements import sort_elements

logger = logging.getLogger("dascrape.table")

# Columns whose merged runs are known to carry a fixed number of fields:
# assessment + VG number + application number, description + decision
# date, and a lone decision date.
_EXPECTED_TOKENS = (
    ("assessment", 3),
    ("description", 2),
    ("decision_date", 1),
)


def split_columns(text: str, settings: ExtractionConfig) -> List[str]:
    """Split merged column text on runs of ``column_split_spaces`` or more spaces."""
    pattern = r" {%d,}" % settings.column_split_spaces
    return [token.strip() for token in re.split(pattern, text) if token.strip()]


def expected_tokens(
    cell: Cell, headers: Dict[str, Cell], settings: ExtractionConfig
) -> Optional[int]:
    """Number of fields a merged run in *cell*'s column carries, or None if unbounded."""
    for column, count in _EXPECTED_TOKENS:
        header = headers.get(column)
        if horizontal_overlap_percentage(cell, header) > settings.column_overlap_min:
            return count
    return None


def _split_overhang(
    row: Row,
    index: int,
    overhang: Element,
    headers: Dict[str, Cell],
    settings: ExtractionConfig,
) -> None:
    cell = row[index]
    tol = settings.aligned_element_tolerance

    aligned = [e for e in cell.elements if abs(e.y - overhang.y) < tol]
    cell.elements = [e for e in cell.elements if abs(e.y - overhang.y) >= tol]
    aligned.sort(key=lambda e: e.x)

    text = "".join(e.text for e in aligned).strip()
    if not text:
        return

    tokens = split_columns(text, settings)
    # Columns outside _EXPECTED_TOKENS keep every token and push it right.
    limit = expected_tokens(cell, headers, settings)
    if limit is not None:
        tokens = tokens[:limit]

    first = aligned[0]
    cell.elements.append(
        Element(
            x=first.x,
            y=first.y,
            width=cell.right - first.x,
            height=first.height,
            text=tokens[0],
        )
    )
    for offset, token in enumerate(tokens[1:], start=1):
        if index + offset >= len(row):
            logger.debug("Dropped overflow token %r (no cell to the right)", token)
            break
        neighbour = row[index + offset]
        neighbour.elements.append(
            Element(
                x=neighbour.x,
                y=first.y,
                width=neighbour.width,
                height=first.height,
                text=token,
            )
        )


def split_overhangs(
    rows: List[Row], headers: Dict[str, Cell], settings: ExtractionConfig
) -> int:
    """Redistribute overhanging text runs in place; return how many were split.

    Afterwards every cell's elements are re-sorted into reading order.
    """
    count = 0
    for row in rows:
        for index, cell in enumerate(row):
            overhangs = [e for e in cell.elements if not contains(cell, e)]
            for overhang in overhangs:
                # Already consumed as part of an earlier aligned group.
                if not any(e is overhang for e in cell.elements):
                    continue
                _split_overhang(row, index, overhang, headers, settings)
                count += 1

    for row in rows:
        for cell in row:
            cell.elements = sort_elements(cell.elements, settings)
    if count:
        logger.debug("Split %d overhanging element(s)", count)
    return count
