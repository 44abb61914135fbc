"""Header-cell lookup by column label."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..config import HeaderLabels
from ..geometry import contains, horizontal_overlap_percentage
from ..models import Cell, Row


class MissingHeaderColumn(LookupError):
    """Raised when a required column heading is absent from a page."""

    def __init__(self, column: str, label: str):
        super().__init__(f'The "{label}" column heading was not found')
        self.column = column
        self.label = label


def find_header_cell(cells: Iterable[Cell], label: str) -> Optional[Cell]:
    """First cell holding an element whose trimmed text is exactly *label*.

    The element must lie fully inside the cell, which rules out text that
    merely leaked in from a neighbouring column.
    """
    for cell in cells:
        for element in cell.elements:
            if element.text.strip() == label and contains(cell, element):
                return cell
    return None


def find_header_cells(
    cells: Iterable[Cell], labels: HeaderLabels
) -> Dict[str, Cell]:
    """Map each column key in *labels* to its header cell, omitting absent ones."""
    cells = list(cells)
    found: Dict[str, Cell] = {}
    for column, label in labels.items().items():
        cell = find_header_cell(cells, label)
        if cell is not None:
            found[column] = cell
    return found


def require_headers(
    headers: Dict[str, Cell], labels: HeaderLabels, columns: List[str]
) -> None:
    """Raise :class:`MissingHeaderColumn` for the first of *columns* not in *headers*."""
    for column in columns:
        if column not in headers:
            raise MissingHeaderColumn(column, getattr(labels, column))


def column_cell(
    row: Row, header: Optional[Cell], min_overlap: float
) -> Optional[Cell]:
    """First cell of *row* lying under *header* (horizontal overlap above *min_overlap*)."""
    if header is None:
        return None
    for cell in row:
        if horizontal_overlap_percentage(cell, header) > min_overlap:
            return cell
    return None
