from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..geometry import area, intersect
from ..models import Cell, Element

logger = logging.getLogger("dascrape.table")


def owner_cell(element: Element, cells: List[Cell]) -> Optional[Cell]:
    """First cell (in reading order) that overlaps *element* with positive area.

    A text run may straddle several cells when the PDF merged adjacent
    columns into one run; reading order makes the left-most cell the owner.
    """
    for cell in cells:
        if area(intersect(cell, element)) > 0:
            return cell
    return None


def bind_elements(cells: List[Cell], elements: Iterable[Element]) -> List[Element]:
    """Append each element to its owning cell.

    *cells* must already be in reading order.  Returns the elements that
    overlap no cell at all (page furniture outside the table).
    """
    unowned: List[Element] = []
    for element in elements:
        cell = owner_cell(element, cells)
        if cell is None:
            unowned.append(element)
        else:
            cell.elements.append(element)
    if unowned:
        logger.debug("%d element(s) outside every cell", len(unowned))
    return unowned
