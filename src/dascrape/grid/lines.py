"""Line extraction from a page's drawing operators.

Table borders in these PDFs are drawn as very thin filled rectangles, so a
"line" is any constructed path whose rectangle is at most
``line_thickness_max`` thick in one direction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from ..config import ExtractionConfig
from ..models import Rectangle

logger = logging.getLogger("dascrape.grid")


class OpKind(str, Enum):
    """Drawing operator kinds the grid builder distinguishes."""

    construct_path = "construct_path"
    other = "other"


@dataclass
class PathOperator:
    """A drawing instruction.

    For ``construct_path`` the arguments are ordered ``(y, x, height, width)``.
    """

    kind: OpKind
    args: Tuple[float, ...] = ()

    def rectangle(self) -> Rectangle:
        """Decode the ``(y, x, height, width)`` arguments into a rectangle."""
        y, x, height, width = (float(v) for v in self.args[:4])
        return Rectangle(x=x, y=y, width=width, height=height)


def is_line(rect: Rectangle, settings: ExtractionConfig) -> bool:
    """Check if *rect* is thin and long enough to be a table border."""
    thick = settings.line_thickness_max
    shortest = settings.line_length_min
    if rect.width > thick and rect.height > thick:
        return False  # filled shape
    if rect.width <= thick and rect.height < shortest:
        return False
    if rect.height <= thick and rect.width < shortest:
        return False
    return True


def extract_lines(
    operators: Iterable[PathOperator], settings: ExtractionConfig
) -> List[Rectangle]:
    """Return the line-like rectangles drawn by *operators*, in drawing order."""
    lines: List[Rectangle] = []
    skipped = 0
    for op in operators:
        if op.kind != OpKind.construct_path or len(op.args) < 4:
            continue
        rect = op.rectangle()
        if is_line(rect, settings):
            lines.append(rect)
        else:
            skipped += 1
    logger.debug("Extracted %d lines (%d non-line paths ignored)", len(lines), skipped)
    return lines
