from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class Point:
    """A grid-intersection candidate in page coordinates."""

    x: float
    y: float


@dataclass
class Rectangle:
    """Axis-aligned box with a top-left origin (y grows downwards)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def area(self) -> float:
        """Area in square points."""
        return self.width * self.height

    def bbox(self) -> Tuple[float, float, float, float]:
        """Bounding box as ``(x0, y0, x1, y1)``."""
        return (self.x, self.y, self.right, self.bottom)


@dataclass
class Element(Rectangle):
    """A positioned run of text from the PDF text layer.

    Elements are never edited after creation; overhang splitting replaces
    them with freshly built ones.
    """

    text: str = ""


@dataclass
class Cell(Rectangle):
    """A table cell reconstructed from drawn lines, owning zero or more elements."""

    elements: List[Element] = field(default_factory=list)

    def text(self, separator: str = "") -> str:
        """Concatenated text of the owned elements, in element order."""
        return separator.join(e.text for e in self.elements)


# A row is a view over cells sharing an approximate y.
Row = List[Cell]


@dataclass
class Record:
    """One development application extracted from a table row."""

    identifier: str
    address: str
    description: str
    info_url: str = ""
    comment_url: str = ""
    scrape_date: Optional[date] = None
    received_date: Optional[date] = None
    decision_date: Optional[date] = None
    # Present only on layouts that carry the matching column.
    assessment: Optional[str] = None
    vg_number: Optional[str] = None
    applicant: Optional[str] = None
    owner: Optional[str] = None
    builder: Optional[str] = None
    valuation: Optional[str] = None
    area: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict (dates as ISO strings, None dropped)."""
        d: Dict[str, Any] = {}
        for key, value in vars(self).items():
            if value is None:
                continue
            d[key] = value.isoformat() if isinstance(value, date) else value
        return d
