"""Text element extraction — text runs + transforms → positioned elements."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import ExtractionConfig
from ..grid.cells import row_major_key
from ..models import Element

Matrix = Tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


@dataclass
class TextItem:
    """A text run as reported by the PDF text layer.

    *transform* is the run's text-space → user-space matrix
    ``(a, b, c, d, e, f)`` and *width* its advance width in page units.
    """

    text: str
    transform: Matrix = IDENTITY
    width: float = 0.0


def multiply_transforms(m1: Sequence[float], m2: Sequence[float]) -> Matrix:
    """Compose two affine matrices, applying *m2* first and then *m1*."""
    return (
        m1[0] * m2[0] + m1[2] * m2[1],
        m1[1] * m2[0] + m1[3] * m2[1],
        m1[0] * m2[2] + m1[2] * m2[3],
        m1[1] * m2[2] + m1[3] * m2[3],
        m1[0] * m2[4] + m1[2] * m2[5] + m1[4],
        m1[1] * m2[4] + m1[3] * m2[5] + m1[5],
    )


def item_to_element(item: TextItem, viewport_transform: Sequence[float]) -> Element:
    """Project one text run into page space.

    The reported run height is unreliable for these PDFs (it is usually
    exaggerated), so the height is taken from the scale of the combined
    transform instead and the baseline is converted to a top edge.
    """
    t = multiply_transforms(viewport_transform, item.transform)
    height = math.sqrt(t[2] * t[2] + t[3] * t[3])
    return Element(
        x=t[4],
        y=t[5] - height,
        width=item.width,
        height=height,
        text=item.text,
    )


def sort_elements(
    elements: List[Element], settings: ExtractionConfig
) -> List[Element]:
    """Return *elements* ordered by approximate y, then x."""
    return sorted(elements, key=row_major_key(settings.element_row_tolerance))


def extract_elements(
    text_items: Iterable[TextItem],
    viewport_transform: Sequence[float],
    settings: Optional[ExtractionConfig] = None,
) -> List[Element]:
    """Convert raw text runs into positioned, height-corrected elements."""
    settings = settings or ExtractionConfig()
    elements = [item_to_element(item, viewport_transform) for item in text_items]
    return sort_elements(elements, settings)
