"""Rectangle primitives shared by every table stage."""

from __future__ import annotations

from typing import Optional

from .models import Rectangle


def intersect(a: Rectangle, b: Rectangle) -> Rectangle:
    """Return the overlap of *a* and *b*, or a zero rectangle when disjoint."""
    x1 = max(a.x, b.x)
    y1 = max(a.y, b.y)
    x2 = min(a.x + a.width, b.x + b.width)
    y2 = min(a.y + a.height, b.y + b.height)
    if x2 >= x1 and y2 >= y1:
        return Rectangle(x1, y1, x2 - x1, y2 - y1)
    return Rectangle(0, 0, 0, 0)


def contains(outer: Rectangle, inner: Rectangle) -> bool:
    """True when *inner* lies entirely within *outer* (edges inclusive)."""
    return (
        outer.x <= inner.x
        and outer.y <= inner.y
        and outer.x + outer.width >= inner.x + inner.width
        and outer.y + outer.height >= inner.y + inner.height
    )


def area(r: Rectangle) -> float:
    return r.width * r.height


def horizontal_overlap_percentage(
    a: Optional[Rectangle], b: Optional[Rectangle]
) -> float:
    """Overlap of the X spans of *a* and *b* as a percentage of their union.

    Returns 0 when either rectangle is missing, has zero width, or the
    spans do not overlap; 100 when the spans are identical.
    """
    if a is None or b is None:
        return 0.0

    start1, end1 = a.x, a.x + a.width
    start2, end2 = b.x, b.x + b.width
    if start1 >= end2 or end1 <= start2 or a.width == 0 or b.width == 0:
        return 0.0

    intersection = min(end1, end2) - max(start1, start2)
    union = max(end1, end2) - min(start1, start2)
    return intersection * 100.0 / union


def vertical_overlap_percentage(
    a: Optional[Rectangle], b: Optional[Rectangle]
) -> float:
    """Overlap of the Y spans of *a* and *b* as a percentage of *b*'s height.

    Asymmetric: answers "how much of reference *b* does candidate *a* cover".
    """
    if a is None or b is None:
        return 0.0

    start1, end1 = a.y, a.y + a.height
    start2, end2 = b.y, b.y + b.height
    if start1 >= end2 or end1 <= start2 or a.height == 0 or b.height == 0:
        return 0.0

    intersection = min(end1, end2) - max(start1, start2)
    return min(100.0, intersection * 100.0 / b.height)
