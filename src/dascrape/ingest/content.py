"""Per-page drawing operators and text runs from pdfplumber.

pdfplumber reports rectangles and lines with a top-left origin; each one
becomes a ``construct_path`` operator with ``(y, x, height, width)``
arguments.  Characters are grouped into text runs the way a PDF text
layer reports them: consecutive characters on the same baseline in the
same font join one run, with spaces inserted in proportion to any gap, so
that adjacent columns printed close together arrive as one run separated
by a wide run of spaces.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Generator, List, Optional, Sequence

from ..config import ExtractionConfig
from ..grid.lines import OpKind, PathOperator
from ..text.elements import Matrix, TextItem
from .ingest import PdfSource, open_pdf

logger = logging.getLogger("dascrape.ingest")

# Characters whose tops differ by less than this sit on the same line.
_SAME_LINE_TOL = 1.0


@dataclass
class PageContent:
    """Everything the table stages need from one page."""

    page_index: int
    operators: List[PathOperator] = field(default_factory=list)
    text_items: List[TextItem] = field(default_factory=list)
    viewport_transform: Matrix = (1.0, 0.0, 0.0, -1.0, 0.0, 0.0)
    width: float = 0.0
    height: float = 0.0


def _path_operator(obj: dict) -> PathOperator:
    x0 = float(obj.get("x0", 0))
    x1 = float(obj.get("x1", 0))
    top = float(obj.get("top", 0))
    bottom = float(obj.get("bottom", 0))
    return PathOperator(
        OpKind.construct_path,
        (min(top, bottom), min(x0, x1), abs(bottom - top), abs(x1 - x0)),
    )


def page_operators(page) -> List[PathOperator]:
    """Drawing operators for *page*: rects and lines, then ignored curves."""
    ops = [_path_operator(r) for r in page.rects]
    ops.extend(_path_operator(ln) for ln in page.lines)
    ops.extend(PathOperator(OpKind.other) for _ in page.curves)
    return ops


def _char_matrix(ch: dict) -> Matrix:
    """Text-space → user-space matrix of *ch*, scaled to its font size.

    pdfplumber's ``matrix`` is the text matrix combined with the CTM but
    without the font size, so an upright 12 pt glyph reports
    ``(1, 0, 0, 1, x, baseline)``.  ``size`` is the rendered em height, so
    the matrix is normalised to unit vertical scale and then scaled by it,
    giving ``(12, 0, 0, 12, x, baseline)`` as a PDF text layer would.
    """
    size = float(ch.get("size", 0.0))
    matrix = ch.get("matrix")
    if matrix is None or len(matrix) != 6:
        return (size, 0.0, 0.0, size, float(ch.get("x0", 0.0)), float(ch.get("y0", 0.0)))
    a, b, c, d, e, f = (float(v) for v in matrix)
    scale = math.hypot(c, d)
    if scale == 0:
        return (size, 0.0, 0.0, size, e, f)
    k = size / scale
    return (a * k, b * k, c * k, d * k, e, f)


def _continues_run(prev: dict, ch: dict, settings: ExtractionConfig) -> bool:
    """Check if *ch* extends the text run ending with *prev*."""
    if abs(float(prev["top"]) - float(ch["top"])) >= _SAME_LINE_TOL:
        return False
    if prev.get("fontname") != ch.get("fontname"):
        return False
    if abs(float(prev.get("size", 0)) - float(ch.get("size", 0))) > 0.01:
        return False
    gap = float(ch["x0"]) - float(prev["x1"])
    if gap < -float(ch.get("size", 0) or 1.0):
        return False  # text went backwards
    return gap <= settings.text_run_break_gap


def _run_text(chars: Sequence[dict], settings: ExtractionConfig) -> str:
    parts = [chars[0].get("text", "")]
    for prev, ch in zip(chars, chars[1:]):
        space = float(ch.get("size", 0) or 1.0) * settings.text_space_width
        gap = float(ch["x0"]) - float(prev["x1"])
        if gap >= space * 0.5:
            parts.append(" " * max(1, int(round(gap / space))))
        parts.append(ch.get("text", ""))
    return "".join(parts)


def group_text_runs(
    chars: Sequence[dict], settings: ExtractionConfig
) -> List[TextItem]:
    """Group pdfplumber chars (in content-stream order) into text runs."""
    runs: List[List[dict]] = []
    for ch in chars:
        if runs and _continues_run(runs[-1][-1], ch, settings):
            runs[-1].append(ch)
        else:
            runs.append([ch])

    items: List[TextItem] = []
    for run in runs:
        width = float(run[-1]["x1"]) - float(run[0]["x0"])
        items.append(
            TextItem(
                text=_run_text(run, settings),
                transform=_char_matrix(run[0]),
                width=max(0.0, width),
            )
        )
    return items


def viewport_transform(page) -> Matrix:
    """Flip PDF user space (bottom-left origin) to page space (top-left origin)."""
    return (1.0, 0.0, 0.0, -1.0, 0.0, float(page.height))


def read_page_content(
    page, page_index: int, settings: Optional[ExtractionConfig] = None
) -> PageContent:
    """Collect operators, text runs and the viewport transform of one page."""
    settings = settings or ExtractionConfig()
    content = PageContent(
        page_index=page_index,
        operators=page_operators(page),
        text_items=group_text_runs(page.chars, settings),
        viewport_transform=viewport_transform(page),
        width=float(page.width),
        height=float(page.height),
    )
    logger.debug(
        "Page %d: %d operators, %d text runs",
        page_index + 1,
        len(content.operators),
        len(content.text_items),
    )
    return content


def iter_page_contents(
    source: PdfSource, settings: Optional[ExtractionConfig] = None
) -> Generator[PageContent, None, None]:
    """Yield :class:`PageContent` for every page of *source*, one at a time."""
    settings = settings or ExtractionConfig()
    with open_pdf(source) as pdf:
        num_pages = len(pdf.pages)
        for index, page in enumerate(pdf.pages):
            logger.info("Reading page %d of %d", index + 1, num_pages)
            yield read_page_content(page, index, settings)
