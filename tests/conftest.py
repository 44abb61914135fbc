"""Shared test fixtures for dascrape."""

from unittest.mock import MagicMock

import pytest

from dascrape.address.gazetteer import Gazetteer
from dascrape.config import ExtractionConfig
from dascrape.grid.lines import OpKind, PathOperator
from dascrape.models import Cell, Element

# ── Helpers ────────────────────────────────────────────────────────────


def make_cell(x: float, y: float, width: float, height: float, *elements) -> Cell:
    """Create a Cell, optionally pre-populated with elements."""
    return Cell(x=x, y=y, width=width, height=height, elements=list(elements))


def make_element(
    x: float, y: float, width: float = 40.0, height: float = 8.0, text: str = ""
) -> Element:
    """Create an Element with sane defaults."""
    return Element(x=x, y=y, width=width, height=height, text=text)


def hline(x: float, y: float, length: float, thickness: float = 0.5) -> PathOperator:
    """A horizontal border drawn as a thin filled rectangle."""
    return PathOperator(OpKind.construct_path, (y, x, thickness, length))


def vline(x: float, y: float, length: float, thickness: float = 0.5) -> PathOperator:
    """A vertical border drawn as a thin filled rectangle."""
    return PathOperator(OpKind.construct_path, (y, x, length, thickness))


def grid_ops(xs: list[float], ys: list[float]) -> list[PathOperator]:
    """Border operators for a grid with column edges *xs* and row edges *ys*.

    Every cell side is drawn as its own segment, so each grid intersection
    is a segment endpoint.
    """
    ops = [hline(x0, y, x1 - x0) for y in ys for x0, x1 in zip(xs, xs[1:])]
    ops += [vline(x, y0, y1 - y0) for x in xs for y0, y1 in zip(ys, ys[1:])]
    return ops


def make_table(
    columns: list[float], rows: list[list[str]], top: float = 0.0, row_height: float = 20.0
) -> tuple[list[Cell], list[Element]]:
    """Build cells and contained elements for a simple grid of texts.

    *columns* are the column widths; each entry of *rows* holds one text
    per column (empty strings produce no element).
    """
    cells: list[Cell] = []
    elements: list[Element] = []
    for r, texts in enumerate(rows):
        y = top + r * row_height
        x = 0.0
        for width, text in zip(columns, texts):
            cells.append(make_cell(x, y, width, row_height))
            if text:
                elements.append(
                    make_element(x + 2, y + 5, min(width - 4, 6.0 * len(text)), 8, text)
                )
            x += width
    return cells, elements


def make_char(
    text: str,
    x0: float,
    top: float,
    size: float = 8.0,
    fontname: str = "Arial",
    page_height: float = 800.0,
) -> dict:
    """A pdfplumber-style char dict, advancing ``size * 0.5`` per glyph.

    As in pdfplumber, ``matrix`` excludes the font size; its origin sits on
    the baseline, taken here as the bottom of the glyph box.
    """
    x1 = x0 + size * 0.5
    bottom = top + size
    y0 = page_height - bottom
    return {
        "text": text,
        "x0": x0,
        "x1": x1,
        "top": top,
        "bottom": bottom,
        "y0": y0,
        "size": size,
        "fontname": fontname,
        "upright": True,
        "matrix": (1.0, 0.0, 0.0, 1.0, x0, y0),
    }


def make_chars(text: str, x0: float, top: float, **kwargs) -> list[dict]:
    """Consecutive chars for *text*; each space leaves a quarter-em gap."""
    size = kwargs.get("size", 8.0)
    chars = []
    x = x0
    for ch in text:
        if ch == " ":
            x += size * 0.25
            continue
        chars.append(make_char(ch, x, top, **kwargs))
        x += size * 0.5
    return chars


def make_page(
    rects=(), lines=(), curves=(), chars=(), width: float = 600.0, height: float = 800.0
) -> MagicMock:
    """A fake pdfplumber page."""
    page = MagicMock(width=width, height=height)
    page.rects = list(rects)
    page.lines = list(lines)
    page.curves = list(curves)
    page.chars = list(chars)
    return page


STREET_LINES = [
    "MAIN STREET,PENOLA",
    "MAIN STREET,MILLICENT",
    "RALSTON STREET,PENOLA",
    "CHURCH STREET,MOUNT BURR",
    "KENNEDY TERRACE NORTH,MILLICENT",
]

SUFFIX_LINES = [
    "ST,STREET",
    "TCE,TERRACE",
    "LA,LANE",
    "RD,ROAD",
]

SUBURB_LINES = [
    "PENOLA,PENOLA SA 5277,PENOLA;COMAUM",
    "MILLICENT,MILLICENT SA 5280,MAYURRA",
    "MOUNT BURR,MOUNT BURR SA 5279,HINDMARSH",
]


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture
def default_cfg() -> ExtractionConfig:
    """Return a default ExtractionConfig."""
    return ExtractionConfig()


@pytest.fixture
def gazetteer() -> Gazetteer:
    """A small gazetteer covering a few Wattle Range localities."""
    return Gazetteer.from_lines(STREET_LINES, SUFFIX_LINES, SUBURB_LINES)


@pytest.fixture
def gazetteer_dir(tmp_path):
    """The same gazetteer written out as the three source files."""
    (tmp_path / "streetnames.txt").write_text("\n".join(STREET_LINES) + "\n")
    (tmp_path / "streetsuffixes.txt").write_text("\r\n".join(SUFFIX_LINES) + "\r\n")
    (tmp_path / "suburbnames.txt").write_text("\n".join(SUBURB_LINES) + "\n\n")
    return tmp_path
