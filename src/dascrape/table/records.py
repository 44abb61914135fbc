"""Record extraction — map each table row's cells to development-application fields."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Dict, List, Optional

from ..address.gazetteer import Gazetteer
from ..address.normalize import normalize_address
from ..config import ExtractionConfig
from ..models import Cell, Record, Row
from .headers import column_cell, find_header_cells, require_headers

logger = logging.getLogger("dascrape.table")

# Application numbers look like "850/123/18"; heading and blank rows fail this.
IDENTIFIER_RE = re.compile(r"[0-9]+/[0-9]+/[0-9]")
_DATE_RE = re.compile(r"^(\d{1,2})/(\d{2})/(\d{4})$")
_MULTI_SPACE_RE = re.compile(r"\s\s+")

REQUIRED_COLUMNS = ["identifier", "address"]
_OPTIONAL_TEXT_COLUMNS = (
    "assessment",
    "vg_number",
    "applicant",
    "owner",
    "builder",
    "valuation",
    "area",
)


def collapse_whitespace(text: str) -> str:
    return _MULTI_SPACE_RE.sub(" ", text).strip()


def parse_date(text: str) -> Optional[date]:
    """Parse a ``D/MM/YYYY`` date (dots accepted as separators).

    Anything else, including impossible dates, yields ``None``.
    """
    m = _DATE_RE.match(text.strip().replace(".", "/"))
    if not m:
        return None
    day, month, year = (int(g) for g in m.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _cell_text(
    row: Row, headers: Dict[str, Cell], column: str, settings: ExtractionConfig
) -> str:
    cell = column_cell(row, headers.get(column), settings.column_overlap_min)
    if cell is None:
        return ""
    return cell.text()


def extract_row(
    row: Row,
    headers: Dict[str, Cell],
    settings: ExtractionConfig,
    gazetteer: Optional[Gazetteer] = None,
    info_url: str = "",
    scrape_date: Optional[date] = None,
) -> Optional[Record]:
    """Build a record from one row, or return ``None`` when the row holds no application."""
    identifier = _cell_text(row, headers, "identifier", settings).strip()
    if not IDENTIFIER_RE.search(identifier):
        logger.debug("Skipped row without an application number: %r", identifier)
        return None

    address = collapse_whitespace(_cell_text(row, headers, "address", settings))
    if address and gazetteer is not None:
        address = normalize_address(address, gazetteer, settings)
    if not address:
        logger.debug("Skipped application %s without an address", identifier)
        return None

    description = collapse_whitespace(_cell_text(row, headers, "description", settings))

    record = Record(
        identifier=identifier,
        address=address,
        description=description or settings.default_description,
        info_url=info_url,
        comment_url=settings.comment_url,
        scrape_date=scrape_date or date.today(),
        received_date=parse_date(_cell_text(row, headers, "received_date", settings)),
        decision_date=parse_date(_cell_text(row, headers, "decision_date", settings)),
    )
    for column in _OPTIONAL_TEXT_COLUMNS:
        if column in headers:
            value = collapse_whitespace(_cell_text(row, headers, column, settings))
            setattr(record, column, value or None)
    return record


def extract_records(
    rows: List[Row],
    settings: Optional[ExtractionConfig] = None,
    *,
    gazetteer: Optional[Gazetteer] = None,
    info_url: str = "",
    scrape_date: Optional[date] = None,
    headers: Optional[Dict[str, Cell]] = None,
) -> List[Record]:
    """Extract one record per application row.

    *headers* should be the header cells that overhang repair used; when
    omitted they are located in *rows*.

    Raises
    ------
    MissingHeaderColumn
        When the identifier or address heading cannot be found; the caller
        is expected to skip the page.
    """
    settings = settings or ExtractionConfig()
    if headers is None:
        cells = [cell for row in rows for cell in row]
        headers = find_header_cells(cells, settings.labels)
    require_headers(headers, settings.labels, REQUIRED_COLUMNS)

    records: List[Record] = []
    for row in rows:
        record = extract_row(row, headers, settings, gazetteer, info_url, scrape_date)
        if record is not None:
            records.append(record)
    return records
