"""Pipeline stage infrastructure: timing, stage-result recording, page skips.

Each page runs four stages in order:

    cells → elements → rows → records

Every stage produces a :class:`StageResult`.  A page whose identifier or
address heading cannot be found is skipped (its element texts are logged
so the layout can be diagnosed) and the run continues with the next page.
PDF decoding failures are not caught here; they abort the document.

:func:`run_page` and :func:`run_document` perform no persistence and
return structured results, making them suitable for scripts and tests.
"""

from __future__ import annotations

import logging
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Generator, List, Optional

from .address.gazetteer import Gazetteer
from .config import ExtractionConfig
from .grid import reconstruct_cells
from .ingest import PageContent, PdfMeta, PdfSource, ingest_pdf, iter_page_contents
from .models import Cell, Element, Record, Row
from .table import (
    MissingHeaderColumn,
    assemble_rows,
    bind_elements,
    extract_records,
    find_header_cells,
)
from .text import extract_elements

logger = logging.getLogger("dascrape.pipeline")


class SkipReason(str, Enum):
    """Why a page produced no records."""

    missing_header = "missing_header"
    no_cells = "no_cells"


# ── Stage result ───────────────────────────────────────────────────────


@dataclass
class StageResult:
    """Outcome record for a single pipeline stage."""

    stage: str
    ran: bool = False
    status: str = "skipped"  # "success" | "skipped" | "failed"
    skip_reason: Optional[str] = None
    duration_ms: int = 0
    counts: Dict[str, Any] = field(default_factory=dict)
    error: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize stage result to a JSON-compatible dict."""
        d: Dict[str, Any] = {
            "stage": self.stage,
            "ran": self.ran,
            "status": self.status,
        }
        if self.skip_reason is not None:
            d["skip_reason"] = self.skip_reason
        d["duration_ms"] = self.duration_ms
        if self.counts:
            d["counts"] = self.counts
        if self.error is not None:
            d["error"] = self.error
        return d


# ── Stage context manager ──────────────────────────────────────────────


@contextmanager
def run_stage(stage: str) -> Generator[StageResult, None, None]:
    """Context manager that wraps a pipeline stage with timing.

    Usage::

        with run_stage("cells") as sr:
            cells = reconstruct_cells(ops, settings)
            sr.counts["cells"] = len(cells)

    The stage is marked ``success`` unless the caller set another status.
    An exception marks it ``failed``, records the error and propagates.
    """
    sr = StageResult(stage=stage, ran=True)
    t0 = time.perf_counter()
    try:
        yield sr
        if sr.status not in ("success", "failed"):
            sr.status = "success"
    except Exception as exc:
        sr.status = "failed"
        sr.error = {
            "type": type(exc).__name__,
            "message": str(exc),
            "stack": traceback.format_exc(),
        }
        # Re-raise so the caller can decide whether the page is skipped.
        raise
    finally:
        elapsed = time.perf_counter() - t0
        sr.duration_ms = int(elapsed * 1000)


# ── Page-level result container ────────────────────────────────────────


@dataclass
class PageResult:
    """Structured result from :func:`run_page` for a single page."""

    page: int = 0
    stages: Dict[str, StageResult] = field(default_factory=dict)
    cells: List[Cell] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    headers: Dict[str, Cell] = field(default_factory=dict)
    rows: List[Row] = field(default_factory=list)
    records: List[Record] = field(default_factory=list)
    skip_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None

    def to_summary_dict(self) -> Dict[str, Any]:
        """Return a lightweight summary suitable for JSON serialisation."""
        d: Dict[str, Any] = {
            "page": self.page,
            "stages": {n: sr.to_dict() for n, sr in self.stages.items()},
            "counts": {
                "cells": len(self.cells),
                "elements": len(self.elements),
                "rows": len(self.rows),
                "records": len(self.records),
            },
        }
        if self.skip_reason is not None:
            d["skip_reason"] = self.skip_reason
        return d


def page_text_dump(elements: List[Element]) -> str:
    """All element texts of a page as ``[text][text]...`` for diagnostics."""
    return "".join(f"[{e.text}]" for e in elements)


def _skip_records(pr: PageResult, reason: SkipReason) -> None:
    sr = StageResult(stage="records", status="skipped", skip_reason=reason.value)
    pr.stages["records"] = sr
    pr.skip_reason = reason.value


def run_page(
    content: PageContent,
    settings: Optional[ExtractionConfig] = None,
    gazetteer: Optional[Gazetteer] = None,
    info_url: str = "",
    scrape_date: Optional[date] = None,
) -> PageResult:
    """Run the four table stages on one page.

    Returns a :class:`PageResult`; a page without a recognisable table is
    reported through ``skip_reason`` rather than an exception.
    """
    settings = settings or ExtractionConfig()
    pr = PageResult(page=content.page_index)

    with run_stage("cells") as sr:
        pr.cells = reconstruct_cells(content.operators, settings)
        sr.counts = {"operators": len(content.operators), "cells": len(pr.cells)}
    pr.stages["cells"] = sr

    with run_stage("elements") as sr:
        pr.elements = extract_elements(
            content.text_items, content.viewport_transform, settings
        )
        sr.counts = {"elements": len(pr.elements)}
    pr.stages["elements"] = sr

    if not pr.cells:
        logger.warning(
            "Page %d has no table grid; skipping. Text: %s",
            content.page_index + 1,
            page_text_dump(pr.elements),
        )
        _skip_records(pr, SkipReason.no_cells)
        return pr

    with run_stage("rows") as sr:
        bind_elements(pr.cells, pr.elements)
        # Located before overhang repair; the same cells map the columns.
        pr.headers = find_header_cells(pr.cells, settings.labels)
        pr.rows = assemble_rows(pr.cells, pr.headers, settings)
        sr.counts = {"rows": len(pr.rows), "headers": len(pr.headers)}
    pr.stages["rows"] = sr

    try:
        with run_stage("records") as sr:
            pr.records = extract_records(
                pr.rows,
                settings,
                gazetteer=gazetteer,
                info_url=info_url,
                scrape_date=scrape_date,
                headers=pr.headers,
            )
            sr.counts = {"records": len(pr.records)}
    except MissingHeaderColumn as exc:
        logger.warning(
            "Page %d skipped (%s). Text: %s",
            content.page_index + 1,
            exc,
            page_text_dump(pr.elements),
        )
        sr.status = "skipped"
        sr.skip_reason = SkipReason.missing_header.value
        pr.skip_reason = SkipReason.missing_header.value
    pr.stages["records"] = sr

    logger.info(
        "Page %d: %d cells, %d rows, %d records",
        content.page_index + 1,
        len(pr.cells),
        len(pr.rows),
        len(pr.records),
    )
    return pr


# ── Document-level result ──────────────────────────────────────────────


@dataclass
class DocumentResult:
    """Aggregated result for a multi-page document run."""

    source: str = ""
    info_url: str = ""
    meta: Optional[PdfMeta] = None
    pages: List[PageResult] = field(default_factory=list)

    @property
    def records(self) -> List[Record]:
        """Records from every page, in page order."""
        return [record for pr in self.pages for record in pr.records]

    def to_summary_dict(self) -> Dict[str, Any]:
        """Serialize document result to a summary dict."""
        d: Dict[str, Any] = {
            "source": self.source,
            "info_url": self.info_url,
            "pages_processed": len(self.pages),
            "pages_skipped": sum(1 for pr in self.pages if pr.skipped),
            "records": len(self.records),
            "pages": [pr.to_summary_dict() for pr in self.pages],
        }
        if self.meta is not None:
            d["meta"] = self.meta.to_dict()
        return d


def run_document(
    source: PdfSource,
    settings: Optional[ExtractionConfig] = None,
    gazetteer: Optional[Gazetteer] = None,
    info_url: str = "",
    scrape_date: Optional[date] = None,
) -> DocumentResult:
    """Process every page of *source* in order.

    Parameters
    ----------
    source : Path, str or bytes
        A PDF path or the downloaded PDF bytes.
    settings : ExtractionConfig, optional
        Extraction configuration.
    gazetteer : Gazetteer, optional
        Enables address normalisation when supplied.
    info_url : str
        Recorded on every record as the document it came from.

    Raises
    ------
    IngestError
        When the PDF cannot be opened; the whole document is abandoned.
    """
    settings = settings or ExtractionConfig()
    scrape_date = scrape_date or date.today()
    if info_url:
        label = info_url
    elif isinstance(source, bytes):
        label = f"<{len(source)} bytes>"
    else:
        label = str(source)
    dr = DocumentResult(source=label, info_url=info_url, meta=ingest_pdf(source))

    for content in iter_page_contents(source, settings):
        dr.pages.append(run_page(content, settings, gazetteer, info_url, scrape_date))

    logger.info(
        "run_document %s: %d pages, %d records",
        label,
        len(dr.pages),
        len(dr.records),
    )
    return dr
