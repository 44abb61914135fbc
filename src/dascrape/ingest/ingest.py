"""Ingest stage — PDF validation, opening, and document metadata.

Centralises PDF opening so that downstream stages never call
``pdfplumber.open()`` directly.  Sources may be a filesystem path or the
raw bytes of a downloaded document.

Public API
----------
- :func:`open_pdf` — context manager yielding an open ``pdfplumber.PDF``
- :func:`ingest_pdf` — open + validate a PDF, return :class:`PdfMeta`
- :class:`PdfMeta` / :class:`PageInfo` — lightweight metadata containers
- :class:`IngestError` — raised on validation failures
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator, List, Optional, Union

import pdfplumber

log = logging.getLogger(__name__)

PdfSource = Union[Path, str, bytes]


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------


@dataclass
class PageInfo:
    """Dimension metadata for a single PDF page."""

    index: int  # zero-based page number
    width: float  # points
    height: float  # points

    def to_dict(self) -> dict:
        """Serialize page info to a JSON-compatible dict."""
        return {
            "index": self.index,
            "width": round(self.width, 3),
            "height": round(self.height, 3),
        }


@dataclass
class PdfMeta:
    """PDF-level metadata returned by :func:`ingest_pdf`.

    This does **not** hold the ``pdfplumber.PDF`` handle open.
    """

    source: str
    num_pages: int
    pages: List[PageInfo] = field(default_factory=list)
    size_bytes: int = 0
    pdf_metadata: dict = field(default_factory=dict)  # PDF info dict
    error: Optional[str] = None

    def page(self, index: int) -> PageInfo:
        """Return :class:`PageInfo` for *index* (zero-based)."""
        return self.pages[index]

    def to_dict(self) -> dict:
        """Serialize PDF metadata to a JSON-compatible dict."""
        d: dict = {
            "source": self.source,
            "num_pages": self.num_pages,
            "size_bytes": self.size_bytes,
        }
        if self.pdf_metadata:
            d["pdf_metadata"] = self.pdf_metadata
        if self.error:
            d["error"] = self.error
        d["pages"] = [p.to_dict() for p in self.pages]
        return d


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


class IngestError(Exception):
    """Raised when a PDF cannot be ingested."""


def _validate_pdf_path(pdf_path: Path) -> None:
    """Raise :class:`IngestError` for missing / empty / wrong-extension files."""
    if not pdf_path.exists():
        raise IngestError(f"File not found: {pdf_path}")
    if not pdf_path.is_file():
        raise IngestError(f"Not a file: {pdf_path}")
    if pdf_path.stat().st_size == 0:
        raise IngestError(f"Empty file: {pdf_path}")
    if pdf_path.suffix.lower() != ".pdf":
        raise IngestError(f"Not a PDF (suffix={pdf_path.suffix!r}): {pdf_path}")


def _describe(source: PdfSource) -> str:
    if isinstance(source, bytes):
        return f"<{len(source)} bytes>"
    return str(source)


def _clean_metadata(raw_meta: dict) -> dict:
    """Coerce the PDF info dict to plain strings (some values can be bytes)."""
    pdf_metadata = {}
    for k, v in raw_meta.items():
        if isinstance(v, bytes):
            v = v.decode("utf-8", errors="replace")
        pdf_metadata[str(k)] = str(v) if v is not None else ""
    return pdf_metadata


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@contextmanager
def open_pdf(source: PdfSource) -> Generator["pdfplumber.PDF", None, None]:
    """Open *source* (path or bytes) with pdfplumber and validate it.

    Raises
    ------
    IngestError
        When the file is missing or empty, cannot be parsed, or does not
        permit text extraction.
    """
    if isinstance(source, bytes):
        if not source:
            raise IngestError("Empty PDF data")
        handle = io.BytesIO(source)
    else:
        handle = Path(source)
        _validate_pdf_path(handle)

    try:
        pdf = pdfplumber.open(handle)
    except Exception as exc:
        raise IngestError(f"Cannot open PDF {_describe(source)}: {exc}") from exc

    try:
        # pdfminer sets is_extractable = False on documents whose
        # permissions forbid text extraction.
        if hasattr(pdf, "doc") and hasattr(pdf.doc, "is_extractable"):
            if not pdf.doc.is_extractable:
                raise IngestError(
                    f"PDF is password-protected or encrypted "
                    f"(text extraction not permitted): {_describe(source)}"
                )
        yield pdf
    finally:
        pdf.close()


def ingest_pdf(source: PdfSource) -> PdfMeta:
    """Open and validate a PDF, returning a :class:`PdfMeta` descriptor.

    The PDF handle is **closed** before returning.
    """
    with open_pdf(source) as pdf:
        pages = [
            PageInfo(index=i, width=float(pg.width), height=float(pg.height))
            for i, pg in enumerate(pdf.pages)
        ]
        pdf_metadata = _clean_metadata(pdf.metadata or {})

    if isinstance(source, bytes):
        size = len(source)
    else:
        size = Path(source).stat().st_size

    meta = PdfMeta(
        source=_describe(source),
        num_pages=len(pages),
        pages=pages,
        size_bytes=size,
        pdf_metadata=pdf_metadata,
    )
    log.info("Ingested %s: %d pages, %.1f KB", meta.source, meta.num_pages, size / 1024)
    return meta
