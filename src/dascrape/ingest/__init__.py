"""Ingest stage — PDF validation and per-page content extraction.

Public API
----------
- :func:`ingest_pdf` — open + validate a PDF, return :class:`PdfMeta`
- :func:`open_pdf` — context manager over a validated ``pdfplumber.PDF``
- :func:`iter_page_contents` — yield :class:`PageContent` page by page
- :func:`read_page_content` — operators + text runs for one pdfplumber page
- :class:`IngestError` — raised on validation failures
"""

from .content import (
    PageContent,
    group_text_runs,
    iter_page_contents,
    page_operators,
    read_page_content,
    viewport_transform,
)
from .ingest import IngestError, PageInfo, PdfMeta, PdfSource, ingest_pdf, open_pdf

__all__ = [
    "IngestError",
    "PageContent",
    "PageInfo",
    "PdfMeta",
    "PdfSource",
    "group_text_runs",
    "ingest_pdf",
    "iter_page_contents",
    "open_pdf",
    "page_operators",
    "read_page_content",
    "viewport_transform",
]
