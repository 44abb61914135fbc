"""Development-application extraction from council PDF registers.

Frequently-used symbols are re-exported here for convenience.  For the
individual steps (line extraction, overhang repair, suffix expansion,
etc.) import directly from the relevant submodule, e.g.::

    from dascrape.grid.lines import extract_lines
    from dascrape.table.overhang import split_overhangs
    from dascrape.address.normalize import format_street
"""

# ── Core models & config ──────────────────────────────────────────────

from .address import Gazetteer, load_gazetteer, normalize_address
from .config import ConfigValidationError, ExtractionConfig, HeaderLabels
from .fetch import IndexFetcher
from .grid import reconstruct_cells
from .ingest import IngestError, PdfMeta, ingest_pdf, iter_page_contents
from .models import Cell, Element, Point, Record, Rectangle
from .pipeline import DocumentResult, PageResult, StageResult, run_document, run_page
from .store import RecordStore
from .table import MissingHeaderColumn, build_rows, extract_records
from .text import extract_elements

__all__ = [
    # Models & config
    "Cell",
    "ConfigValidationError",
    "Element",
    "ExtractionConfig",
    "HeaderLabels",
    "Point",
    "Record",
    "Rectangle",
    # Table reconstruction
    "build_rows",
    "extract_elements",
    "extract_records",
    "reconstruct_cells",
    "MissingHeaderColumn",
    # Addresses
    "Gazetteer",
    "load_gazetteer",
    "normalize_address",
    # Pipeline
    "DocumentResult",
    "PageResult",
    "StageResult",
    "run_document",
    "run_page",
    # Ingest, fetch & storage
    "IngestError",
    "IndexFetcher",
    "PdfMeta",
    "RecordStore",
    "ingest_pdf",
    "iter_page_contents",
]
