"""Table assembly — cells + elements → rows → records.

Public API
----------
- :func:`build_rows` — bind elements, group rows, repair overhangs
- :func:`extract_records` — header lookup and per-row record extraction
- :class:`MissingHeaderColumn` — a required column heading is absent
"""

from .binding import bind_elements, owner_cell
from .headers import (
    MissingHeaderColumn,
    column_cell,
    find_header_cell,
    find_header_cells,
)
from .overhang import split_columns, split_overhangs
from .records import IDENTIFIER_RE, extract_records, extract_row, parse_date
from .rows import assemble_rows, build_rows, group_rows

__all__ = [
    "IDENTIFIER_RE",
    "MissingHeaderColumn",
    "assemble_rows",
    "bind_elements",
    "build_rows",
    "column_cell",
    "extract_records",
    "extract_row",
    "find_header_cell",
    "find_header_cells",
    "group_rows",
    "owner_cell",
    "parse_date",
    "split_columns",
    "split_overhangs",
]
