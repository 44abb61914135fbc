"""SQLite persistence for development-application records.

One table keyed by council reference.  With the ``ignore`` policy the
first write of an application wins and later duplicates are skipped; with
``replace`` the latest write wins.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Optional

from .config import UPSERT_POLICIES, ConfigValidationError
from .models import Record

log = logging.getLogger(__name__)

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS data ("
    "council_reference TEXT PRIMARY KEY, "
    "address TEXT, "
    "description TEXT, "
    "info_url TEXT, "
    "comment_url TEXT, "
    "date_scraped TEXT, "
    "date_received TEXT, "
    "decision_date TEXT)"
)

_COLUMNS = (
    "council_reference",
    "address",
    "description",
    "info_url",
    "comment_url",
    "date_scraped",
    "date_received",
    "decision_date",
)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


class RecordStore:
    """SQLite backed record store."""

    def __init__(self, path: str | Path, policy: str = "ignore"):
        if policy not in UPSERT_POLICIES:
            raise ConfigValidationError(
                f"policy={policy!r} must be one of {UPSERT_POLICIES}"
            )
        self.path = str(path)
        self.policy = policy
        self.conn = sqlite3.connect(self.path)
        self.conn.row_factory = sqlite3.Row
        with self.conn:
            self.conn.execute(_SCHEMA)
        self._insert_sql = (
            f"INSERT OR {policy.upper()} INTO data ({', '.join(_COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in _COLUMNS)})"
        )

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def save(self, record: Record) -> bool:
        """Write *record*; return ``True`` when a row was inserted or replaced."""
        with self.conn:
            cur = self.conn.execute(
                self._insert_sql,
                (
                    record.identifier,
                    record.address,
                    record.description,
                    record.info_url,
                    record.comment_url,
                    _iso(record.scrape_date),
                    _iso(record.received_date),
                    _iso(record.decision_date),
                ),
            )
        written = cur.rowcount > 0
        if written:
            log.info(
                "Inserted: application %r with address %r and description %r",
                record.identifier,
                record.address,
                record.description,
            )
        else:
            log.info(
                "Skipped: application %r with address %r because it was already present",
                record.identifier,
                record.address,
            )
        return written

    def save_all(self, records: Iterable[Record]) -> int:
        """Save every record; return how many rows were written."""
        return sum(1 for record in records if self.save(record))

    def get(self, council_reference: str) -> Optional[sqlite3.Row]:
        return self.conn.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM data WHERE council_reference = ?",
            (council_reference,),
        ).fetchone()

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM data").fetchone()[0]
