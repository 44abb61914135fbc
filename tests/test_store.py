"""Tests for dascrape.store — sqlite persistence and upsert policies."""

from datetime import date

import pytest

from dascrape.config import ConfigValidationError
from dascrape.models import Record
from dascrape.store import RecordStore


def make_record(identifier="850/123/18", description="Dwelling", **kwargs) -> Record:
    fields = dict(
        identifier=identifier,
        address="12 MAIN STREET, PENOLA SA 5277",
        description=description,
        info_url="https://example.org/register.pdf",
        comment_url="mailto:council@wattlerange.sa.gov.au",
        scrape_date=date(2024, 1, 15),
        decision_date=date(2020, 3, 5),
    )
    fields.update(kwargs)
    return Record(**fields)


class TestRecordStore:
    def test_insert_and_read_back(self, tmp_path):
        with RecordStore(tmp_path / "data.sqlite") as store:
            assert store.save(make_record()) is True
            row = store.get("850/123/18")
        assert row["address"] == "12 MAIN STREET, PENOLA SA 5277"
        assert row["date_scraped"] == "2024-01-15"
        assert row["decision_date"] == "2020-03-05"
        assert row["date_received"] is None

    def test_ignore_policy_keeps_first(self, tmp_path):
        with RecordStore(tmp_path / "data.sqlite", policy="ignore") as store:
            assert store.save(make_record(description="First")) is True
            assert store.save(make_record(description="Second")) is False
            assert store.get("850/123/18")["description"] == "First"
            assert store.count() == 1

    def test_replace_policy_keeps_latest(self, tmp_path):
        with RecordStore(tmp_path / "data.sqlite", policy="replace") as store:
            store.save(make_record(description="First"))
            assert store.save(make_record(description="Second")) is True
            assert store.get("850/123/18")["description"] == "Second"
            assert store.count() == 1

    def test_persists_across_connections(self, tmp_path):
        path = tmp_path / "data.sqlite"
        with RecordStore(path) as store:
            store.save(make_record())
        with RecordStore(path) as store:
            assert store.count() == 1
            assert store.save(make_record()) is False

    def test_save_all_counts_writes(self, tmp_path):
        records = [make_record("1/1/1"), make_record("1/1/2"), make_record("1/1/1")]
        with RecordStore(tmp_path / "data.sqlite") as store:
            assert store.save_all(records) == 2

    def test_skipped_logged(self, tmp_path, caplog):
        with RecordStore(tmp_path / "data.sqlite") as store:
            store.save(make_record())
            with caplog.at_level("INFO", logger="dascrape.store"):
                store.save(make_record())
        assert "Skipped" in caplog.text

    def test_unknown_policy(self, tmp_path):
        with pytest.raises(ConfigValidationError):
            RecordStore(tmp_path / "data.sqlite", policy="merge")
