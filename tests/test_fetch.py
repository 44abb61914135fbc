"""Tests for dascrape.fetch — index parsing, PDF download and politeness delays."""

import random
from unittest.mock import MagicMock

import pytest
import requests

from dascrape.config import ExtractionConfig
from dascrape.fetch import (
    IndexFetcher,
    extract_pdf_links,
    proxies_from_env,
    select_pdf_urls,
)

INDEX_URL = "https://www.wattlerange.sa.gov.au/page.aspx?u=1158"

INDEX_HTML = """
<html><body><table>
  <tr><td class="u6ListTD"><a href="/webdata/resources/files/DA_Register_Jan.pdf">January</a></td></tr>
  <tr><td class="u6ListTD"><a href="webdata/resources/files/DA_Register_Feb.pdf">February</a></td></tr>
  <tr><td class="u6ListTD"><a href="/webdata/resources/files/DA_Register_Jan.pdf">January (again)</a></td></tr>
  <tr><td class="u6ListTD"><a href="/webdata/resources/files/Agenda.docx">Agenda</a></td></tr>
  <tr><td class="other"><a href="/webdata/resources/files/Elsewhere.pdf">Elsewhere</a></td></tr>
</table></body></html>
"""


def _response(text="", content=b"", status=200):
    resp = MagicMock()
    resp.text = text
    resp.content = content
    resp.status_code = status
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return resp


def _fetcher(*responses, **settings):
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = list(responses)
    sleep = MagicMock()
    fetcher = IndexFetcher(
        ExtractionConfig(**settings), session=session, rng=random.Random(7), sleep=sleep
    )
    return fetcher, session, sleep


class TestExtractPdfLinks:
    def test_absolute_deduplicated_in_order(self):
        urls = extract_pdf_links(INDEX_HTML, INDEX_URL, "td.u6ListTD a[href$='.pdf']")
        assert urls == [
            "https://www.wattlerange.sa.gov.au/webdata/resources/files/DA_Register_Jan.pdf",
            "https://www.wattlerange.sa.gov.au/webdata/resources/files/DA_Register_Feb.pdf",
        ]

    def test_custom_selector(self):
        urls = extract_pdf_links(INDEX_HTML, INDEX_URL, "td.other a")
        assert urls == ["https://www.wattlerange.sa.gov.au/webdata/resources/files/Elsewhere.pdf"]

    def test_no_links(self):
        assert extract_pdf_links("<html></html>", INDEX_URL, "a") == []


class TestSelectPdfUrls:
    def test_newest_always_selected(self):
        urls = ["a.pdf", "b.pdf", "c.pdf", "d.pdf"]
        for seed in range(10):
            selected = select_pdf_urls(urls, random.Random(seed))
            assert len(selected) == 2
            assert "d.pdf" in selected
            assert len(set(selected)) == 2

    def test_single_url(self):
        assert select_pdf_urls(["only.pdf"], random.Random(0)) == ["only.pdf"]

    def test_empty(self):
        assert select_pdf_urls([]) == []


class TestProxies:
    def test_from_env(self):
        assert proxies_from_env({"MORPH_PROXY": "http://proxy:8080"}) == {
            "http": "http://proxy:8080",
            "https": "http://proxy:8080",
        }

    def test_unset(self):
        assert proxies_from_env({}) == {}

    def test_fetcher_uses_env_proxy(self, monkeypatch):
        monkeypatch.setenv("MORPH_PROXY", "http://proxy:8080")
        fetcher, session, _ = _fetcher(_response(content=b"%PDF"))
        fetcher.fetch_pdf("https://example.org/a.pdf")
        assert session.get.call_args.kwargs["proxies"] == {
            "http": "http://proxy:8080",
            "https": "http://proxy:8080",
        }


class TestIndexFetcher:
    def test_list_pdf_urls(self, monkeypatch):
        monkeypatch.delenv("MORPH_PROXY", raising=False)
        fetcher, session, _ = _fetcher(_response(text=INDEX_HTML))
        urls = fetcher.list_pdf_urls()
        assert len(urls) == 2
        session.get.assert_called_once_with(INDEX_URL, timeout=60.0, proxies=None)

    def test_fetch_pdf_returns_bytes(self):
        fetcher, _, _ = _fetcher(_response(content=b"%PDF-1.4 data"))
        assert fetcher.fetch_pdf("https://example.org/a.pdf") == b"%PDF-1.4 data"

    def test_delay_after_each_request(self):
        fetcher, _, sleep = _fetcher(
            _response(text=INDEX_HTML),
            _response(content=b"%PDF"),
            request_delay_min=2.0,
            request_delay_steps=5,
        )
        fetcher.list_pdf_urls()
        fetcher.fetch_pdf("https://example.org/a.pdf")
        assert sleep.call_count == 2
        for call in sleep.call_args_list:
            assert 2.0 <= call.args[0] <= 6.0

    def test_http_error_propagates(self):
        fetcher, _, sleep = _fetcher(_response(status=503))
        with pytest.raises(requests.HTTPError):
            fetcher.list_pdf_urls()
        sleep.assert_not_called()

    def test_network_error_propagates(self):
        fetcher, _, _ = _fetcher(requests.ConnectionError("unreachable"))
        with pytest.raises(requests.ConnectionError):
            fetcher.fetch_pdf("https://example.org/a.pdf")

    def test_user_agent_set(self):
        fetcher, session, _ = _fetcher()
        assert session.headers["User-Agent"].startswith("dascrape/")
