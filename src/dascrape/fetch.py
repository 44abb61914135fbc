"""Council index page retrieval and PDF download.

Every request is followed by a politeness delay of
``request_delay_min + randint(0, request_delay_steps - 1)`` seconds.  When
``MORPH_PROXY`` is set in the environment it is used for both HTTP and
HTTPS.  Network errors are not caught: they propagate to the caller and
end the run.
"""

from __future__ import annotations

import logging
import os
import random
import time
from typing import Callable, Dict, List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from .config import ExtractionConfig

log = logging.getLogger(__name__)

PROXY_ENV = "MORPH_PROXY"
USER_AGENT = "dascrape/0.1"


def proxies_from_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Return a requests ``proxies`` mapping from ``MORPH_PROXY``, if set."""
    environ = os.environ if environ is None else environ
    proxy = environ.get(PROXY_ENV)
    if not proxy:
        return {}
    return {"http": proxy, "https": proxy}


def extract_pdf_links(html: str, base_url: str, selector: str) -> List[str]:
    """Absolute PDF URLs matched by *selector*, de-duplicated, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    urls: List[str] = []
    for a in soup.select(selector):
        href = a.get("href")
        if not href:
            continue
        url = urljoin(base_url, href.strip())
        if url not in urls:
            urls.append(url)
    return urls


def select_pdf_urls(
    urls: List[str], rng: Optional[random.Random] = None
) -> List[str]:
    """Pick the most recent PDF plus one other chosen at random.

    The index lists the oldest document first.  Processing every document
    in one run uses too much memory on the hosting platform, so each run
    takes the newest and samples one more; the pair is processed in a
    random order.
    """
    rng = rng or random.Random()
    remaining = list(reversed(urls))
    if not remaining:
        return []
    selected = [remaining.pop(0)]
    if remaining:
        selected.append(rng.choice(remaining))
    if rng.randrange(2) == 0:
        selected.reverse()
    return selected


class IndexFetcher:
    """Lists and downloads the development-application PDFs."""

    def __init__(
        self,
        settings: Optional[ExtractionConfig] = None,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or ExtractionConfig()
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.proxies = proxies_from_env()
        self.rng = rng or random.Random()
        self._sleep = sleep

    def _pause(self) -> None:
        s = self.settings
        delay = s.request_delay_min + self.rng.randint(0, s.request_delay_steps - 1)
        log.debug("Sleeping %.1f s", delay)
        self._sleep(delay)

    def _get(self, url: str) -> requests.Response:
        resp = self.session.get(
            url, timeout=self.settings.request_timeout, proxies=self.proxies or None
        )
        resp.raise_for_status()
        self._pause()
        return resp

    def list_pdf_urls(self) -> List[str]:
        """Retrieve the index page and return the linked PDF URLs."""
        url = self.settings.index_url
        log.info("Retrieving page: %s", url)
        resp = self._get(url)
        urls = extract_pdf_links(resp.text, url, self.settings.pdf_link_selector)
        if not urls:
            log.warning("No PDF URLs were found on the page.")
        else:
            log.info("Found %d PDF URL(s)", len(urls))
        return urls

    def fetch_pdf(self, url: str) -> bytes:
        """Download one PDF and return its bytes."""
        log.info("Retrieving document: %s", url)
        return self._get(url).content
