"""Job source contract shared by every board adapter."""
from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from jobrank.config import DETAIL_CONCURRENCY, HTTP_TIMEOUT_SECONDS, LISTING_ATTEMPTS, USER_AGENT
from jobrank.errors import AdapterError, DetailFetchError
from jobrank.log import get_logger
from jobrank.models import DetailResult, JobRecord
from jobrank.retry import retry

log = get_logger(__name__)


def _fetch_text(url: str, timeout_seconds: float = HTTP_TIMEOUT_SECONDS) -> str:
    r = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout_seconds)
    r.raise_for_status()
    return r.text


def absolute_link(base: str, href: str | None) -> str | None:
    if not href:
        return None
    href = href.strip()
    return href if href.startswith("http") else urljoin(base, href)


class JobSource(ABC):
    """Fetches listings from one board and maps them to ``JobRecord``.

    Subclasses build the listing URL, parse listing markup and pick the
    description out of a detail page. Listing failures raise
    ``AdapterError``; detail failures only drop that job's description.
    """

    tag: str = ""
    base_url: str = ""

    def __init__(
        self,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        fetch_details: bool = True,
        detail_concurrency: int = DETAIL_CONCURRENCY,
        listing_attempts: int = LISTING_ATTEMPTS,
    ) -> None:
        self.timeout = timeout
        self.listing_attempts = listing_attempts
        self.fetch_details = fetch_details
        self.detail_concurrency = max(1, detail_concurrency)

    @abstractmethod
    def listing_url(self, query: str, location: str) -> str:
        pass

    @abstractmethod
    def parse_listing(self, soup: BeautifulSoup, limit: int) -> list[JobRecord]:
        pass

    @abstractmethod
    def parse_detail(self, soup: BeautifulSoup) -> str:
        pass

    def _fetch_listing(self, url: str) -> str:
        fetch = retry(attempts=self.listing_attempts)(_fetch_text)
        return fetch(url, self.timeout)

    def fetch_jobs(self, query: str, location: str, limit: int = 20) -> list[JobRecord]:
        url = self.listing_url(query, location)
        log.debug("[%s] GET %s", self.tag, url)
        try:
            html = self._fetch_listing(url)
            jobs = self.parse_listing(BeautifulSoup(html, "html.parser"), limit)
        except Exception as exc:
            raise AdapterError(self.tag, str(exc)) from exc
        jobs = jobs[:limit]
        log.info("[%s] parsed %d listings", self.tag, len(jobs))

        if self.fetch_details:
            self.attach_descriptions(jobs)
        return jobs

    def fetch_detail(self, link: str) -> DetailResult:
        """Fetch one detail page; failures come back as ``DetailResult.error``."""
        try:
            html = _fetch_text(link, self.timeout)
            desc = self.parse_detail(BeautifulSoup(html, "html.parser")).strip()
        except Exception as exc:
            return DetailResult(link=link, error=DetailFetchError(link, str(exc)))
        return DetailResult(link=link, description=desc or None)

    def attach_descriptions(self, jobs: list[JobRecord]) -> list[DetailResult]:
        targets = [j for j in jobs if j.link]
        if not targets:
            return []
        with ThreadPoolExecutor(max_workers=min(self.detail_concurrency, len(targets))) as pool:
            results = list(pool.map(self.fetch_detail, [j.link for j in targets]))

        failed = 0
        for job, result in zip(targets, results):
            if result.ok:
                if result.description:
                    job.description = result.description
            else:
                failed += 1
                log.debug("[%s] detail skipped: %s", self.tag, result.error)
        if failed:
            log.warning("[%s] %d/%d detail pages failed", self.tag, failed, len(targets))
        return results
