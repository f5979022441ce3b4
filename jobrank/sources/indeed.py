"""Indeed search results (HTML listing + per-job description page)."""
from __future__ import annotations

from urllib.parse import urlencode

from bs4 import BeautifulSoup

from jobrank.models import JobRecord
from jobrank.sources.base import JobSource, absolute_link


def _text(node) -> str:
    return node.get_text(" ", strip=True) if node is not None else ""


class IndeedSource(JobSource):
    tag = "indeed"
    base_url = "https://www.indeed.com"

    def listing_url(self, query: str, location: str) -> str:
        return f"{self.base_url}/jobs?{urlencode({'q': query, 'l': location})}"

    def parse_listing(self, soup: BeautifulSoup, limit: int) -> list[JobRecord]:
        jobs: list[JobRecord] = []
        for card in soup.select(".job_seen_beacon"):
            if len(jobs) >= limit:
                break
            anchor = card.select_one("h2 a")
            jobs.append(
                JobRecord(
                    source="Indeed",
                    title=_text(card.select_one("h2.jobTitle span")),
                    company=_text(card.select_one(".companyName")),
                    location=_text(card.select_one(".companyLocation")),
                    link=absolute_link(self.base_url, anchor.get("href") if anchor else None),
                )
            )
        return jobs

    def parse_detail(self, soup: BeautifulSoup) -> str:
        return " ".join(_text(n) for n in soup.select('[id^="jobDescriptionText"]'))
