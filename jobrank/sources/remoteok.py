"""RemoteOK listings; every posting is remote and carries tech tags."""
from __future__ import annotations

import re
from urllib.parse import quote

from bs4 import BeautifulSoup

from jobrank.models import JobRecord
from jobrank.sources.base import JobSource, absolute_link


def _text(node) -> str:
    return node.get_text(" ", strip=True) if node is not None else ""


class RemoteOKSource(JobSource):
    tag = "remoteok"
    base_url = "https://remoteok.com"

    def listing_url(self, query: str, location: str) -> str:
        # RemoteOK has no location filter
        slug = re.sub(r"\s+", "-", query.strip())
        return f"{self.base_url}/remote-{quote(slug)}-jobs"

    def parse_listing(self, soup: BeautifulSoup, limit: int) -> list[JobRecord]:
        jobs: list[JobRecord] = []
        for row in soup.select("tr.job"):
            if len(jobs) >= limit:
                break
            anchor = row.select_one("a.preventLink")
            title = _text(anchor) or _text(row.select_one("td.position h2"))
            href = row.get("data-href") or (anchor.get("href") if anchor else None)
            jobs.append(
                JobRecord(
                    source="RemoteOK",
                    title=title,
                    company=_text(row.select_one("td.company h3")),
                    location="Remote",
                    link=absolute_link(self.base_url, href),
                    tags=[t for t in (_text(a) for a in row.select(".tags a")) if t],
                )
            )
        return jobs

    def parse_detail(self, soup: BeautifulSoup) -> str:
        return " ".join(_text(n) for n in soup.select("#job-description, .description, article"))
