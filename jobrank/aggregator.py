"""Run every enabled source, isolate failures and merge the results."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from jobrank.log import get_logger
from jobrank.models import JobRecord
from jobrank.sources.base import JobSource

log = get_logger(__name__)


@dataclass
class SourceResult:
    source: str
    jobs: list[JobRecord] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _source_name(source: JobSource) -> str:
    return getattr(source, "tag", "") or source.__class__.__name__


def _run_source(source: JobSource, query: str, location: str, limit: int) -> SourceResult:
    """Wrapper for parallel source fetching; never raises."""
    name = _source_name(source)
    try:
        jobs = list(source.fetch_jobs(query, location, limit))
    except Exception as exc:
        log.error("[%s] FAILED: %s", name, exc)
        return SourceResult(source=name, error=exc)
    log.info("[%s] returned %d jobs", name, len(jobs))
    return SourceResult(source=name, jobs=jobs)


def collect(
    sources: Sequence[JobSource],
    query: str,
    location: str,
    limit: int,
) -> list[SourceResult]:
    """Fetch from all sources concurrently; results keep invocation order."""
    if not sources:
        return []
    log.info("Fetching from %d source(s) in parallel...", len(sources))
    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        futures = [pool.submit(_run_source, s, query, location, limit) for s in sources]
        return [f.result() for f in futures]


def merge_and_dedupe(results: Iterable[SourceResult]) -> list[JobRecord]:
    """Concatenate successful results; the first record per ``link`` wins."""
    merged: list[JobRecord] = []
    seen: set[str] = set()
    dropped = 0
    for result in results:
        if not result.ok:
            continue
        for job in result.jobs:
            if job.link:
                if job.link in seen:
                    dropped += 1
                    continue
                seen.add(job.link)
            merged.append(job)
    if dropped:
        log.info("Dropped %d duplicate job(s) by link", dropped)
    return merged


def aggregate(
    sources: Sequence[JobSource],
    query: str,
    location: str,
    limit: int,
) -> tuple[list[JobRecord], list[SourceResult]]:
    results = collect(sources, query, location, limit)
    jobs = merge_and_dedupe(results)
    log.info("Total unique jobs: %d", len(jobs))
    return jobs, results
