"""Score jobs against the keyword list and rank them."""
from __future__ import annotations

from typing import Sequence

from jobrank.log import get_logger
from jobrank.models import JobRecord, ScoredJob

log = get_logger(__name__)

TITLE_WEIGHT = 3.0
DESCRIPTION_WEIGHT = 1.0
COMPANY_WEIGHT = 0.5
REMOTE_BONUS = 0.5


def _normalize(s: str | None) -> str:
    return (s or "").lower()


def score_job(job: JobRecord, keywords: Sequence[str]) -> float:
    """Additive substring score; independent of keyword order."""
    title = _normalize(job.title)
    desc = _normalize(job.description)
    company = _normalize(job.company)

    score = 0.0
    for raw in keywords:
        kw = _normalize(raw)
        if not kw:
            continue
        if kw in title:
            score += TITLE_WEIGHT
        if kw in desc:
            score += DESCRIPTION_WEIGHT
        if kw in company:
            score += COMPANY_WEIGHT

    if "remote" in _normalize(job.location):
        score += REMOTE_BONUS

    return round(score, 2)


def score_jobs(jobs: Sequence[JobRecord], keywords: Sequence[str]) -> list[ScoredJob]:
    return [ScoredJob(job=j, score=score_job(j, keywords)) for j in jobs]


def rank(scored: Sequence[ScoredJob]) -> list[ScoredJob]:
    """Sort by descending score; equal scores keep their incoming order."""
    result = sorted(scored, key=lambda s: -s.score)
    log.info("Ranked %d jobs (top score %.2f)", len(result), result[0].score if result else 0.0)
    return result
