"""
Resume-to-ranking pipeline.

Runs: load resume → extract keywords → fetch sources → dedupe → score → sort → artifacts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from jobrank.aggregator import SourceResult, aggregate
from jobrank.config import RunConfig, ensure_dirs
from jobrank.errors import ResumeLoadError
from jobrank.keywords import resolve_keywords
from jobrank.log import get_logger
from jobrank.models import ScoredJob
from jobrank.report import write_artifacts
from jobrank.resume_loader import load_resume, parse_resume_ref
from jobrank.resume_parser import extract_text
from jobrank.scorer import rank, score_jobs
from jobrank.sources import JobSource, get_sources

log = get_logger(__name__)


@dataclass
class PipelineResult:
    keywords: list[str]
    jobs: list[ScoredJob]
    summary: dict[str, Any]
    source_results: list[SourceResult] = field(default_factory=list)
    artifacts: dict[str, Path] = field(default_factory=dict)

    @property
    def top(self) -> list[dict[str, Any]]:
        return self.summary.get("top", [])


def read_resume_text(cfg: RunConfig) -> str | None:
    """Resume text for *cfg*, or None when there is none or it can't be loaded."""
    try:
        ref = parse_resume_ref(cfg.resume_file)
        if ref is None:
            log.info("No resume configured")
            return None
        resume = load_resume(ref, timeout=cfg.http_timeout)
    except ResumeLoadError as exc:
        log.warning("Resume unavailable (%s); continuing with fallback keywords", exc)
        return None
    return extract_text(resume)


def build_summary(
    cfg: RunConfig,
    ranked: Sequence[ScoredJob],
    source_results: Sequence[SourceResult] = (),
) -> dict[str, Any]:
    return {
        "query": cfg.query,
        "location": cfg.location,
        "sources": list(cfg.sources),
        "total": len(ranked),
        "notify_email": cfg.notify_email,
        "errors": {r.source: str(r.error) for r in source_results if not r.ok},
        "top": [s.summary() for s in ranked[:cfg.top_n]],
    }


def run(
    cfg: RunConfig,
    *,
    sources: Sequence[JobSource] | None = None,
    write: bool = True,
) -> PipelineResult:
    # 1. Keywords
    text = read_resume_text(cfg)
    keywords = resolve_keywords(text, cfg.extra_keywords, cfg.max_keywords)
    log.info("Using %d keywords: %s", len(keywords), ", ".join(keywords[:10]))

    # 2. Fetch — parallel across sources, failures isolated
    if sources is None:
        sources = get_sources(
            cfg.sources,
            timeout=cfg.http_timeout,
            fetch_details=cfg.fetch_details,
            detail_concurrency=cfg.detail_concurrency,
        )
    jobs, source_results = aggregate(sources, cfg.query, cfg.location, cfg.limit)
    failed = [r.source for r in source_results if not r.ok]
    if failed:
        log.warning("Sources failed: %s", ", ".join(failed))

    # 3. Score and rank
    ranked = rank(score_jobs(jobs, keywords))
    summary = build_summary(cfg, ranked, source_results)

    if cfg.notify_email:
        log.info("Notification email recorded (not sent): %s", cfg.notify_email)

    result = PipelineResult(
        keywords=keywords,
        jobs=ranked,
        summary=summary,
        source_results=list(source_results),
    )

    # 4. Artifacts
    if write:
        ensure_dirs(cfg)
        result.artifacts = write_artifacts(cfg.output_dir, ranked, keywords, summary)

    log.info(
        "Run complete — keywords=%d, jobs=%d, failed_sources=%d",
        len(keywords), len(ranked), len(failed),
    )
    return result
