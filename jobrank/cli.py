"""Command-line entry point: ``jobrank --resume cv.pdf --query "Python Developer"``."""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Sequence

from jobrank.config import KNOWN_SOURCES, load_config
from jobrank.log import get_logger, log_to_file

log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jobrank",
        description="Fetch job postings and rank them against a resume.",
    )
    p.add_argument("--config", type=Path, help="YAML run configuration")
    p.add_argument("--query", help="search query (default: Software Engineer)")
    p.add_argument("--location", help="search location (default: Remote)")
    p.add_argument("--limit", type=int, help="max jobs per source (default: 20)")
    p.add_argument(
        "--source", action="append", dest="sources", choices=KNOWN_SOURCES,
        help="enable a source; repeat for several (default: all)",
    )
    p.add_argument("--resume", dest="resume_file", help="resume path or URL")
    p.add_argument(
        "--keyword", action="append", dest="extra_keywords",
        help="extra keyword to rank by; repeatable",
    )
    p.add_argument("--max-keywords", type=int)
    p.add_argument("--output-dir", type=Path)
    p.add_argument("--notify-email")
    p.add_argument("--no-details", action="store_true", help="skip per-job description pages")
    p.add_argument("--log-dir", type=Path, help="run log directory (default: <output-dir>/logs)")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as exc:
        log.error("Could not load config: %s", exc)
        return 2

    cfg = cfg.with_overrides(
        query=args.query,
        location=args.location,
        limit=args.limit,
        sources=args.sources,
        resume_file=args.resume_file,
        extra_keywords=args.extra_keywords,
        max_keywords=args.max_keywords,
        output_dir=args.output_dir,
        notify_email=args.notify_email,
        fetch_details=False if args.no_details else None,
    )

    log_file = log_to_file(args.log_dir or os.environ.get("JOBRANK_LOG_DIR") or cfg.output_dir / "logs")
    if log_file:
        log.info("Logging to %s", log_file)

    from jobrank.pipeline import run

    result = run(cfg)
    log.info("Jobs ranked: %d", len(result.jobs))
    for i, job in enumerate(result.top, 1):
        log.info("  %2d. %.2f  %s @ %s [%s]", i, job["score"], job["title"], job["company"], job["source"])
    if result.artifacts:
        log.info("Summary: %s", result.artifacts["summary"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
