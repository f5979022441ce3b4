"""Persist ranked results, keywords and the run summary."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from jobrank.log import get_logger
from jobrank.models import ScoredJob

log = get_logger(__name__)

RESULTS_FILE = "results.json"
KEYWORDS_FILE = "keywords.json"
SUMMARY_FILE = "summary.json"
REPORT_FILE = "report.md"


def _clip(text: str, width: int) -> str:
    text = text or ""
    return text[:width] + ("…" if len(text) > width else "")


def build_report(summary: dict[str, Any], keywords: Sequence[str]) -> str:
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    lines: list[str] = [f"# Job Ranking Report — {date}", ""]
    lines.append(
        f"**{summary.get('total', 0)}** jobs ranked for "
        f"_{summary.get('query', '')}_ in _{summary.get('location', '')}_ "
        f"(sources: {', '.join(summary.get('sources', [])) or 'none'})"
    )
    lines.append("")

    top = summary.get("top", [])
    if top:
        lines.append("## Top Matches")
        lines.append("")
        lines.append("| # | Role | Company | Source | Score | Link |")
        lines.append("|--:|------|---------|--------|------:|------|")
        for i, job in enumerate(top, 1):
            link = f"[Open]({job['link']})" if job.get("link") else "—"
            lines.append(
                f"| {i} | {_clip(job.get('title', ''), 40)} | {_clip(job.get('company', ''), 22)} "
                f"| {job.get('source', '')} | {job.get('score', 0):.2f} | {link} |"
            )
        lines.append("")

    errors = summary.get("errors") or {}
    if errors:
        lines.append("## Source Errors")
        lines.append("")
        for source, message in errors.items():
            lines.append(f"- **{source}:** {_clip(message, 120)}")
        lines.append("")

    lines.append("## Keywords")
    lines.append("")
    lines.append(", ".join(keywords) if keywords else "_none_")
    lines.append("")
    return "\n".join(lines)


def _write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def write_artifacts(
    output_dir: Path,
    ranked: Sequence[ScoredJob],
    keywords: Sequence[str],
    summary: dict[str, Any],
) -> dict[str, Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "results": output_dir / RESULTS_FILE,
        "keywords": output_dir / KEYWORDS_FILE,
        "summary": output_dir / SUMMARY_FILE,
        "report": output_dir / REPORT_FILE,
    }
    _write_json(paths["results"], [s.to_dict() for s in ranked])
    _write_json(paths["keywords"], list(keywords))
    _write_json(paths["summary"], summary)
    paths["report"].write_text(build_report(summary, keywords), encoding="utf-8")
    log.info("Artifacts written → %s", output_dir)
    return paths
