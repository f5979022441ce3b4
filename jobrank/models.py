"""Data models for job records, scores and resume inputs."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union


@dataclass
class JobRecord:
    """One normalized posting from any source.

    ``link`` is the identity key used for deduplication. Records without a
    link are passed through and never deduplicated against each other.
    """
    source: str
    title: str
    company: str
    location: str
    link: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ScoredJob:
    job: JobRecord
    score: float

    def to_dict(self) -> dict[str, Any]:
        d = self.job.to_dict()
        d["score"] = self.score
        return d

    def summary(self) -> dict[str, Any]:
        return {
            "title": self.job.title,
            "company": self.job.company,
            "source": self.job.source,
            "score": self.score,
            "link": self.job.link,
        }


@dataclass(frozen=True)
class DetailResult:
    """Outcome of one best-effort detail fetch: a description or an error."""
    link: str
    description: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ── Resume inputs ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ResumeSource:
    data: bytes
    filename: str
    fmt: str = "text"


@dataclass(frozen=True)
class BlobRef:
    """Inline resume payload, base64 encoded."""
    data: str
    filename: str = "resume"


@dataclass(frozen=True)
class UrlRef:
    url: str


@dataclass(frozen=True)
class PathRef:
    path: str


ResumeRef = Union[BlobRef, UrlRef, PathRef]
