"""Turn resume text into a bounded, prioritized keyword list.

Recognized skills (``CANONICAL_SKILLS``) always lead the list, followed by
the most frequent remaining resume tokens, then explicit user keywords.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from jobrank.log import get_logger
from jobrank.tokenizer import tokenize

log = get_logger(__name__)

MAX_KEYWORDS = 60
MIN_FREQUENT = 10
MIN_TOKEN_LEN = 2

STOP_WORDS: frozenset[str] = frozenset({
    "and", "the", "for", "with", "to", "in", "on", "of",
    "a", "an", "as", "by", "at", "from", "or",
})

# Iteration order here is the order canonical matches are emitted in.
CANONICAL_SKILLS: tuple[str, ...] = (
    "python", "java", "javascript", "typescript", "c++", "c#", "go", "golang",
    "rust", "ruby", "php", "swift", "kotlin", "scala", "sql", "bash",
    "react", "angular", "vue", "node", "node.js", "next.js", "express",
    "django", "flask", "fastapi", "spring", "rails", ".net",
    "html", "css", "sass", "graphql", "rest", "grpc", "microservices",
    "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "kafka",
    "rabbitmq", "spark", "airflow", "hadoop",
    "pandas", "numpy", "tensorflow", "pytorch", "scikit-learn", "ml", "nlp",
    "docker", "kubernetes", "terraform", "ansible", "jenkins", "aws", "gcp",
    "azure", "linux", "git", "devops", "agile", "scrum",
)
_CANONICAL_SET = frozenset(CANONICAL_SKILLS)

DEFAULT_KEYWORDS: tuple[str, ...] = ("software", "engineer", "developer")


def _frequencies(tokens: Iterable[str]) -> Counter[str]:
    return Counter(
        t for t in tokens if len(t) >= MIN_TOKEN_LEN and t not in STOP_WORDS
    )


def _dedupe(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


def extract_keywords(
    text: str | None,
    extra_keywords: Sequence[str] | None = None,
    max_keywords: int = MAX_KEYWORDS,
) -> list[str]:
    """Build the keyword list for *text*, capped at *max_keywords* entries.

    Frequency ties are broken by first occurrence in the text.
    """
    freq = _frequencies(tokenize(text))
    canonical = [s for s in CANONICAL_SKILLS if s in freq]

    # Counter keeps first-seen order and sorted() is stable.
    remaining = [t for t in freq if t not in _CANONICAL_SET]
    remaining.sort(key=lambda t: freq[t], reverse=True)
    frequent = remaining[:max(MIN_FREQUENT, max_keywords - len(canonical))]

    extras = [
        k.strip().lower()
        for k in (extra_keywords or [])
        if isinstance(k, str) and k.strip()
    ]

    keywords = _dedupe(canonical + frequent + extras)[:max(max_keywords, 0)]
    log.debug(
        "Extracted %d keywords (%d canonical, %d frequent, %d explicit)",
        len(keywords), len(canonical), len(frequent), len(extras),
    )
    return keywords


def resolve_keywords(
    text: str | None,
    extra_keywords: Sequence[str] | None = None,
    max_keywords: int = MAX_KEYWORDS,
    fallback: Sequence[str] = DEFAULT_KEYWORDS,
) -> list[str]:
    """Like ``extract_keywords`` but never empty: falls back to *fallback*."""
    keywords = extract_keywords(text, extra_keywords, max_keywords)
    if keywords:
        return keywords
    log.warning("No keywords from resume or extra keywords; using defaults %s", list(fallback))
    return _dedupe(k.lower() for k in fallback)[:max(max_keywords, 0)]
