"""Exceptions raised along the ranking pipeline."""
from __future__ import annotations


class JobRankError(Exception):
    pass


class ResumeLoadError(JobRankError):
    """Resume bytes could not be read from their reference."""


class ResumeParseError(JobRankError):
    """Format-specific text extraction failed."""


class AdapterError(JobRankError):
    """A job source's listing fetch failed as a whole."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class DetailFetchError(JobRankError):
    """A single job's detail page could not be fetched or parsed."""

    def __init__(self, link: str, message: str) -> None:
        super().__init__(f"{link}: {message}")
        self.link = link
