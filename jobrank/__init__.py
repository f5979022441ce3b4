"""Rank scraped job postings against a resume."""

__version__ = "0.1.0"
