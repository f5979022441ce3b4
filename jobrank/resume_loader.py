"""Resolve a resume reference and load its raw bytes."""
from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from jobrank.config import HTTP_TIMEOUT_SECONDS, USER_AGENT
from jobrank.errors import ResumeLoadError
from jobrank.log import get_logger
from jobrank.models import BlobRef, PathRef, ResumeRef, ResumeSource, UrlRef
from jobrank.resume_parser import infer_format

log = get_logger(__name__)


def parse_resume_ref(value: Any) -> ResumeRef | None:
    """Map a config value onto one of the reference kinds.

    A mapping is an inline blob (``data`` holds base64, optional
    ``filename``), an ``http(s)://`` string is a URL, any other non-empty
    string is a local path.
    """
    if value is None:
        return None
    if isinstance(value, (BlobRef, UrlRef, PathRef)):
        return value
    if isinstance(value, dict):
        data = value.get("data") or value.get("value")
        if not data:
            raise ResumeLoadError("Blob resume reference has no 'data'")
        filename = value.get("filename") or value.get("key") or "resume"
        return BlobRef(data=str(data), filename=str(filename))
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if urlparse(value).scheme in ("http", "https"):
            return UrlRef(url=value)
        return PathRef(path=value)
    raise ResumeLoadError(f"Unsupported resume reference type: {type(value).__name__}")


def _load_blob(ref: BlobRef) -> tuple[bytes, str]:
    # MIME-style payloads are wrapped at 76 columns
    payload = "".join(ref.data.split())
    try:
        return base64.b64decode(payload, validate=True), ref.filename
    except (binascii.Error, ValueError) as exc:
        raise ResumeLoadError(f"Invalid base64 resume blob: {exc}") from exc


def _load_url(ref: UrlRef, timeout: float) -> tuple[bytes, str]:
    try:
        r = requests.get(ref.url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as exc:
        raise ResumeLoadError(f"Could not download resume from {ref.url}: {exc}") from exc
    filename = Path(urlparse(ref.url).path).name or "resume"
    return r.content, filename


def _load_path(ref: PathRef) -> tuple[bytes, str]:
    path = Path(ref.path).expanduser()
    try:
        return path.read_bytes(), path.name
    except OSError as exc:
        raise ResumeLoadError(f"Could not read resume {path}: {exc}") from exc


def load_resume(ref: ResumeRef, timeout: float = HTTP_TIMEOUT_SECONDS) -> ResumeSource:
    """Return the resume bytes with an inferred format tag.

    Raises ``ResumeLoadError`` when the bytes are unreachable.
    """
    if isinstance(ref, BlobRef):
        data, filename = _load_blob(ref)
    elif isinstance(ref, UrlRef):
        data, filename = _load_url(ref, timeout)
    elif isinstance(ref, PathRef):
        data, filename = _load_path(ref)
    else:
        raise ResumeLoadError(f"Unsupported resume reference: {ref!r}")

    if not data:
        raise ResumeLoadError(f"Resume {filename} is empty")
    fmt = infer_format(filename, data)
    log.info("Loaded resume %s (%d bytes, %s)", filename, len(data), fmt)
    return ResumeSource(data=data, filename=filename, fmt=fmt)
