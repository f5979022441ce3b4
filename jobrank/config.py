"""Load run configuration from YAML, environment and defaults."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobrank.keywords import MAX_KEYWORDS
from jobrank.log import get_logger

log = get_logger(__name__)

load_dotenv()

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH: Path = CONFIG_DIR / "run.yaml"
OUTPUT_DIR: Path = PROJECT_ROOT / "output"

KNOWN_SOURCES: tuple[str, ...] = ("indeed", "remoteok")

DEFAULT_QUERY = "Software Engineer"
DEFAULT_LOCATION = "Remote"
DEFAULT_LIMIT = 20
HTTP_TIMEOUT_SECONDS = 20
DETAIL_CONCURRENCY = 4
LISTING_ATTEMPTS = 2
TOP_N = 10

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)

UPLOAD_RESUME_FILENAME = "resume.pdf"

# Camel-case keys from the actor input schema.
_ALIASES: dict[str, str] = {
    "searchQuery": "query",
    "resumeFile": "resume_file",
    "uploadResume": "resume_file",
    "extraKeywords": "extra_keywords",
    "notifyEmail": "notify_email",
    "maxKeywords": "max_keywords",
    "outputDir": "output_dir",
    "fetchDetails": "fetch_details",
    "platforms": "sources",
}


@dataclass(frozen=True)
class RunConfig:
    query: str = DEFAULT_QUERY
    location: str = DEFAULT_LOCATION
    limit: int = DEFAULT_LIMIT
    sources: tuple[str, ...] = KNOWN_SOURCES
    resume_file: Any = None
    extra_keywords: tuple[str, ...] = ()
    notify_email: str | None = None
    max_keywords: int = MAX_KEYWORDS
    output_dir: Path = OUTPUT_DIR
    fetch_details: bool = True
    http_timeout: float = HTTP_TIMEOUT_SECONDS
    detail_concurrency: int = DETAIL_CONCURRENCY
    top_n: int = TOP_N
    extra: dict[str, Any] = field(default_factory=dict)

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **_coerce(values)) if values else self


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _env_int(name: str, default: int | None) -> int | None:
    raw = get_env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = get_env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [p.strip() for p in value.split(",") if p.strip()]
    return [str(v).strip() for v in value if str(v).strip()]


def normalize_sources(value: Any) -> tuple[str, ...]:
    """Lower-case, dedupe and keep only known source tags."""
    tags: list[str] = []
    for tag in _as_list(value):
        tag = tag.lower()
        if tag not in KNOWN_SOURCES:
            log.warning("Unknown source %r ignored (known: %s)", tag, ", ".join(KNOWN_SOURCES))
            continue
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    out = dict(values)
    if "sources" in out:
        out["sources"] = normalize_sources(out["sources"])
    if "extra_keywords" in out:
        out["extra_keywords"] = tuple(_as_list(out["extra_keywords"]))
    for key in ("limit", "max_keywords", "detail_concurrency", "top_n"):
        if key in out:
            out[key] = int(out[key])
    if "http_timeout" in out:
        out["http_timeout"] = float(out["http_timeout"])
    if "output_dir" in out:
        out["output_dir"] = Path(out["output_dir"])
    if "fetch_details" in out:
        out["fetch_details"] = bool(out["fetch_details"])
    return out


def _from_mapping(data: dict[str, Any]) -> dict[str, Any]:
    known = {f for f in RunConfig.__dataclass_fields__ if f != "extra"}
    values: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if key == "uploadResume" and isinstance(value, str):
            # bare base64 payload; the actor saved it as resume.pdf
            value = {"data": value, "filename": UPLOAD_RESUME_FILENAME}
        if name in known:
            values[name] = value
        else:
            extra[key] = value
    if extra:
        log.debug("Unrecognized config keys kept as extra: %s", sorted(extra))
        values["extra"] = extra
    return values


def load_file(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    return data


def _env_overrides() -> dict[str, Any]:
    return {
        "query": get_env("JOBRANK_QUERY") or None,
        "location": get_env("JOBRANK_LOCATION") or None,
        "limit": _env_int("JOBRANK_LIMIT", None),
        "sources": get_env("JOBRANK_SOURCES") or None,
        "resume_file": get_env("JOBRANK_RESUME") or None,
        "http_timeout": _env_float("JOBRANK_HTTP_TIMEOUT", None),
        "output_dir": get_env("JOBRANK_OUTPUT_DIR") or None,
    }


def load_config(path: Path | None = None) -> RunConfig:
    """Defaults, then the YAML file (if any), then ``JOBRANK_*`` env vars."""
    cfg = RunConfig()
    if path is None and DEFAULT_CONFIG_PATH.exists():
        path = DEFAULT_CONFIG_PATH
    if path is not None:
        log.info("Loading config from %s", path)
        cfg = cfg.with_overrides(**_from_mapping(load_file(Path(path))))
    cfg = cfg.with_overrides(**_env_overrides())
    if not cfg.sources:
        log.warning("No known sources configured; no jobs will be fetched")
    return cfg


def ensure_dirs(cfg: RunConfig) -> None:
    cfg.output_dir.mkdir(parents=True, exist_ok=True)
