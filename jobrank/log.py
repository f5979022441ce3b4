"""Logging setup: console on first use, an optional per-run log file."""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

# Adapters log from pool threads; the thread name tells sources apart.
_FORMAT = "%(asctime)s  %(levelname)-8s  [%(threadName)s]  %(name)s  %(message)s"
_DATE_FMT = "%H:%M:%S"

_ROOT = "jobrank"
_file_handler: logging.FileHandler | None = None


def _level() -> int:
    return getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def _package_logger() -> logging.Logger:
    pkg = logging.getLogger(_ROOT)
    if not pkg.handlers:
        pkg.setLevel(logging.DEBUG)
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(_level())
        console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
        pkg.addHandler(console)
    return pkg


def get_logger(name: str) -> logging.Logger:
    _package_logger()
    return logging.getLogger(name)


def log_to_file(log_dir: Path | str | None = None) -> Path | None:
    """Also write DEBUG-level output to ``<log_dir>/jobrank_<timestamp>.log``.

    *log_dir* defaults to ``JOBRANK_LOG_DIR``; with neither set this is a no-op.
    Returns the file path, or None when no file could be opened.
    """
    global _file_handler
    log_dir = log_dir or os.environ.get("JOBRANK_LOG_DIR")
    if not log_dir:
        return None

    pkg = _package_logger()
    if _file_handler is not None:
        pkg.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None

    path = Path(log_dir) / f"jobrank_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        pkg.warning("Log file disabled (%s)", exc)
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    pkg.addHandler(handler)
    _file_handler = handler
    return path
