from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def load_text(fixtures_dir):
    """Returns a function: load_text("file.ext") -> str"""
    def _load(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    """Listing retries back off with time.sleep; keep tests fast."""
    from jobrank import retry

    monkeypatch.setattr(retry.time, "sleep", lambda _s: None)
