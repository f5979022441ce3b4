from .base import JobSource
from .indeed import IndeedSource
from .remoteok import RemoteOKSource

from jobrank.config import DETAIL_CONCURRENCY, HTTP_TIMEOUT_SECONDS
from jobrank.log import get_logger

log = get_logger(__name__)

__all__ = ["JobSource", "IndeedSource", "RemoteOKSource", "SOURCES", "get_sources"]

SOURCES: dict[str, type[JobSource]] = {
    IndeedSource.tag: IndeedSource,
    RemoteOKSource.tag: RemoteOKSource,
}


def get_sources(
    tags,
    *,
    timeout: float = HTTP_TIMEOUT_SECONDS,
    fetch_details: bool = True,
    detail_concurrency: int = DETAIL_CONCURRENCY,
) -> list[JobSource]:
    sources: list[JobSource] = []
    for tag in tags:
        cls = SOURCES.get(tag)
        if cls is None:
            log.warning("No adapter registered for source %r", tag)
            continue
        sources.append(
            cls(timeout=timeout, fetch_details=fetch_details, detail_concurrency=detail_concurrency)
        )
        log.info("Registered source: %s", tag)
    return sources
