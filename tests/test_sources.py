import pytest
import requests

from jobrank.errors import AdapterError, DetailFetchError
from jobrank.models import JobRecord
from jobrank.sources import SOURCES, IndeedSource, RemoteOKSource, get_sources
from jobrank.sources import base


def assert_job_record_contract(job: JobRecord) -> None:
    """Any adapter output must satisfy these invariants."""
    assert isinstance(job, JobRecord)
    assert isinstance(job.title, str) and job.title.strip()
    assert isinstance(job.company, str)
    assert isinstance(job.location, str)
    assert job.link is None or job.link.startswith("https://")
    assert isinstance(job.tags, list)


def _fake_fetch(pages: dict[str, str], calls: list[str] | None = None):
    def fake_fetch_text(url: str, timeout_seconds: float = 0) -> str:
        if calls is not None:
            calls.append(url)
        for key, html in pages.items():
            if key in url:
                return html
        raise requests.ConnectionError(f"no fixture for {url}")
    return fake_fetch_text


# ---------- Indeed ----------

def test_indeed_listing_url_encodes_query_and_location():
    url = IndeedSource().listing_url("Python Developer", "New York, NY")
    assert url == "https://www.indeed.com/jobs?q=Python+Developer&l=New+York%2C+NY"


def test_indeed_parses_listing_and_details(monkeypatch, load_text):
    monkeypatch.setattr(base, "_fetch_text", _fake_fetch({
        "/jobs?": load_text("indeed_listing.html"),
        "/rc/clk": load_text("indeed_detail.html"),
    }))

    jobs = IndeedSource().fetch_jobs("python", "Remote", limit=10)
    assert [j.title for j in jobs] == ["Senior Python Developer", "Data Engineer", "Frontend Engineer"]
    for j in jobs:
        assert_job_record_contract(j)
        assert j.source == "Indeed"

    first, second, third = jobs
    assert first.company == "Acme Corp"
    assert first.location == "Remote"
    assert first.link == "https://www.indeed.com/rc/clk?jk=aaa111"
    assert second.link == "https://www.indeed.com/rc/clk?jk=bbb222"
    assert "Django and AWS" in first.description
    # no link -> no detail fetch
    assert third.link is None
    assert third.description is None


def test_indeed_limit_is_respected(monkeypatch, load_text):
    calls: list[str] = []
    monkeypatch.setattr(base, "_fetch_text", _fake_fetch({
        "/jobs?": load_text("indeed_listing.html"),
        "/rc/clk": load_text("indeed_detail.html"),
    }, calls))

    jobs = IndeedSource().fetch_jobs("python", "Remote", limit=1)
    assert len(jobs) == 1
    assert len(calls) == 2  # listing + one detail page


# ---------- RemoteOK ----------

def test_remoteok_listing_url_dashes_query():
    assert RemoteOKSource().listing_url("react  developer", "Berlin") == "https://remoteok.com/remote-react-developer-jobs"


def test_remoteok_parses_rows_tags_and_descriptions(monkeypatch, load_text):
    monkeypatch.setattr(base, "_fetch_text", _fake_fetch({
        "/remote-jobs/": load_text("remoteok_detail.html"),
        "-jobs": load_text("remoteok_listing.html"),
    }))

    jobs = RemoteOKSource().fetch_jobs("engineer", "anywhere", limit=20)
    assert [j.title for j in jobs] == ["Backend Engineer", "React Developer", "DevOps Engineer"]
    for j in jobs:
        assert_job_record_contract(j)
        assert j.source == "RemoteOK"
        assert j.location == "Remote"
        assert "Kubernetes a plus" in j.description

    assert jobs[0].company == "Acme"
    assert jobs[0].tags == ["python", "aws"]
    assert jobs[0].link == "https://remoteok.com/remote-jobs/101-backend-engineer-acme"
    assert jobs[1].link == "https://remoteok.com/remote-jobs/102-react-developer-hooli"
    assert jobs[2].tags == []


# ---------- Failure handling ----------

def test_detail_failure_keeps_job_without_description(monkeypatch, load_text):
    listing = load_text("remoteok_listing.html")

    def flaky_fetch(url: str, timeout_seconds: float = 0) -> str:
        if url.endswith("-jobs"):
            return listing
        if "102-" in url:
            raise requests.Timeout("slow")
        return load_text("remoteok_detail.html")

    monkeypatch.setattr(base, "_fetch_text", flaky_fetch)
    jobs = RemoteOKSource().fetch_jobs("engineer", "", limit=20)

    assert len(jobs) == 3
    assert jobs[0].description and jobs[2].description
    assert jobs[1].description is None


def test_fetch_detail_reports_error_result(monkeypatch):
    def boom(url: str, timeout_seconds: float = 0) -> str:
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(base, "_fetch_text", boom)
    result = IndeedSource().fetch_detail("https://www.indeed.com/viewjob?jk=1")
    assert not result.ok
    assert isinstance(result.error, DetailFetchError)
    assert result.description is None


def test_listing_failure_raises_adapter_error(monkeypatch):
    calls: list[str] = []

    def boom(url: str, timeout_seconds: float = 0) -> str:
        calls.append(url)
        raise requests.ConnectionError("down")

    monkeypatch.setattr(base, "_fetch_text", boom)
    with pytest.raises(AdapterError) as exc_info:
        IndeedSource().fetch_jobs("python", "Remote", limit=5)
    assert exc_info.value.source == "indeed"
    assert len(calls) == 2  # retried once


def test_listing_client_error_is_not_retried(monkeypatch):
    calls: list[str] = []

    def forbidden(url: str, timeout_seconds: float = 0) -> str:
        calls.append(url)
        resp = requests.Response()
        resp.status_code = 403
        raise requests.HTTPError("403 Forbidden", response=resp)

    monkeypatch.setattr(base, "_fetch_text", forbidden)
    with pytest.raises(AdapterError):
        RemoteOKSource().fetch_jobs("python", "", limit=5)
    assert len(calls) == 1


def test_listing_attempts_are_configurable(monkeypatch, load_text):
    outcomes = [requests.Timeout("slow"), requests.ConnectionError("reset")]
    calls: list[str] = []

    def flaky(url: str, timeout_seconds: float = 0) -> str:
        calls.append(url)
        if outcomes:
            raise outcomes.pop(0)
        return load_text("remoteok_listing.html")

    monkeypatch.setattr(base, "_fetch_text", flaky)
    jobs = RemoteOKSource(fetch_details=False, listing_attempts=3).fetch_jobs("python", "", limit=5)
    assert len(jobs) == 3
    assert len(calls) == 3


def test_details_can_be_disabled(monkeypatch, load_text):
    calls: list[str] = []
    monkeypatch.setattr(base, "_fetch_text", _fake_fetch({"-jobs": load_text("remoteok_listing.html")}, calls))
    jobs = RemoteOKSource(fetch_details=False).fetch_jobs("engineer", "", limit=20)
    assert len(jobs) == 3
    assert len(calls) == 1
    assert all(j.description is None for j in jobs)


# ---------- Registry ----------

def test_get_sources_builds_known_adapters_in_order():
    sources = get_sources(["remoteok", "nope", "indeed"], timeout=5, fetch_details=False)
    assert [s.tag for s in sources] == ["remoteok", "indeed"]
    assert all(s.timeout == 5 and not s.fetch_details for s in sources)
    assert set(SOURCES) == {"indeed", "remoteok"}
