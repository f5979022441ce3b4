import base64
import json

from jobrank.config import RunConfig
from jobrank.keywords import DEFAULT_KEYWORDS
from jobrank.models import JobRecord
from jobrank.pipeline import run


class FakeSource:
    def __init__(self, tag, jobs=None, error=None):
        self.tag = tag
        self.jobs = jobs or []
        self.error = error

    def fetch_jobs(self, query, location, limit=20):
        if self.error:
            raise self.error
        return [JobRecord(**j.to_dict()) for j in self.jobs[:limit]]


def _job(title, link, description="", location="Berlin", company="Co", source="fake"):
    return JobRecord(
        source=source, title=title, company=company, location=location,
        link=link, description=description,
    )


def _blob(text: str) -> dict:
    return {"filename": "cv.txt", "data": base64.b64encode(text.encode()).decode()}


def test_end_to_end_ranking_and_artifacts(tmp_path):
    cfg = RunConfig(
        query="Python", sources=("a", "b"), output_dir=tmp_path,
        resume_file=_blob("Python developer with Django"), notify_email="me@example.com",
    )
    a = FakeSource("a", [
        _job("Java Developer", "https://a/1"),
        _job("Python Engineer", "https://a/2", description="django apis", location="Remote"),
    ])
    b = FakeSource("b", [
        _job("Python Engineer (dup)", "https://a/2"),
        _job("Django Developer", "https://b/3"),
    ])

    result = run(cfg, sources=[a, b])

    assert result.keywords[:2] == ["python", "django"]
    titles = [s.job.title for s in result.jobs]
    assert titles == ["Django Developer", "Python Engineer", "Java Developer"]
    # django + developer in title; python title + django description + remote; developer title
    assert [s.score for s in result.jobs] == [6.0, 4.5, 3.0]

    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["query"] == "Python"
    assert summary["sources"] == ["a", "b"]
    assert summary["total"] == 3
    assert summary["notify_email"] == "me@example.com"
    assert summary["top"][0] == {
        "title": "Django Developer", "company": "Co", "source": "fake",
        "score": 6.0, "link": "https://b/3",
    }
    assert json.loads((tmp_path / "keywords.json").read_text(encoding="utf-8")) == result.keywords
    saved = json.loads((tmp_path / "results.json").read_text(encoding="utf-8"))
    assert [r["title"] for r in saved] == titles
    assert "score" in saved[0]
    assert (tmp_path / "report.md").read_text(encoding="utf-8").startswith("# Job Ranking Report")


def test_failing_adapter_is_isolated(tmp_path):
    cfg = RunConfig(output_dir=tmp_path, extra_keywords=("python",))
    bad = FakeSource("bad", error=RuntimeError("blocked"))
    good = FakeSource("good", [_job("Python Dev", "https://g/1")])

    result = run(cfg, sources=[bad, good], write=False)

    assert [s.job.title for s in result.jobs] == ["Python Dev"]
    assert result.summary["errors"] == {"bad": "blocked"}
    assert result.artifacts == {}


def test_missing_resume_and_all_sources_failing_yields_empty_run(tmp_path):
    cfg = RunConfig(output_dir=tmp_path, resume_file=str(tmp_path / "missing.pdf"))
    result = run(cfg, sources=[FakeSource("x", error=RuntimeError("down"))])

    assert result.keywords == list(DEFAULT_KEYWORDS)
    assert result.jobs == []
    assert result.summary["total"] == 0
    assert result.summary["top"] == []
    assert json.loads((tmp_path / "results.json").read_text(encoding="utf-8")) == []


def test_equal_scores_keep_aggregation_order(tmp_path):
    cfg = RunConfig(output_dir=tmp_path, extra_keywords=("rust",))
    src = FakeSource("s", [_job(f"Job {i}", f"https://s/{i}") for i in range(4)])
    result = run(cfg, sources=[src], write=False)
    assert [s.job.title for s in result.jobs] == ["Job 0", "Job 1", "Job 2", "Job 3"]


def test_summary_top_is_capped(tmp_path):
    cfg = RunConfig(output_dir=tmp_path, extra_keywords=("engineer",))
    src = FakeSource("s", [_job(f"Engineer {i}", f"https://s/{i}") for i in range(15)])
    result = run(cfg, sources=[src], write=False)
    assert result.summary["total"] == 15
    assert len(result.top) == 10
