import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from app.config import settings
from app.models.analysis import AnalysisMethod, AnalysisReport, Summary
from app.services.report_store import get_report, list_reports, save_report


def _report(report_id, analyzed_at, trust_score=60):
    return AnalysisReport(
        report_id=report_id,
        product_url="https://shop.example/p/1",
        analyzed_at=analyzed_at,
        total_reviews_analyzed=0,
        raw_analysis="Looks mixed.",
        summary=Summary(trust_score=trust_score),
        analysis_method=AnalysisMethod.AI,
        disclaimer="Informational only.",
    )


class TestReportStore:
    def test_save_writes_camel_case_without_nulls(self):
        path = save_report(_report("a" * 32, datetime.now(timezone.utc)))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert path.parent == Path(settings.reports_path)
        assert data["rawAnalysis"] == "Looks mixed."
        assert data["analysisMethod"] == "AI-powered"
        assert data["summary"] == {"trustScore": 60}
        assert "reviews" not in data

    def test_get_round_trip(self):
        report = _report("b" * 32, datetime.now(timezone.utc))
        save_report(report)
        assert get_report("b" * 32) == report

    def test_get_unknown_or_invalid_id(self):
        assert get_report("c" * 32) is None
        assert get_report("../../etc/passwd") is None

    def test_list_skips_unreadable_files(self):
        save_report(_report("3" * 32, datetime.now(timezone.utc)))
        reports_dir = Path(settings.reports_path)
        (reports_dir / "notes.json").write_text("{not json", encoding="utf-8")
        (reports_dir / "other.json").write_text(json.dumps({"name": "unrelated"}), encoding="utf-8")
        assert [i.report_id for i in list_reports()] == ["3" * 32]

    def test_list_newest_first(self):
        now = datetime.now(timezone.utc)
        save_report(_report("1" * 32, now - timedelta(hours=1), trust_score=10))
        save_report(_report("2" * 32, now, trust_score=90))
        infos = list_reports()
        assert [i.report_id for i in infos] == ["2" * 32, "1" * 32]
        assert infos[0].trust_score == 90
