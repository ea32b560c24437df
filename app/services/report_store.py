import logging
import re
from pathlib import Path

from app.config import settings
from app.models.analysis import AnalysisReport, ReportInfo

logger = logging.getLogger(__name__)

_REPORT_ID_RE = re.compile(r"[0-9a-f]{32}")


def _reports_dir() -> Path:
    path = Path(settings.reports_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_report(report: AnalysisReport) -> Path:
    """Write a report as camelCase JSON, omitting empty fields."""
    path = _reports_dir() / f"{report.report_id}.json"
    path.write_text(
        report.model_dump_json(by_alias=True, exclude_none=True, indent=2), encoding="utf-8"
    )
    logger.info("Saved report %s to %s", report.report_id, path)
    return path


def get_report(report_id: str) -> AnalysisReport | None:
    if not _REPORT_ID_RE.fullmatch(report_id):
        return None
    path = _reports_dir() / f"{report_id}.json"
    if not path.exists():
        return None
    return AnalysisReport.model_validate_json(path.read_text(encoding="utf-8"))


def list_reports() -> list[ReportInfo]:
    """Return stored reports, newest first."""
    reports = []
    for path in _reports_dir().glob("*.json"):
        try:
            reports.append(AnalysisReport.model_validate_json(path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            logger.warning("Skipping unreadable report file %s: %s", path, e)
    reports.sort(key=lambda r: r.analyzed_at, reverse=True)
    return [
        ReportInfo(
            report_id=r.report_id,
            product_url=r.product_url,
            analyzed_at=r.analyzed_at,
            trust_score=r.summary.trust_score,
            analysis_method=r.analysis_method,
        )
        for r in reports
    ]
