import logging

from fastapi import APIRouter, HTTPException

from app.models.analysis import AnalysisReport, ReportInfo
from app.services import report_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=list[ReportInfo])
async def list_reports():
    """List stored analysis reports, newest first."""
    return report_store.list_reports()


@router.get("/{report_id}", response_model=AnalysisReport, response_model_exclude_none=True)
async def get_report(report_id: str):
    report = report_store.get_report(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail=f"Report '{report_id}' not found.")
    return report
