import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter

from app.models.analysis import AnalysisReport
from app.models.review import AnalyzeRequest
from app.services import corpus, orchestrator, report_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analyze", tags=["analyze"])

NO_URL = "N/A (reviews provided directly)"
DISCLAIMER = (
    "This analysis is for informational purposes only. "
    "Results are based on pattern recognition and AI analysis."
)


def _run_analysis(request: AnalyzeRequest) -> AnalysisReport:
    """Build the corpus, classify it and wrap the outcome in a report."""
    product_url = str(request.product_url) if request.product_url else None
    reviews = corpus.build_corpus(
        provided=[r.text for r in request.reviews],
        product_url=product_url,
        max_reviews=request.max_reviews,
    )
    run = orchestrator.analyze(reviews)
    return AnalysisReport(
        report_id=uuid.uuid4().hex,
        product_url=product_url or NO_URL,
        analyzed_at=datetime.now(timezone.utc),
        total_reviews_analyzed=len(reviews),
        reviews=run.result.reviews,
        raw_analysis=run.result.raw_analysis,
        summary=run.result.summary,
        analysis_method=run.method,
        disclaimer=DISCLAIMER,
    )


@router.post("", response_model=AnalysisReport, response_model_exclude_none=True)
async def analyze(request: AnalyzeRequest):
    """
    Detect fake reviews for a product.

    1. Build the corpus from provided reviews, the product page, or the demo sample.
    2. Classify with Claude, falling back to pattern-based scoring on failure.
    3. Persist and return the report.
    """
    report = _run_analysis(request)
    report_store.save_report(report)
    logger.info(
        "Analysis %s complete | reviews=%d | trust_score=%s | method=%s",
        report.report_id,
        report.total_reviews_analyzed,
        report.summary.trust_score,
        report.analysis_method.value,
    )
    return report
