import logging
import math

from app.errors import EmptyCorpusError
from app.models.analysis import AnalysisResult, ReviewVerdict, Summary

logger = logging.getLogger(__name__)

SKEPTICISM_PENALTY = 10
NEUTRAL_TRUST_SCORE = 50

RECOMMENDATION_TRUSTED = "✅ Reviews appear mostly genuine. Safe to trust."
RECOMMENDATION_MIXED = "⚠️ Mixed reviews detected. Read carefully before purchasing."
RECOMMENDATION_WARNING = "❌ High fake review percentage. Be cautious!"
RECOMMENDATION_EMPTY = "No reviews were available to assess."


def fake_percentage(fake_count: int, total: int) -> int:
    """Percentage of fake reviews, rounded half up."""
    if total == 0:
        raise EmptyCorpusError("cannot compute a percentage over zero reviews")
    return math.floor(fake_count / total * 100 + 0.5)


def trust_score(percentage: int) -> int:
    return max(0, 100 - percentage - SKEPTICISM_PENALTY)


def buyer_recommendation(score: int) -> str:
    if score >= 70:
        return RECOMMENDATION_TRUSTED
    if score >= 40:
        return RECOMMENDATION_MIXED
    return RECOMMENDATION_WARNING


def empty_summary() -> Summary:
    return Summary(
        total_reviews=0,
        fake_count=0,
        genuine_count=0,
        fake_percentage=0,
        trust_score=NEUTRAL_TRUST_SCORE,
        suspicious_patterns=[],
        buyer_recommendation=RECOMMENDATION_EMPTY,
    )


def summarize(
    verdicts: list[ReviewVerdict],
    base: Summary | None = None,
    suspicious_patterns: list[str] | None = None,
) -> Summary:
    """
    Build a complete summary from per-review verdicts.

    Counts and the fake percentage always come from the verdicts. The trust
    score, suspicious patterns and recommendation are taken from ``base``
    when it has them, otherwise derived.

    Args:
        verdicts: One verdict per review in the corpus.
        base: Summary reported alongside the verdicts, if any.
        suspicious_patterns: Patterns to report when ``base`` has none.

    Returns:
        Summary with every field set.
    """
    total = len(verdicts)
    fake_count = sum(1 for v in verdicts if v.is_fake)
    try:
        percentage = fake_percentage(fake_count, total)
    except EmptyCorpusError:
        logger.info("No verdicts to aggregate, returning neutral summary")
        return empty_summary()

    base = base or Summary()
    score = base.trust_score if base.trust_score is not None else trust_score(percentage)
    if base.suspicious_patterns is not None:
        patterns = base.suspicious_patterns
    else:
        patterns = list(suspicious_patterns or [])

    return Summary(
        total_reviews=total,
        fake_count=fake_count,
        genuine_count=total - fake_count,
        fake_percentage=percentage,
        trust_score=score,
        suspicious_patterns=patterns,
        buyer_recommendation=base.buyer_recommendation or buyer_recommendation(score),
    )


def finalize(result: AnalysisResult) -> AnalysisResult:
    """Recompute the summary counts from the verdicts; degraded results pass through."""
    if result.degraded:
        return result
    summary = summarize(result.reviews, base=result.summary)
    if result.summary.total_reviews not in (None, summary.total_reviews):
        logger.warning(
            "Reported totalReviews=%s disagrees with %d verdicts, using verdicts",
            result.summary.total_reviews,
            summary.total_reviews,
        )
    return result.model_copy(update={"summary": summary})
