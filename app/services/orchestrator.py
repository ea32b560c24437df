"""
Two-path classification: Claude first, rule-based scoring as the fallback.

The run is a two-state machine. It starts in ``PRIMARY`` and moves to
``FALLBACK`` on any classification failure; there is no way back. A degraded
Claude result (summary without per-review verdicts) is still a success.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from app.models.analysis import AnalysisMethod, AnalysisResult
from app.models.review import Review
from app.services import aggregator, claude_client, heuristics
from app.services.claude_client import ClassificationOutcome

logger = logging.getLogger(__name__)


class PathState(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class AnalysisRun:
    result: AnalysisResult
    method: AnalysisMethod


def next_state(state: PathState, outcome: ClassificationOutcome) -> PathState:
    if state is PathState.PRIMARY and not outcome.ok:
        return PathState.FALLBACK
    return state


def analyze(reviews: list[Review]) -> AnalysisRun:
    """
    Classify the corpus and return a finalized result. Never raises.

    Args:
        reviews: The finished corpus.

    Returns:
        AnalysisRun with the aggregated result and the path that produced it.
    """
    state = PathState.PRIMARY
    outcome = claude_client.attempt(reviews)
    state = next_state(state, outcome)

    if state is PathState.PRIMARY:
        logger.info("Claude classification succeeded (degraded=%s)", outcome.result.degraded)
        return AnalysisRun(result=aggregator.finalize(outcome.result), method=AnalysisMethod.AI)

    logger.warning(
        "Claude classification failed (%s: %s), using pattern-based fallback",
        outcome.failure.value,
        outcome.detail,
    )
    result = heuristics.score(reviews)
    return AnalysisRun(result=aggregator.finalize(result), method=AnalysisMethod.PATTERN)
