"""
Rule-based review scoring, used whenever the classification service is unusable.

Each rule adds its weight to a review's fake score when all of its conditions
hold. The rule table is plain data: it can be loaded from a JSON file
(``HEURISTIC_RULES_PATH``) or passed to :func:`score` directly.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Callable, Literal, Sequence

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

from app.config import settings
from app.models.analysis import AnalysisResult, ReviewVerdict, Verdict, VerdictLabel
from app.models.review import Review
from app.services import aggregator

logger = logging.getLogger(__name__)

FAKE_THRESHOLD = 30
BASE_CONFIDENCE = 50
MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 95
EXCERPT_LENGTH = 100
NO_PATTERN_REASON = "No suspicious patterns detected"

CANONICAL_PATTERNS = [
    "Excessive punctuation",
    "Generic superlatives",
    "Repetitive patterns",
    "Unusually short reviews",
]

Feature = Literal["excessive_exclamation", "all_caps", "repetitive_words", "sentence_terminator"]


def _excessive_exclamation(text: str, words: list[str]) -> bool:
    return "!!!" in text or text.count("!") > 3


def _all_caps(text: str, words: list[str]) -> bool:
    return text.isupper()


def _repetitive_words(text: str, words: list[str]) -> bool:
    if not words:
        return False
    return len({w.lower() for w in words}) / len(words) < 0.5


def _sentence_terminator(text: str, words: list[str]) -> bool:
    return "." in text


FEATURES: dict[str, Callable[[str, list[str]], bool]] = {
    "excessive_exclamation": _excessive_exclamation,
    "all_caps": _all_caps,
    "repetitive_words": _repetitive_words,
    "sentence_terminator": _sentence_terminator,
}


class HeuristicRule(BaseModel):
    """One row of the rule table. Length and word bounds are inclusive."""

    model_config = ConfigDict(frozen=True)

    tag: str
    weight: int
    pattern: str | None = None
    feature: Feature | None = None
    min_length: int | None = None
    max_length: int | None = None
    min_words: int | None = None
    max_words: int | None = None

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid pattern {value!r}: {e}") from e
        return value

    def matches(self, text: str, words: list[str]) -> bool:
        if self.min_length is not None and len(text) < self.min_length:
            return False
        if self.max_length is not None and len(text) > self.max_length:
            return False
        if self.min_words is not None and len(words) < self.min_words:
            return False
        if self.max_words is not None and len(words) > self.max_words:
            return False
        if self.pattern is not None and not re.search(self.pattern, text, re.IGNORECASE):
            return False
        if self.feature is not None and not FEATURES[self.feature](text, words):
            return False
        return True


DEFAULT_RULES: tuple[HeuristicRule, ...] = (
    HeuristicRule(tag="Excessive exclamation marks", weight=20, feature="excessive_exclamation"),
    HeuristicRule(tag="ALL CAPS text", weight=25, feature="all_caps", min_length=21),
    HeuristicRule(
        tag="Generic superlatives with short length",
        weight=15,
        pattern=r"best|amazing|perfect|excellent",
        max_words=14,
    ),
    HeuristicRule(tag="Repetitive word patterns", weight=30, feature="repetitive_words", min_words=6),
    HeuristicRule(
        tag="Suspiciously short positive review",
        weight=15,
        pattern=r"great|love|best|amazing|perfect",
        max_length=49,
    ),
    HeuristicRule(
        tag="Detailed with balanced opinion (likely genuine)",
        weight=-20,
        pattern=r"but|however|although|though",
        feature="sentence_terminator",
        min_length=151,
    ),
)

_rules_adapter = TypeAdapter(list[HeuristicRule])


def load_rules(path: str | Path) -> list[HeuristicRule]:
    """Read a rule table from a JSON array of rule objects."""
    rules = _rules_adapter.validate_json(Path(path).read_text(encoding="utf-8"))
    logger.info("Loaded %d heuristic rules from %s", len(rules), path)
    return rules


@lru_cache(maxsize=1)
def get_rules() -> tuple[HeuristicRule, ...]:
    if settings.heuristic_rules_path:
        return tuple(load_rules(settings.heuristic_rules_path))
    return DEFAULT_RULES


def fake_score(text: str, rules: Sequence[HeuristicRule] | None = None) -> tuple[int, list[str]]:
    """Return the accumulated fake score and the tags of the rules that fired, in rule order."""
    rules = get_rules() if rules is None else rules
    words = text.split()
    total = 0
    tags: list[str] = []
    for rule in rules:
        if rule.matches(text, words):
            total += rule.weight
            tags.append(rule.tag)
    return total, tags


def score_review(
    review: Review, review_number: int, rules: Sequence[HeuristicRule] | None = None
) -> ReviewVerdict:
    points, tags = fake_score(review.text, rules)
    is_fake = points >= FAKE_THRESHOLD
    reasons = tags or [NO_PATTERN_REASON]
    return ReviewVerdict(
        review_number=review_number,
        verdict=Verdict.FAKE if is_fake else Verdict.GENUINE,
        label=VerdictLabel.LIKELY_FAKE if is_fake else VerdictLabel.LIKELY_GENUINE,
        confidence=min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, BASE_CONFIDENCE + points)),
        reason="; ".join(reasons),
        reasons=reasons,
        excerpt=review.text[:EXCERPT_LENGTH] + "...",
    )


def score(reviews: list[Review], rules: Sequence[HeuristicRule] | None = None) -> AnalysisResult:
    """
    Score every review with the rule table and aggregate the verdicts.

    Args:
        reviews: The corpus, in order. May be empty.
        rules: Rule table to apply instead of the configured one.

    Returns:
        AnalysisResult with one verdict per review and a complete summary.
    """
    verdicts = [score_review(review, i, rules) for i, review in enumerate(reviews, start=1)]
    summary = aggregator.summarize(verdicts, suspicious_patterns=CANONICAL_PATTERNS)
    logger.info(
        "Heuristic scoring flagged %d of %d reviews", summary.fake_count, summary.total_reviews
    )
    return AnalysisResult(reviews=verdicts, summary=summary)
