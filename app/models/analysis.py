import math
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Frozen model serialized with camelCase keys, as the service and reports use them."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


def _round_half_up(value):
    if isinstance(value, float) and math.isfinite(value):
        return math.floor(value + 0.5)
    return value


# The service sometimes answers 37.5 where a whole number is expected.
Score = Annotated[int, BeforeValidator(_round_half_up)]


class Verdict(str, Enum):
    FAKE = "FAKE"
    GENUINE = "GENUINE"


class VerdictLabel(str, Enum):
    LIKELY_FAKE = "LIKELY_FAKE"
    LIKELY_GENUINE = "LIKELY_GENUINE"


class AnalysisMethod(str, Enum):
    AI = "AI-powered"
    PATTERN = "Pattern-based + AI"


class ReviewVerdict(CamelModel):
    review_number: int = Field(ge=1)
    verdict: Verdict
    label: VerdictLabel | None = None
    confidence: Score
    reason: str = Field(min_length=1)
    reasons: list[str] = Field(default_factory=list)
    excerpt: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _split_likely_prefix(cls, data):
        # "LIKELY FAKE" keeps its looser certainty as a label over the plain verdict.
        if isinstance(data, dict) and isinstance(data.get("verdict"), str):
            normalized = data["verdict"].strip().upper().replace(" ", "_")
            if normalized.startswith("LIKELY_"):
                data = {**data, "verdict": normalized.removeprefix("LIKELY_"), "label": normalized}
            else:
                data = {**data, "verdict": normalized}
        return data

    @property
    def is_fake(self) -> bool:
        return self.verdict is Verdict.FAKE


class Summary(CamelModel):
    """Aggregate view of a run. Fields stay None only in a degraded, service-provided summary."""

    total_reviews: Score | None = None
    fake_count: Score | None = None
    genuine_count: Score | None = None
    fake_percentage: Score | None = None
    trust_score: Score | None = None
    suspicious_patterns: list[str] | None = None
    buyer_recommendation: str | None = None


class AnalysisResult(CamelModel):
    reviews: list[ReviewVerdict] | None = None
    raw_analysis: str | None = None
    summary: Summary

    @property
    def degraded(self) -> bool:
        return self.reviews is None


class AnalysisReport(CamelModel):
    report_id: str
    product_url: str
    analyzed_at: datetime
    total_reviews_analyzed: int
    reviews: list[ReviewVerdict] | None = None
    raw_analysis: str | None = None
    summary: Summary
    analysis_method: AnalysisMethod
    disclaimer: str


class ReportInfo(CamelModel):
    report_id: str
    product_url: str
    analyzed_at: datetime
    trust_score: Score | None = None
    analysis_method: AnalysisMethod
