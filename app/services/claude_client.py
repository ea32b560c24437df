import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import anthropic
from pydantic import BaseModel, ValidationError

from app.config import settings
from app.errors import SchemaError, ServiceError
from app.models.analysis import AnalysisResult, ReviewVerdict, Summary
from app.models.review import Review
from app.services import aggregator

logger = logging.getLogger(__name__)

_client: anthropic.Anthropic | None = None

_PROMPT_DIR = Path(__file__).parent.parent / "prompts"
_SYSTEM_PROMPT = (_PROMPT_DIR / "system_prompt.txt").read_text(encoding="utf-8").strip()
_CLASSIFICATION_PROMPT_TEMPLATE = (_PROMPT_DIR / "classification_prompt.txt").read_text(
    encoding="utf-8"
)


class FailureKind(str, Enum):
    SERVICE = "service"
    SCHEMA = "schema"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ClassificationOutcome:
    """Either a result or the kind of failure that prevented one."""

    result: AnalysisResult | None = None
    failure: FailureKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None


class _Payload(BaseModel):
    reviews: list[ReviewVerdict] | None = None
    summary: Summary | None = None


def _get_client() -> anthropic.Anthropic:
    global _client
    if _client is None:
        if not settings.anthropic_api_key:
            raise ServiceError("ANTHROPIC_API_KEY is not configured")
        _client = anthropic.Anthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.request_timeout,
            max_retries=0,
        )
    return _client


def build_prompt(reviews: list[Review]) -> str:
    review_texts = "\n".join(
        f'Review {i}: "{review.text}"' for i, review in enumerate(reviews, start=1)
    )
    return _CLASSIFICATION_PROMPT_TEMPLATE.format(review_texts=review_texts)


def extract_json_object(text: str) -> dict:
    """
    Return the first JSON object embedded in ``text``.

    Decoding is attempted at every ``{`` in turn, so prose before or after
    the object is ignored.

    Raises:
        SchemaError: If no position decodes to a JSON object.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(obj, dict):
                return obj
        start = text.find("{", start + 1)
    raise SchemaError("response does not contain a JSON object")


def parse_response(text: str, corpus_size: int) -> AnalysisResult:
    """
    Validate a raw service response against the expected result shape.

    Args:
        text: The full response text.
        corpus_size: Number of reviews that were sent.

    Returns:
        A normal AnalysisResult ordered by review number, or a degraded one
        carrying the raw text when the object has a summary but no reviews.

    Raises:
        SchemaError: If the response cannot be read as either shape.
    """
    try:
        payload = _Payload.model_validate(extract_json_object(text))
    except ValidationError as e:
        raise SchemaError(f"response does not match the expected shape: {e}") from e

    if payload.reviews is None:
        if payload.summary is None:
            raise SchemaError("response has neither reviews nor summary")
        logger.warning("Response has no reviews array, keeping it as a degraded result")
        return AnalysisResult(raw_analysis=text, summary=payload.summary)

    numbers = sorted(v.review_number for v in payload.reviews)
    if numbers != list(range(1, corpus_size + 1)):
        raise SchemaError(
            f"review numbers {numbers} do not cover reviews 1..{corpus_size} exactly once"
        )
    verdicts = sorted(payload.reviews, key=lambda v: v.review_number)
    return AnalysisResult(reviews=verdicts, summary=payload.summary or Summary())


def classify(reviews: list[Review]) -> AnalysisResult:
    """
    Classify the whole corpus with a single Claude request.

    Args:
        reviews: The corpus, in order.

    Returns:
        AnalysisResult as reported by the model, normal or degraded.

    Raises:
        ServiceError: On missing credentials or any API failure.
        SchemaError: If the response cannot be parsed into a result.
    """
    if not reviews:
        return AnalysisResult(reviews=[], summary=aggregator.empty_summary())

    client = _get_client()
    try:
        message = client.messages.create(
            model=settings.model_name,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            system=_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_prompt(reviews)}],
        )
    except anthropic.APIError as e:
        raise ServiceError(f"Claude API error: {e}") from e

    content = "".join(block.text for block in message.content if block.type == "text")
    logger.info(
        "Classified %d reviews | input_tokens=%d | output_tokens=%d",
        len(reviews),
        message.usage.input_tokens,
        message.usage.output_tokens,
    )
    return parse_response(content, len(reviews))


def attempt(reviews: list[Review]) -> ClassificationOutcome:
    """Run :func:`classify` and report its failure as data instead of raising."""
    try:
        return ClassificationOutcome(result=classify(reviews))
    except ServiceError as e:
        return ClassificationOutcome(failure=FailureKind.SERVICE, detail=str(e))
    except SchemaError as e:
        return ClassificationOutcome(failure=FailureKind.SCHEMA, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected error during classification")
        return ClassificationOutcome(failure=FailureKind.UNEXPECTED, detail=repr(e))
