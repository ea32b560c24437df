from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, HttpUrl
from pydantic.alias_generators import to_camel

from app.config import settings


class ReviewSource(str, Enum):
    PROVIDED = "provided"
    RETRIEVED = "retrieved"
    SAMPLE = "sample"


class Review(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1, max_length=500)
    source: ReviewSource


class ReviewInput(BaseModel):
    text: str


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_url: HttpUrl | None = None
    reviews: list[ReviewInput] = Field(default_factory=list)
    max_reviews: int = Field(default_factory=lambda: settings.max_reviews, ge=1, le=500)
