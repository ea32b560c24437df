import logging
from typing import Callable

from app.config import settings
from app.models.review import Review, ReviewSource
from app.services import scraper

logger = logging.getLogger(__name__)

REVIEW_TEXT_LIMIT = 500

SAMPLE_REVIEWS = [
    "This product is amazing! Best purchase ever! 5 stars! Highly recommend to everyone! Buy it now!",
    "I've been using this for 3 months now. The quality is decent for the price. Battery life could be better but overall satisfied with my purchase.",
    "BEST PRODUCT EVER!!! BUY NOW!!! AMAZING!!! 5 STARS!!! PERFECT!!!",
    "Received the item last week. Packaging was good. The product works as described. Took a star off because shipping was slow.",
    "Great great great! Love love love! Best best best! Amazing amazing amazing! Perfect perfect perfect!",
    "Not bad for the price. I was skeptical at first but it does what it says. The instructions could be clearer though.",
    "Excellent product excellent service excellent quality excellent everything! 5 stars!",
    "Used this for my home office setup. It's functional but nothing special. Does the job adequately.",
]


def from_provided(texts: list[str], max_reviews: int) -> list[Review]:
    reviews = []
    for text in texts:
        text = text.strip()
        if text:
            reviews.append(Review(text=text[:REVIEW_TEXT_LIMIT], source=ReviewSource.PROVIDED))
    return reviews[:max_reviews]


def from_retrieved(texts: list[str], max_reviews: int) -> list[Review]:
    """Keep retrieved texts long enough to be a review, clipped to the text limit."""
    reviews = []
    for text in texts:
        text = text.strip()
        if len(text) > settings.min_review_length:
            reviews.append(Review(text=text[:REVIEW_TEXT_LIMIT], source=ReviewSource.RETRIEVED))
    return reviews[:max_reviews]


def sample_corpus() -> list[Review]:
    return [Review(text=text, source=ReviewSource.SAMPLE) for text in SAMPLE_REVIEWS]


def build_corpus(
    provided: list[str],
    product_url: str | None,
    max_reviews: int,
    retrieve: Callable[[str, int], list[str]] | None = None,
) -> list[Review]:
    """
    Assemble the corpus for one run.

    Provided reviews win; otherwise reviews are retrieved from ``product_url``.
    When both yield nothing, the demonstration sample is used so the pipeline
    always has input.

    Args:
        provided: Review texts supplied with the request.
        product_url: Page to retrieve reviews from when none are provided.
        max_reviews: Upper bound on the corpus size.
        retrieve: Callable returning raw review texts for a URL. Defaults
            to the selenium scraper.

    Returns:
        The finished, immutable list of reviews.
    """
    reviews = from_provided(provided, max_reviews)
    if reviews:
        logger.info("Using %d provided reviews", len(reviews))
        return reviews

    if product_url:
        retrieve = retrieve or scraper.scrape_reviews
        try:
            reviews = from_retrieved(retrieve(product_url, max_reviews), max_reviews)
        except Exception as e:
            logger.warning("Could not retrieve reviews from %s: %s", product_url, e)
        if reviews:
            logger.info("Using %d retrieved reviews", len(reviews))
            return reviews

    logger.info("No reviews available, using sample reviews for demonstration")
    return sample_corpus()
