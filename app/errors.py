class ReviewAnalysisError(Exception):
    """Base class for review analysis failures."""


class ServiceError(ReviewAnalysisError):
    """The classification service could not be reached or refused the request."""


class SchemaError(ReviewAnalysisError):
    """The classification service answered, but not with the expected structure."""


class EmptyCorpusError(ReviewAnalysisError):
    """A statistic was requested over zero reviews."""
