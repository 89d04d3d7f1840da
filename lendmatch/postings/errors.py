from __future__ import annotations


class PostingError(Exception):
    """Base class for lifecycle failures. The failed operation has no effect."""


class InvalidTimeWindow(PostingError, ValueError):
    pass


class NotActive(PostingError):
    pass


class CannotDeleteActive(PostingError):
    pass


class PostingNotFound(PostingError, KeyError):
    def __init__(self, posting_id: str) -> None:
        super().__init__(f"Posting not found: {posting_id}")
        self.posting_id = posting_id

    def __str__(self) -> str:
        return self.args[0]


class MatchValidationError(Exception):
    """The model response as a whole cannot be trusted.

    Raised for the entire batch; no partial result is ever returned.
    """

    def __init__(self, posting_id: str, message: str) -> None:
        super().__init__(message)
        self.posting_id = posting_id


class UnknownPostingId(MatchValidationError):
    pass


class StalePosting(MatchValidationError):
    pass


class BelowRelevanceThreshold(MatchValidationError):
    def __init__(self, posting_id: str, score: float, threshold: float) -> None:
        super().__init__(
            posting_id,
            f"Posting {posting_id} scored {score:g}, below minimum relevance threshold {threshold:g}.",
        )
        self.score = score
        self.threshold = threshold


class ModelUnavailableError(RuntimeError):
    """No text-generation provider is configured."""
