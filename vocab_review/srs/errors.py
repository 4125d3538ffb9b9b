"""Exceptions raised by the spaced-repetition core."""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for scheduling and review-session errors."""


class InvalidQualityError(ReviewError, ValueError):
    """Raised when a response quality falls outside the 0-5 rating scale."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Quality rating must be an integer between 0 and 5, got {value!r}.")
        self.value = value


class SessionStateError(ReviewError):
    """Raised when a review session transition is not allowed in its current state."""


class SessionCompleteError(SessionStateError):
    """Raised when answering a card in a session that has no cards left."""


class EmptyReviewQueueError(ReviewError):
    """Raised when a review session is requested without any due cards."""

    def __init__(self) -> None:
        super().__init__("No cards are due for review; there is no session to start.")
