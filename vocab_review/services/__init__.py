from .review import ReviewOutcome, ReviewService, SessionStartResult

__all__ = ["ReviewOutcome", "ReviewService", "SessionStartResult"]
