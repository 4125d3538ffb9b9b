"""Spaced-repetition core: SM-2 scheduling, due queue and review sessions."""

from .errors import (
    EmptyReviewQueueError,
    InvalidQualityError,
    ReviewError,
    SessionCompleteError,
    SessionStateError,
)
from .queue import (
    DEFAULT_DUE_LIMIT,
    DEFAULT_HORIZON_DAYS,
    Definition,
    ReviewCard,
    UpcomingCards,
    partition_upcoming,
    select_due,
)
from .session import (
    SKIP_QUALITY,
    ReviewSession,
    ReviewStats,
    SessionStatus,
    complete_session,
    compute_stats,
    current_card,
    is_session_complete,
    skip_card,
    start_session,
    submit_response,
)
from .sm2 import (
    SchedulingState,
    calculate_next_schedule,
    days_until_due,
    initialize_state,
    is_due,
)

__all__ = [
    "DEFAULT_DUE_LIMIT",
    "DEFAULT_HORIZON_DAYS",
    "Definition",
    "EmptyReviewQueueError",
    "InvalidQualityError",
    "ReviewCard",
    "ReviewError",
    "ReviewSession",
    "ReviewStats",
    "SKIP_QUALITY",
    "SchedulingState",
    "SessionCompleteError",
    "SessionStateError",
    "SessionStatus",
    "UpcomingCards",
    "calculate_next_schedule",
    "complete_session",
    "compute_stats",
    "current_card",
    "days_until_due",
    "initialize_state",
    "is_due",
    "is_session_complete",
    "partition_upcoming",
    "select_due",
    "skip_card",
    "start_session",
    "submit_response",
]
