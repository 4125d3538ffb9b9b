"""Spaced-repetition scheduling helpers based on the SM-2 algorithm."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from .errors import InvalidQualityError


DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
PASSING_QUALITY = 3
MIN_QUALITY = 0
MAX_QUALITY = 5

# 5 perfect recall, 4 correct after hesitation, 3 correct with serious difficulty,
# 2 incorrect but the answer seemed easy, 1 incorrect but recalled afterwards, 0 blackout.
QUALITY_LABELS = {
    0: "Again",
    1: "Hard",
    2: "Hard",
    3: "Good",
    4: "Good",
    5: "Easy",
}

ResponseButton = Literal["again", "hard", "good", "easy"]

_BUTTON_QUALITIES = {
    "again": 0,
    "hard": 2,
    "good": 4,
    "easy": 5,
}


@dataclass(frozen=True, slots=True)
class SchedulingState:
    """Spaced-repetition progress of one user for one vocabulary card."""

    card_id: str
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    next_review_at: Optional[datetime] = None
    last_review_at: Optional[datetime] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_quality(value: object) -> int:
    """Return ``value`` if it is a valid quality rating, otherwise raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQualityError(value)
    if value < MIN_QUALITY or value > MAX_QUALITY:
        raise InvalidQualityError(value)
    return value


def is_passing(quality: int) -> bool:
    """Whether a quality rating counts as a correct answer."""
    return validate_quality(quality) >= PASSING_QUALITY


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _next_ease_factor(ease_factor: float, quality: int) -> float:
    penalty = MAX_QUALITY - quality
    updated = ease_factor + (0.1 - penalty * (0.08 + penalty * 0.02))
    return max(MIN_EASE_FACTOR, updated)


def calculate_next_schedule(
    state: SchedulingState,
    quality: int,
    *,
    now: Optional[datetime] = None,
) -> SchedulingState:
    """Return the card's schedule after a review rated ``quality``.

    The prior ease factor drives the interval growth; the ease factor itself
    is updated on every review, passing or failing, and never drops below
    ``MIN_EASE_FACTOR``. Fields other than the scheduling numbers are carried
    over from ``state``.
    """
    quality = validate_quality(quality)
    if now is None:
        now = _utcnow()

    if quality < PASSING_QUALITY:
        repetitions = 0
        interval = FIRST_INTERVAL_DAYS
    else:
        repetitions = state.repetitions + 1
        if repetitions == 1:
            interval = FIRST_INTERVAL_DAYS
        elif repetitions == 2:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = max(1, _round_half_up(state.interval * state.ease_factor))

    return replace(
        state,
        ease_factor=_next_ease_factor(state.ease_factor, quality),
        interval=interval,
        repetitions=repetitions,
        next_review_at=now + timedelta(days=interval),
        last_review_at=now,
    )


def initialize_state(card_id: str, *, now: Optional[datetime] = None) -> SchedulingState:
    """Return the schedule of a card that has just entered the review rotation."""
    if now is None:
        now = _utcnow()
    return SchedulingState(
        card_id=card_id,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval=0,
        repetitions=0,
        next_review_at=now,
        last_review_at=None,
    )


def is_due(state: SchedulingState, now: datetime) -> bool:
    """A card is due once its review time has been reached."""
    if state.next_review_at is None:
        return True
    return now >= state.next_review_at


def days_until_due(state: SchedulingState, now: datetime) -> int:
    """Whole days until the card is due, rounded up; 0 for due cards."""
    if state.next_review_at is None:
        return 0
    remaining = (state.next_review_at - now).total_seconds() / timedelta(days=1).total_seconds()
    return max(0, math.ceil(remaining))


def response_button_to_quality(button: ResponseButton) -> int:
    """Map a review button label to its quality rating."""
    try:
        return _BUTTON_QUALITIES[button.strip().lower()]
    except (AttributeError, KeyError):
        raise InvalidQualityError(button) from None


def quality_from_response(was_correct: bool, response_time_ms: float) -> int:
    """Estimate a quality rating from answer correctness and response time."""
    if not was_correct:
        return 1
    if response_time_ms < 3000:
        return 5
    if response_time_ms < 10000:
        return 4
    return 3
