"""Selection of due cards and upcoming review horizons."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Iterable, List, Optional, Tuple

from .sm2 import SchedulingState, is_due


DEFAULT_DUE_LIMIT = 50
DEFAULT_HORIZON_DAYS = 7


@dataclass(frozen=True, slots=True)
class Definition:
    """One sense of a vocabulary word with its example sentences."""

    text: str
    examples: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReviewCard:
    """Vocabulary card display data joined with its scheduling snapshot."""

    word: str
    state: SchedulingState
    definitions: Tuple[Definition, ...] = ()
    part_of_speech: Optional[str] = None
    phonetic: Optional[str] = None
    context: Optional[str] = None
    progress_id: Optional[int] = None

    @property
    def card_id(self) -> str:
        return self.state.card_id

    @property
    def ease_factor(self) -> float:
        return self.state.ease_factor

    @property
    def interval(self) -> int:
        return self.state.interval

    @property
    def repetitions(self) -> int:
        return self.state.repetitions

    @property
    def next_review_at(self) -> Optional[datetime]:
        return self.state.next_review_at


@dataclass(slots=True)
class UpcomingCards:
    """Cards grouped by when they come up for review.

    ``week`` overlaps the other two buckets: it holds every card due within
    the horizon, including the ones already listed in ``today`` and
    ``tomorrow``. Do not add the bucket sizes together.
    """

    today: List[ReviewCard] = field(default_factory=list)
    tomorrow: List[ReviewCard] = field(default_factory=list)
    week: List[ReviewCard] = field(default_factory=list)


def end_of_day(moment: datetime) -> datetime:
    """Last representable instant of ``moment``'s calendar day, in its timezone."""
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


def select_due(
    cards: Iterable[ReviewCard],
    now: datetime,
    limit: int = DEFAULT_DUE_LIMIT,
) -> List[ReviewCard]:
    """Return at most ``limit`` due cards, most overdue first."""
    if limit < 0:
        raise ValueError("limit must not be negative.")

    due = [card for card in cards if is_due(card.state, now)]
    # Never-scheduled cards count as the most overdue.
    unscheduled = [card for card in due if card.next_review_at is None]
    scheduled = sorted(
        (card for card in due if card.next_review_at is not None),
        key=lambda card: card.next_review_at,
    )
    return (unscheduled + scheduled)[:limit]


def cards_due_by(cards: Iterable[ReviewCard], moment: datetime) -> List[ReviewCard]:
    """Return the cards that will be due at ``moment``."""
    return [card for card in cards if is_due(card.state, moment)]


def partition_upcoming(
    cards: Iterable[ReviewCard],
    now: datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> UpcomingCards:
    """Group cards into today, tomorrow and the next ``horizon_days`` days."""
    if horizon_days < 0:
        raise ValueError("horizon_days must not be negative.")

    today_end = end_of_day(now)
    tomorrow_end = end_of_day(now + timedelta(days=1))
    horizon_end = end_of_day(now + timedelta(days=horizon_days))

    upcoming = UpcomingCards()
    for card in cards:
        if is_due(card.state, today_end):
            upcoming.today.append(card)
        elif is_due(card.state, tomorrow_end):
            upcoming.tomorrow.append(card)
        if is_due(card.state, horizon_end):
            upcoming.week.append(card)
    return upcoming
