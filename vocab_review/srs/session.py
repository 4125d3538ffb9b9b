"""Review session state machine driving a single study sitting."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from .errors import EmptyReviewQueueError, SessionCompleteError, SessionStateError
from .queue import ReviewCard
from .sm2 import DEFAULT_EASE_FACTOR, PASSING_QUALITY, validate_quality


SKIP_QUALITY = 1


class SessionStatus(str, enum.Enum):
    """Lifecycle state of a review session; there is no way back from COMPLETE."""

    ACTIVE = "active"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class ReviewSession:
    """Immutable snapshot of a study sitting; transitions return a new value."""

    session_id: str
    user_id: str
    cards: Tuple[ReviewCard, ...]
    started_at: datetime
    collection_id: Optional[str] = None
    current_index: int = 0
    correct_answers: int = 0
    completed_at: Optional[datetime] = None

    @property
    def total_cards(self) -> int:
        return len(self.cards)

    @property
    def remaining(self) -> int:
        return len(self.cards) - self.current_index

    @property
    def status(self) -> SessionStatus:
        if self.current_index >= len(self.cards):
            return SessionStatus.COMPLETE
        return SessionStatus.ACTIVE


@dataclass(frozen=True, slots=True)
class ReviewStats:
    """Aggregate results of a review session."""

    total_cards: int
    cards_reviewed: int
    correct_answers: int
    accuracy: float
    avg_ease_factor: float


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def start_session(
    cards: Iterable[ReviewCard],
    *,
    user_id: str,
    collection_id: Optional[str] = None,
    session_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ReviewSession:
    """Build a new session over a snapshot of the due cards."""
    snapshot = tuple(cards)
    if not snapshot:
        raise EmptyReviewQueueError()
    if now is None:
        now = _utcnow()
    return ReviewSession(
        session_id=session_id or str(uuid.uuid4()),
        user_id=user_id,
        collection_id=collection_id,
        cards=snapshot,
        started_at=now,
    )


def is_session_complete(session: ReviewSession) -> bool:
    return session.status is SessionStatus.COMPLETE


def current_card(session: ReviewSession) -> Optional[ReviewCard]:
    """Return the card under the cursor, or ``None`` once the session is complete."""
    if is_session_complete(session):
        return None
    return session.cards[session.current_index]


def submit_response(
    session: ReviewSession,
    quality: int,
    *,
    now: Optional[datetime] = None,
) -> ReviewSession:
    """Record an answer for the current card and move the cursor forward.

    Only progression is tracked here; the card's schedule is updated by the
    caller with :func:`vocab_review.srs.sm2.calculate_next_schedule`. Reaching
    the last card completes the session.
    """
    quality = validate_quality(quality)
    if is_session_complete(session):
        raise SessionCompleteError(f"Review session {session.session_id} has no cards left to answer.")

    correct_answers = session.correct_answers
    if quality >= PASSING_QUALITY:
        correct_answers += 1

    advanced = replace(
        session,
        current_index=session.current_index + 1,
        correct_answers=correct_answers,
    )
    if is_session_complete(advanced):
        return complete_session(advanced, now=now)
    return advanced


def skip_card(session: ReviewSession, *, now: Optional[datetime] = None) -> ReviewSession:
    """Skip the current card; a skip is scored as a failed recall."""
    return submit_response(session, SKIP_QUALITY, now=now)


def complete_session(session: ReviewSession, *, now: Optional[datetime] = None) -> ReviewSession:
    """Stamp the completion time of a session whose cursor reached the end."""
    if not is_session_complete(session):
        raise SessionStateError(
            f"Review session {session.session_id} still has {session.remaining} card(s) to review."
        )
    if session.completed_at is not None:
        return session
    if now is None:
        now = _utcnow()
    return replace(session, completed_at=now)


def compute_stats(session: ReviewSession) -> ReviewStats:
    """Summarise a session.

    ``avg_ease_factor`` uses the ease factors the cards had when the session
    started, not the values written back after each answer.
    """
    total_cards = len(session.cards)
    if total_cards:
        accuracy = session.correct_answers / total_cards * 100
        avg_ease_factor = sum(card.ease_factor for card in session.cards) / total_cards
    else:
        accuracy = 0.0
        avg_ease_factor = DEFAULT_EASE_FACTOR

    return ReviewStats(
        total_cards=total_cards,
        cards_reviewed=session.current_index,
        correct_answers=session.correct_answers,
        accuracy=accuracy,
        avg_ease_factor=avg_ease_factor,
    )
