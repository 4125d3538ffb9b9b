"""Coordinates review sessions between the scheduling core and the database."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vocab_review.db import StudySession
from vocab_review.db.cards import CardPayload, get_or_create_card
from vocab_review.db.progress import (
    UserStats,
    get_progress,
    get_user_stats,
    load_review_cards,
    record_review,
    to_scheduling_state,
)
from vocab_review.db.sessions import complete_study_session, create_study_session, get_study_sessions
from vocab_review.srs.errors import SessionCompleteError
from vocab_review.srs.queue import (
    DEFAULT_DUE_LIMIT,
    DEFAULT_HORIZON_DAYS,
    ReviewCard,
    UpcomingCards,
    partition_upcoming,
    select_due,
)
from vocab_review.srs.session import (
    SKIP_QUALITY,
    ReviewSession,
    ReviewStats,
    compute_stats,
    current_card,
    is_session_complete,
    start_session,
    submit_response,
)
from vocab_review.srs.sm2 import SchedulingState, calculate_next_schedule, validate_quality


LOGGER = logging.getLogger(__name__)

ALL_CAUGHT_UP = "All caught up: no cards are due for review."
START_FAILED_MESSAGE = "Could not start a review session, please try again."
RECORD_FAILED_MESSAGE = "Could not record your answer, please try again."
SUMMARY_FAILED_MESSAGE = "Your answers were saved, but the session summary could not be stored."
MISSING_PROGRESS_MESSAGE = "This card is no longer scheduled for review."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SessionStartResult:
    """Outcome of trying to begin a study sitting."""

    session: Optional[ReviewSession]
    reason: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def started(self) -> bool:
        return self.session is not None


@dataclass(slots=True)
class ReviewOutcome:
    """Result of answering (or skipping) the current card of a session."""

    session: ReviewSession
    recorded: bool
    schedule: Optional[SchedulingState] = None
    stats: Optional[ReviewStats] = None
    error: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return is_session_complete(self.session)


class ReviewService:
    """Entry point the presentation layer uses to drive study sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        due_limit: int = DEFAULT_DUE_LIMIT,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._session_factory = session_factory
        self._due_limit = due_limit
        self._horizon_days = horizon_days
        self._clock = clock or _utcnow

    async def enroll_card(
        self,
        user_id: str,
        payload: CardPayload,
        collection_id: Optional[str] = None,
    ) -> tuple[str, bool]:
        """Store a card for the user and schedule it for immediate review."""
        async with self._session_factory() as session:
            async with session.begin():
                card, created = await get_or_create_card(
                    session, user_id, payload, collection_id=collection_id, now=self._clock()
                )
        return card.id, created

    async def get_due_cards(
        self,
        user_id: str,
        collection_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[ReviewCard]:
        """Return the cards the user should review now, most overdue first."""
        async with self._session_factory() as session:
            cards = await load_review_cards(session, user_id, collection_id)
        return select_due(cards, self._clock(), self._due_limit if limit is None else limit)

    async def get_upcoming(
        self,
        user_id: str,
        collection_id: Optional[str] = None,
        horizon_days: Optional[int] = None,
    ) -> UpcomingCards:
        """Return the user's cards grouped by when they come up for review."""
        async with self._session_factory() as session:
            cards = await load_review_cards(session, user_id, collection_id)
        horizon = self._horizon_days if horizon_days is None else horizon_days
        return partition_upcoming(cards, self._clock(), horizon)

    async def get_stats(self, user_id: str) -> UserStats:
        async with self._session_factory() as session:
            return await get_user_stats(session, user_id, now=self._clock())

    async def get_history(self, user_id: str, limit: int = 10) -> list[StudySession]:
        async with self._session_factory() as session:
            return await get_study_sessions(session, user_id, limit=limit)

    async def start(self, user_id: str, collection_id: Optional[str] = None) -> SessionStartResult:
        """Begin a study sitting over the user's currently due cards."""
        try:
            due_cards = await self.get_due_cards(user_id, collection_id)
        except SQLAlchemyError:
            LOGGER.exception("Failed to load due cards for user %s.", user_id)
            return SessionStartResult(session=None, errors=[START_FAILED_MESSAGE])

        if not due_cards:
            LOGGER.info("No cards due for user %s.", user_id)
            return SessionStartResult(session=None, reason=ALL_CAUGHT_UP)

        now = self._clock()
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    record = await create_study_session(session, user_id, collection_id, now=now)
        except SQLAlchemyError:
            LOGGER.exception("Failed to create a study session for user %s.", user_id)
            return SessionStartResult(session=None, errors=[START_FAILED_MESSAGE])

        review_session = start_session(
            due_cards,
            user_id=user_id,
            collection_id=collection_id,
            session_id=record.id,
            now=now,
        )
        LOGGER.info(
            "Started review session %s for user %s with %d card(s).",
            review_session.session_id,
            user_id,
            review_session.total_cards,
        )
        return SessionStartResult(session=review_session)

    async def submit(self, review_session: ReviewSession, quality: int) -> ReviewOutcome:
        """Record an answer for the current card and advance the session.

        Invalid ratings and answers on a finished session raise. Storage
        failures leave the session where it was and report an error message
        so the answer can be submitted again. A card whose schedule no longer
        exists is passed over with ``recorded=False``.
        """
        quality = validate_quality(quality)
        card = current_card(review_session)
        if card is None:
            raise SessionCompleteError(
                f"Review session {review_session.session_id} has no cards left to answer."
            )

        now = self._clock()
        try:
            schedule = await self._store_answer(review_session.user_id, card, quality, now)
        except SQLAlchemyError:
            LOGGER.exception(
                "Failed to record review of card %s for user %s.", card.card_id, review_session.user_id
            )
            return ReviewOutcome(session=review_session, recorded=False, error=RECORD_FAILED_MESSAGE)

        recorded = schedule is not None
        error: Optional[str] = None
        if not recorded:
            # The card was deleted after the session started; move past it.
            LOGGER.warning(
                "No schedule found for card %s of user %s.", card.card_id, review_session.user_id
            )
            error = MISSING_PROGRESS_MESSAGE

        advanced = submit_response(review_session, quality, now=now)
        if not is_session_complete(advanced):
            return ReviewOutcome(session=advanced, recorded=recorded, schedule=schedule, error=error)

        stats = compute_stats(advanced)
        error = await self._store_summary(advanced, stats) or error
        LOGGER.info(
            "Completed review session %s: %d/%d correct.",
            advanced.session_id,
            stats.correct_answers,
            stats.total_cards,
        )
        return ReviewOutcome(
            session=advanced, recorded=recorded, schedule=schedule, stats=stats, error=error
        )

    async def skip(self, review_session: ReviewSession) -> ReviewOutcome:
        """Skip the current card, scoring it as a failed recall."""
        return await self.submit(review_session, SKIP_QUALITY)

    async def _store_answer(
        self,
        user_id: str,
        card: ReviewCard,
        quality: int,
        now: datetime,
    ) -> Optional[SchedulingState]:
        async with self._session_factory() as session:
            async with session.begin():
                progress = await get_progress(session, user_id, card.card_id, for_update=True)
                if progress is None:
                    return None
                schedule = calculate_next_schedule(to_scheduling_state(progress), quality, now=now)
                await record_review(session, progress, schedule, quality, now=now)

        LOGGER.debug(
            "Card %s rescheduled: interval=%d ease=%.2f repetitions=%d.",
            card.card_id,
            schedule.interval,
            schedule.ease_factor,
            schedule.repetitions,
        )
        return schedule

    async def _store_summary(self, review_session: ReviewSession, stats: ReviewStats) -> Optional[str]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    record = await complete_study_session(
                        session,
                        review_session.session_id,
                        cards_reviewed=stats.cards_reviewed,
                        cards_correct=stats.correct_answers,
                        now=review_session.completed_at,
                    )
        except SQLAlchemyError:
            LOGGER.exception("Failed to store summary of review session %s.", review_session.session_id)
            return SUMMARY_FAILED_MESSAGE

        if record is None:
            LOGGER.warning("Study session %s was not found; summary not stored.", review_session.session_id)
        return None
