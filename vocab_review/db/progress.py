"""Persistence of spaced-repetition progress for user cards."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from vocab_review.srs.queue import Definition, ReviewCard, end_of_day
from vocab_review.srs.sm2 import (
    DEFAULT_EASE_FACTOR,
    PASSING_QUALITY,
    SchedulingState,
    is_due,
    validate_quality,
)

from . import Card, ReviewLog, SrsProgress, as_utc


@dataclass(slots=True)
class UserStats:
    """Aggregated review metrics for a user."""

    user_id: str
    total_cards: int
    cards_due_today: int
    total_reviews: int
    accuracy: int


def to_scheduling_state(progress: SrsProgress) -> SchedulingState:
    """Convert a stored progress row into a scheduling state."""
    return SchedulingState(
        card_id=progress.card_id,
        ease_factor=progress.ease_factor,
        interval=progress.interval_days,
        repetitions=progress.repetitions,
        next_review_at=as_utc(progress.next_review_at),
        last_review_at=as_utc(progress.last_review_at),
    )


def _to_definitions(raw: object) -> tuple[Definition, ...]:
    definitions = []
    for item in raw or []:
        if not isinstance(item, dict) or not item.get("text"):
            continue
        examples = tuple(str(example) for example in item.get("examples") or [])
        definitions.append(Definition(text=str(item["text"]), examples=examples))
    return tuple(definitions)


def to_review_card(progress: SrsProgress) -> ReviewCard:
    """Project a progress row and its card into a review snapshot."""
    card = progress.card
    return ReviewCard(
        word=card.word,
        state=to_scheduling_state(progress),
        definitions=_to_definitions(card.definitions),
        part_of_speech=card.part_of_speech,
        phonetic=card.phonetic,
        context=card.context,
        progress_id=progress.id,
    )


async def ensure_progress(
    session: AsyncSession,
    user_id: str,
    card_id: str,
    now: Optional[datetime] = None,
) -> tuple[SrsProgress, bool]:
    """Put a card on the user's review schedule unless it is already there."""
    existing = await get_progress(session, user_id, card_id)
    if existing is not None:
        return existing, False

    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    progress = SrsProgress(
        user_id=user_id,
        card_id=card_id,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval_days=0,
        repetitions=0,
        next_review_at=now,
        last_review_at=None,
        total_reviews=0,
        correct_reviews=0,
        incorrect_reviews=0,
    )
    session.add(progress)
    await session.flush()
    return progress, True


async def get_progress(
    session: AsyncSession,
    user_id: str,
    card_id: str,
    *,
    for_update: bool = False,
) -> Optional[SrsProgress]:
    """Return the user's progress row for a card, if any."""
    stmt = select(SrsProgress).where(
        SrsProgress.user_id == user_id,
        SrsProgress.card_id == card_id,
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return result.scalars().first()


async def load_review_cards(
    session: AsyncSession,
    user_id: str,
    collection_id: Optional[str] = None,
) -> list[ReviewCard]:
    """Return every scheduled card of a user, optionally limited to one collection."""
    stmt = (
        select(SrsProgress)
        .join(SrsProgress.card)
        .options(selectinload(SrsProgress.card))
        .where(SrsProgress.user_id == user_id)
        .order_by(SrsProgress.next_review_at, SrsProgress.id)
    )
    if collection_id is not None:
        stmt = stmt.where(Card.collection_id == collection_id)

    result = await session.execute(stmt)
    return [to_review_card(progress) for progress in result.scalars().all()]


async def record_review(
    session: AsyncSession,
    progress: SrsProgress,
    schedule: SchedulingState,
    quality: int,
    now: Optional[datetime] = None,
) -> None:
    """Persist a computed schedule and the answer that produced it."""
    quality = validate_quality(quality)
    if schedule.card_id != progress.card_id:
        raise ValueError(
            f"Schedule for card {schedule.card_id} cannot be stored on progress of card {progress.card_id}."
        )
    if now is None:
        now = schedule.last_review_at or datetime.now(timezone.utc)
    now = as_utc(now)

    progress.ease_factor = schedule.ease_factor
    progress.interval_days = schedule.interval
    progress.repetitions = schedule.repetitions
    progress.next_review_at = as_utc(schedule.next_review_at)
    progress.last_review_at = now
    progress.total_reviews += 1
    if quality >= PASSING_QUALITY:
        progress.correct_reviews += 1
    else:
        progress.incorrect_reviews += 1
    progress.updated_at = now

    session.add(
        ReviewLog(
            progress_id=progress.id,
            quality=quality,
            interval_days=schedule.interval,
            ease_factor=schedule.ease_factor,
            reviewed_at=now,
        )
    )
    await session.flush()


async def get_user_stats(
    session: AsyncSession,
    user_id: str,
    now: Optional[datetime] = None,
) -> UserStats:
    """Return card counts and overall answer accuracy for a user."""
    if now is None:
        now = datetime.now(timezone.utc)

    total_cards = await session.scalar(
        select(func.count()).select_from(Card).where(Card.user_id == user_id)
    )

    result = await session.execute(select(SrsProgress).where(SrsProgress.user_id == user_id))
    rows = result.scalars().all()

    today_end = end_of_day(now)
    cards_due_today = sum(1 for row in rows if is_due(to_scheduling_state(row), today_end))
    total_reviews = sum(row.total_reviews for row in rows)
    correct_reviews = sum(row.correct_reviews for row in rows)
    accuracy = round(correct_reviews / total_reviews * 100) if total_reviews else 0

    return UserStats(
        user_id=user_id,
        total_cards=total_cards or 0,
        cards_due_today=cards_due_today,
        total_reviews=total_reviews,
        accuracy=accuracy,
    )
