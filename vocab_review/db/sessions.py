"""Helpers for storing study session summaries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from . import StudySession, as_utc


async def create_study_session(
    session: AsyncSession,
    user_id: str,
    collection_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> StudySession:
    """Open a study session record for the user."""
    if now is None:
        now = datetime.now(timezone.utc)

    record = StudySession(
        user_id=user_id,
        collection_id=collection_id,
        started_at=as_utc(now),
        cards_reviewed=0,
        cards_correct=0,
    )
    session.add(record)
    await session.flush()
    return record


async def complete_study_session(
    session: AsyncSession,
    session_id: str,
    cards_reviewed: int,
    cards_correct: int,
    now: Optional[datetime] = None,
) -> Optional[StudySession]:
    """Store the final counts of a study session; returns ``None`` for unknown ids."""
    record = await session.get(StudySession, session_id)
    if record is None:
        return None

    if now is None:
        now = datetime.now(timezone.utc)

    record.completed_at = as_utc(now)
    record.cards_reviewed = cards_reviewed
    record.cards_correct = cards_correct
    await session.flush()
    return record


async def get_study_sessions(
    session: AsyncSession,
    user_id: str,
    limit: int = 10,
) -> list[StudySession]:
    """Return the user's most recent study sessions, newest first."""
    stmt = (
        select(StudySession)
        .where(StudySession.user_id == user_id)
        .order_by(StudySession.started_at.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
