"""Helpers for storing vocabulary cards and collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vocab_review.srs.queue import Definition

from . import Card, Collection, ReviewLog, SrsProgress
from .progress import ensure_progress


def _strip(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


@dataclass(slots=True)
class CardPayload:
    """Definition of a vocabulary card that may be persisted or re-used."""

    word: str
    definitions: Sequence[Definition] = field(default_factory=tuple)
    part_of_speech: Optional[str] = None
    phonetic: Optional[str] = None
    context: Optional[str] = None

    def normalized(self) -> "CardPayload":
        """Return a payload with whitespace stripped and blank definitions dropped."""
        definitions = []
        for definition in self.definitions:
            text = definition.text.strip()
            if not text:
                continue
            examples = tuple(example.strip() for example in definition.examples if example.strip())
            definitions.append(Definition(text=text, examples=examples))
        return CardPayload(
            word=self.word.strip(),
            definitions=tuple(definitions),
            part_of_speech=_strip(self.part_of_speech),
            phonetic=_strip(self.phonetic),
            context=_strip(self.context),
        )

    def definitions_json(self) -> list[dict[str, Any]]:
        return [
            {"text": definition.text, "examples": list(definition.examples)}
            for definition in self.definitions
        ]


async def create_collection(
    session: AsyncSession,
    user_id: str,
    name: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Collection:
    """Create a named collection for the user."""
    name = name.strip()
    if not name:
        raise ValueError("Collection name must not be empty.")

    collection = Collection(
        user_id=user_id,
        name=name,
        description=_strip(description),
        color=_strip(color),
    )
    session.add(collection)
    await session.flush()
    return collection


async def get_or_create_card(
    session: AsyncSession,
    user_id: str,
    payload: CardPayload,
    collection_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> tuple[Card, bool]:
    """Fetch the user's card for a word or create it, putting it on the review schedule."""
    normalized = payload.normalized()
    if not normalized.word:
        raise ValueError("Card word must not be empty.")

    stmt = select(Card).where(
        Card.user_id == user_id,
        Card.word == normalized.word,
        Card.part_of_speech.is_(None)
        if normalized.part_of_speech is None
        else Card.part_of_speech == normalized.part_of_speech,
    )
    result = await session.execute(stmt)
    card = result.scalars().first()

    if card is not None:
        # Fill in details the stored card is missing.
        has_changes = False
        if normalized.definitions and not card.definitions:
            card.definitions = normalized.definitions_json()
            has_changes = True
        if normalized.phonetic and not card.phonetic:
            card.phonetic = normalized.phonetic
            has_changes = True
        if collection_id and not card.collection_id:
            card.collection_id = collection_id
            has_changes = True
        if has_changes:
            await session.flush()
        await ensure_progress(session, user_id, card.id, now=now)
        return card, False

    card = Card(
        user_id=user_id,
        collection_id=collection_id,
        word=normalized.word,
        part_of_speech=normalized.part_of_speech,
        phonetic=normalized.phonetic,
        definitions=normalized.definitions_json(),
        context=normalized.context,
    )
    session.add(card)
    await session.flush()
    await ensure_progress(session, user_id, card.id, now=now)
    return card, True


async def delete_card(session: AsyncSession, user_id: str, card_id: str) -> bool:
    """Delete a card together with its schedule and review history."""
    card = await session.get(Card, card_id)
    if card is None or card.user_id != user_id:
        return False

    # SQLite only cascades when foreign keys are switched on, so clear children explicitly.
    progress_ids = select(SrsProgress.id).where(SrsProgress.card_id == card_id)
    await session.execute(delete(ReviewLog).where(ReviewLog.progress_id.in_(progress_ids)))
    await session.execute(delete(SrsProgress).where(SrsProgress.card_id == card_id))
    await session.delete(card)
    await session.flush()
    return True
