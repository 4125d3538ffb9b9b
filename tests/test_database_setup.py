from collections import deque
from typing import List, Tuple

import pytest
from sqlalchemy import text

from vocab_review.app import runtime
from vocab_review.app.settings import AppSettings
from vocab_review.db import get_database_url, get_engine, run_migrations_if_needed
from vocab_review.services import ReviewService


def test_run_migrations_if_needed_invokes_upgrade(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[Tuple[object, str]] = []

    def fake_upgrade(config: object, target: str) -> None:
        calls.append((config, target))

    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("RUN_MIGRATIONS_ON_STARTUP", "true")
    monkeypatch.setattr("vocab_review.db.command.upgrade", fake_upgrade)

    run_migrations_if_needed()

    assert calls and calls[0][1] == "head"


def test_run_migrations_if_needed_skips_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("RUN_MIGRATIONS_ON_STARTUP", "false")

    calls: deque[str] = deque()

    def fake_upgrade(_: object, target: str) -> None:
        calls.append(target)

    monkeypatch.setattr("vocab_review.db.command.upgrade", fake_upgrade)

    run_migrations_if_needed()

    assert not calls


def test_database_url_is_required_and_expanded(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        get_database_url()

    monkeypatch.setenv("DB_FILE", "reviews.db")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///$DB_FILE")
    assert get_database_url() == "sqlite+aiosqlite:///reviews.db"


def test_build_review_service_runs_migrations_first(monkeypatch: pytest.MonkeyPatch) -> None:
    events: List[str] = []
    factory = object()

    monkeypatch.setattr(runtime, "run_migrations_if_needed", lambda: events.append("migrate"))
    monkeypatch.setattr(runtime, "get_session_factory", lambda: factory)

    settings = AppSettings(
        app_name="Vocab Review",
        app_env="test",
        log_level="WARNING",
        review_batch_limit=20,
        upcoming_horizon_days=3,
    )
    service = runtime.build_review_service(settings)

    assert events == ["migrate"]
    assert isinstance(service, ReviewService)
    assert service._session_factory is factory
    assert service._due_limit == 20
    assert service._horizon_days == 3


def test_build_review_service_propagates_migration_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_migrations() -> None:
        raise RuntimeError("bad revision")

    monkeypatch.setattr(runtime, "run_migrations_if_needed", failing_migrations)

    settings = AppSettings("Vocab Review", "test", "WARNING", 50, 7)
    with pytest.raises(RuntimeError, match="bad revision"):
        runtime.build_review_service(settings)


@pytest.mark.asyncio
async def test_sqlite_engine_enforces_foreign_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    get_engine.cache_clear()
    engine = get_engine()
    try:
        async with engine.connect() as connection:
            enabled = await connection.scalar(text("PRAGMA foreign_keys"))
    finally:
        await engine.dispose()
        get_engine.cache_clear()

    assert enabled == 1
