from __future__ import annotations

import pytest

from vocab_review.app.settings import AppSettings


_VARIABLES = ("APP_NAME", "APP_ENV", "LOG_LEVEL", "REVIEW_BATCH_LIMIT", "UPCOMING_HORIZON_DAYS")


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = AppSettings.from_env()

    assert settings.app_name == "Vocab Review"
    assert settings.app_env == "development"
    assert settings.log_level == "INFO"
    assert settings.review_batch_limit == 50
    assert settings.upcoming_horizon_days == 7


def test_values_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("REVIEW_BATCH_LIMIT", "20")
    monkeypatch.setenv("UPCOMING_HORIZON_DAYS", "14")

    settings = AppSettings.from_env()

    assert settings.app_env == "production"
    assert settings.log_level == "DEBUG"
    assert settings.review_batch_limit == 20
    assert settings.upcoming_horizon_days == 14


@pytest.mark.parametrize("value", ["0", "501", "many"])
def test_invalid_batch_limit_is_rejected(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("REVIEW_BATCH_LIMIT", value)

    with pytest.raises(RuntimeError, match="REVIEW_BATCH_LIMIT"):
        AppSettings.from_env()


def test_horizon_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UPCOMING_HORIZON_DAYS", "0")

    with pytest.raises(RuntimeError, match="UPCOMING_HORIZON_DAYS"):
        AppSettings.from_env()
