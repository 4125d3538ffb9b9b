"""Configuration helpers for the Vocab Review runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass

from vocab_review.srs.queue import DEFAULT_DUE_LIMIT, DEFAULT_HORIZON_DAYS


MAX_REVIEW_BATCH_LIMIT = 500


def _read_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    review_batch_limit: int
    upcoming_horizon_days: int

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Vocab Review")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        review_batch_limit = _read_int("REVIEW_BATCH_LIMIT", DEFAULT_DUE_LIMIT)
        if review_batch_limit < 1 or review_batch_limit > MAX_REVIEW_BATCH_LIMIT:
            raise RuntimeError(
                f"REVIEW_BATCH_LIMIT must be between 1 and {MAX_REVIEW_BATCH_LIMIT}."
            )

        upcoming_horizon_days = _read_int("UPCOMING_HORIZON_DAYS", DEFAULT_HORIZON_DAYS)
        if upcoming_horizon_days < 1:
            raise RuntimeError("UPCOMING_HORIZON_DAYS must be a positive integer.")

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            review_batch_limit=review_batch_limit,
            upcoming_horizon_days=upcoming_horizon_days,
        )
