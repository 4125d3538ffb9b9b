"""Bootstrap logic for the review service."""

from __future__ import annotations

import logging

from vocab_review.app.settings import AppSettings
from vocab_review.db import get_session_factory, run_migrations_if_needed
from vocab_review.services import ReviewService


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def build_review_service(settings: AppSettings) -> ReviewService:
    """Prepare the database and return a review service configured from ``settings``."""
    _configure_logging(settings.log_level)

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    service = ReviewService(
        get_session_factory(),
        due_limit=settings.review_batch_limit,
        horizon_days=settings.upcoming_horizon_days,
    )
    LOGGER.info("%s is ready in %s mode.", settings.app_name, settings.app_env)
    return service
