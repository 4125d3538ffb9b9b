"""Application bootstrap helpers for the Vocab Review project."""

from .runtime import build_review_service
from .settings import AppSettings

__all__ = ["build_review_service", "AppSettings"]
