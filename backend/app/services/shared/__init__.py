"""Shared utilities for the services layer."""

from .datetime_utils import as_utc, utcnow

__all__ = [
    "as_utc",
    "utcnow",
]
