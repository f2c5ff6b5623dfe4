"""Timestamp helpers for backup naming."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def backup_suffix(now: datetime | None = None) -> str:
    """Return a sortable UTC suffix with microsecond resolution.

    Example: ``20260118T101502123456Z``
    """
    moment = now or utc_now()
    return moment.strftime("%Y%m%dT%H%M%S%fZ")


__all__ = ["utc_now", "backup_suffix"]
