"""Time sources.

Handlers never read the system clock directly; they receive a Clock so
tests can pin "now" and move it forward deterministically.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware (UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        # Assume naive datetimes are UTC
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current instant, timezone-aware UTC."""
        pass


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self._now = ensure_utc(start) or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def set(self, when: datetime) -> None:
        self._now = ensure_utc(when)

    def advance(self, **kwargs: float) -> datetime:
        """Move forward by a timedelta built from kwargs (seconds=, hours=, ...)."""
        self._now = self._now + timedelta(**kwargs)
        return self._now


__all__ = ["Clock", "SystemClock", "FixedClock", "ensure_utc"]
