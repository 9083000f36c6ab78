"""Pinned clock for balloting tests.

Windows and timestamps are checked against the clock the services are
given, so tests move time explicitly instead of sleeping:

    >>> clock = FakeTimeAuthority(frozen_at=datetime(2026, 3, 1, 9, tzinfo=timezone.utc))
    >>> clock.advance(delta=timedelta(days=2))
    >>> clock.now()
    datetime.datetime(2026, 3, 3, 9, 0, tzinfo=datetime.timezone.utc)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_TEST_TIME = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Clock that stands still until a test moves it."""

    def __init__(self, frozen_at: datetime | None = None) -> None:
        self._current = _as_utc(frozen_at or DEFAULT_TEST_TIME)

    def now(self) -> datetime:
        return self._current

    def advance(
        self,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Move forward by ``delta`` or, failing that, ``seconds``.

        Raises:
            ValueError: If neither is given or the step is negative.
        """
        if delta is None and seconds is None:
            raise ValueError("advance() needs seconds or delta")
        step = delta if delta is not None else timedelta(seconds=seconds or 0)
        if step < timedelta(0):
            raise ValueError("advance() only moves forward; use set_time()")
        self._current += step

    def set_time(self, dt: datetime) -> None:
        """Jump to ``dt``; naive values are read as UTC."""
        self._current = _as_utc(dt)
