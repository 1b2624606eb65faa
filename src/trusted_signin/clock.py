"""Clock implementations.

Expiry and cooldown deadlines are computed from an injected IClock, never
from a global, so tests can move time explicitly.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .ports import IClock


class SystemClock(IClock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock(IClock):
    """Clock that only moves when told to.

    Example:
        ```python
        clock = ManualClock()
        timer = CooldownTimer(clock)
        timer.start(identity, 60)
        clock.advance(61)
        assert timer.is_eligible(identity)
        ```
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        """Move the clock forward and return the new time."""
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now = self._now + timedelta(seconds=seconds)
        return self._now

    def set(self, moment: datetime) -> None:
        """Jump to an absolute moment."""
        self._now = moment


__all__: list[str] = ["SystemClock", "ManualClock"]
