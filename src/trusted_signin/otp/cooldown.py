"""Resend cooldown tracking.

Pure deadline bookkeeping: a window is a stored expiry time, and eligibility
is computed on demand from the injected clock. Nothing here sleeps or
schedules callbacks; a UI that shows a countdown simply polls remaining().
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..identity import IdentityReference
    from ..ports import IClock


@dataclass(frozen=True)
class CooldownWindow:
    """Resend blackout for one identity.

    Attributes:
        identity_key: Identity the window belongs to.
        expires_at: Moment a new code may be requested again.
    """

    identity_key: str
    expires_at: datetime


class CooldownTimer:
    """Tracks resend-eligibility countdowns per identity."""

    def __init__(self, clock: IClock, *, default_duration: float = 60) -> None:
        self._clock = clock
        self.default_duration = default_duration
        self._windows: dict[str, CooldownWindow] = {}

    def start(
        self, identity: IdentityReference, duration: float | None = None
    ) -> CooldownWindow:
        """Begin (or restart) the countdown for an identity."""
        seconds = self.default_duration if duration is None else duration
        window = CooldownWindow(
            identity_key=identity.key,
            expires_at=self._clock.now() + timedelta(seconds=seconds),
        )
        self._windows[identity.key] = window
        return window

    def remaining(self, identity: IdentityReference) -> float:
        """Seconds left in the window; 0.0 if expired or never started."""
        window = self._windows.get(identity.key)
        if window is None:
            return 0.0

        left = (window.expires_at - self._clock.now()).total_seconds()
        if left <= 0:
            # Expired windows are dropped lazily
            del self._windows[identity.key]
            return 0.0
        return left

    def is_eligible(self, identity: IdentityReference) -> bool:
        return self.remaining(identity) == 0.0

    def window(self, identity: IdentityReference) -> CooldownWindow | None:
        """Return the active window, if any."""
        if self.is_eligible(identity):
            return None
        return self._windows.get(identity.key)


__all__: list[str] = ["CooldownWindow", "CooldownTimer"]
