"""Bounded verification attempt policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..identity import IdentityReference
    from ..ports import IClock

logger = logging.getLogger(__name__)


class PolicyDecision(Enum):
    """What the caller should do after a failed verification."""

    RETRY = "retry"
    LOCKOUT = "lockout"


@dataclass(frozen=True)
class AttemptCounter:
    """Failed verification count for one identity.

    Attributes:
        identity_key: Identity the counter belongs to.
        count: Failures recorded since the last reset.
        window_started_at: Time of the first failure since the last reset.
    """

    identity_key: str
    count: int
    window_started_at: datetime


class AttemptPolicy:
    """Enforces a bounded number of failed verifications per identity.

    Lockout triggers on the ``max_attempts``-th recorded failure. The counter
    never grows past ``max_attempts`` and is kept across resends; once locked
    out, further failures keep returning LOCKOUT until reset() is called.
    """

    def __init__(self, clock: IClock, *, max_attempts: int = 3) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self._clock = clock
        self.max_attempts = max_attempts
        self._counters: dict[str, AttemptCounter] = {}

    def record_failure(self, identity: IdentityReference) -> PolicyDecision:
        """Count a failed verification and decide between retry and lockout."""
        current = self._counters.get(identity.key)
        if current is None:
            current = AttemptCounter(
                identity_key=identity.key,
                count=0,
                window_started_at=self._clock.now(),
            )

        count = min(current.count + 1, self.max_attempts)
        self._counters[identity.key] = AttemptCounter(
            identity_key=identity.key,
            count=count,
            window_started_at=current.window_started_at,
        )

        if count >= self.max_attempts:
            logger.info("Attempts exhausted for %s (%d)", identity, count)
            return PolicyDecision.LOCKOUT
        return PolicyDecision.RETRY

    def reset(self, identity: IdentityReference) -> None:
        self._counters.pop(identity.key, None)

    def attempts(self, identity: IdentityReference) -> int:
        counter = self._counters.get(identity.key)
        return counter.count if counter else 0

    def remaining(self, identity: IdentityReference) -> int:
        """Failures left before lockout."""
        return self.max_attempts - self.attempts(identity)

    def is_locked_out(self, identity: IdentityReference) -> bool:
        return self.attempts(identity) >= self.max_attempts

    def counter(self, identity: IdentityReference) -> AttemptCounter | None:
        return self._counters.get(identity.key)


__all__: list[str] = ["PolicyDecision", "AttemptCounter", "AttemptPolicy"]
