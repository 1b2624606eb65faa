"""One-time code challenges over phone or email.

Code generation and delivery belong to the hosted credential backend; this
module tracks what was issued, when it expires and whether it was consumed,
and performs every check that can be made without a network call (code
shape, consumption, expiry) before asking the backend.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, TypeVar
from uuid import uuid4

from ..exceptions import (
    BackendUnavailableError,
    ChallengeAlreadyConsumedError,
    InvalidCredentialsError,
    MalformedCodeError,
    SignInError,
)
from ..observability import SignInMetrics, SignInTracing
from ..ports import ICredentialBackend

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from ..identity import IdentityReference
    from ..ports import IClock
    from .cooldown import CooldownTimer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VerificationResult(Enum):
    """Result of checking a submitted code against a challenge."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


@dataclass
class OtpChallenge:
    """A single issued one-time code.

    The code itself is never held here; only the backend knows it.

    Attributes:
        identity: Identity the code was sent to.
        issued_at: When the backend accepted the send request.
        expires_at: Deadline after which submissions are EXPIRED.
        challenge_id: Unique id, distinguishes re-issued challenges.
        consumed: True once verified, discarded or superseded.
    """

    identity: IdentityReference
    issued_at: datetime
    expires_at: datetime
    challenge_id: str = field(default_factory=lambda: uuid4().hex)
    consumed: bool = False

    @property
    def channel(self) -> str:
        return self.identity.channel.value

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class OtpChallengeManager:
    """Issues, tracks and verifies one-time code challenges.

    At most one active challenge exists per identity; issuing a new one
    supersedes the previous challenge, which then behaves as consumed.

    Example:
        ```python
        manager = OtpChallengeManager(
            backend=backend,
            clock=SystemClock(),
            cooldown=CooldownTimer(SystemClock()),
        )

        challenge = await manager.issue(IdentityReference.email("user@example.com"))
        result = await manager.verify(challenge, "123456")
        ```
    """

    def __init__(
        self,
        *,
        backend: ICredentialBackend,
        clock: IClock,
        cooldown: CooldownTimer,
        code_length: int = 6,
        ttl_seconds: int = 300,
        cooldown_seconds: float = 60,
    ) -> None:
        self.backend = backend
        self.cooldown = cooldown
        self.code_length = code_length
        self.ttl_seconds = ttl_seconds
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._active: dict[str, OtpChallenge] = {}

    def check_code_format(self, code: str) -> str:
        """Validate the shape of a submitted code.

        Returns:
            The code with surrounding whitespace removed.

        Raises:
            MalformedCodeError: Not exactly ``code_length`` ASCII digits.
        """
        cleaned = (code or "").strip()
        if len(cleaned) != self.code_length or not (
            cleaned.isascii() and cleaned.isdigit()
        ):
            raise MalformedCodeError(
                f"Please enter a valid {self.code_length}-digit code"
            )
        return cleaned

    async def issue(self, identity: IdentityReference) -> OtpChallenge:
        """Request a new code from the backend.

        On success the previous challenge for the identity is invalidated
        and a new cooldown window starts.

        Raises:
            BackendUnavailableError: Backend cannot be reached.
            InvalidIdentityError: Backend rejected the address.
        """
        with SignInTracing.span("send_code", identity=identity):
            with SignInMetrics.operation("send_code"):
                await guard_backend_call(self.backend.send_code(identity))

        now = self._clock.now()
        challenge = OtpChallenge(
            identity=identity,
            issued_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )

        previous = self._active.get(identity.key)
        if previous is not None:
            previous.consumed = True
            logger.debug("Challenge %s superseded", previous.challenge_id)

        self._active[identity.key] = challenge
        self.cooldown.start(identity, self.cooldown_seconds)
        logger.info("Code sent to %s (challenge %s)", identity, challenge.challenge_id)
        return challenge

    async def verify(self, challenge: OtpChallenge, code: str) -> VerificationResult:
        """Check a submitted code.

        Shape, consumption and expiry are checked locally first; only a
        well-formed code for a live challenge reaches the backend.

        Raises:
            MalformedCodeError: Code is not ``code_length`` digits.
            ChallengeAlreadyConsumedError: Challenge was consumed or superseded.
            BackendUnavailableError: Backend cannot be reached.
        """
        cleaned = self.check_code_format(code)

        if challenge.consumed or not self._is_current(challenge):
            raise ChallengeAlreadyConsumedError(
                "This code was already used or replaced by a newer one"
            )

        if challenge.is_expired(self._clock.now()):
            logger.info("Challenge %s expired", challenge.challenge_id)
            return VerificationResult.EXPIRED

        with SignInTracing.span("verify_code", identity=challenge.identity):
            with SignInMetrics.operation("verify_code"):
                accepted = await guard_backend_call(
                    self.backend.verify_code(challenge.identity, cleaned)
                )

        if not accepted:
            return VerificationResult.REJECTED

        self.discard(challenge)
        return VerificationResult.ACCEPTED

    def discard(self, challenge: OtpChallenge) -> None:
        """Mark a challenge consumed and drop it from the active set."""
        challenge.consumed = True
        if self._is_current(challenge):
            del self._active[challenge.identity.key]

    def active_challenge(self, identity: IdentityReference) -> OtpChallenge | None:
        """Return the live (not consumed, not expired) challenge, if any."""
        challenge = self._active.get(identity.key)
        if challenge is None or challenge.consumed:
            return None
        if challenge.is_expired(self._clock.now()):
            return None
        return challenge

    def _is_current(self, challenge: OtpChallenge) -> bool:
        return self._active.get(challenge.identity.key) is challenge


async def guard_backend_call(awaitable: Awaitable[T]) -> T:
    """Await a backend call, wrapping foreign errors as BackendUnavailableError."""
    try:
        return await awaitable
    except SignInError:
        raise
    except Exception as exc:
        raise BackendUnavailableError(f"Credential backend call failed: {exc}") from exc


class InMemoryCredentialBackend(ICredentialBackend):
    """In-memory credential backend for TESTING ONLY.

    ⚠️ WARNING: Codes and passwords are stored in plain text in memory.
    Do NOT use in production!

    Generates codes with ``secrets`` and records them so tests can read
    the last code sent to an identity.
    """

    def __init__(self, *, code_length: int = 6) -> None:
        self.code_length = code_length
        self.available = True
        self._codes: dict[str, str] = {}
        self._passwords: dict[str, str] = {}
        self.sent: list[tuple[str, str]] = []
        self.verify_calls = 0

    def _generate_code(self) -> str:
        code = secrets.randbelow(10**self.code_length)
        return str(code).zfill(self.code_length)

    def _ensure_available(self) -> None:
        if not self.available:
            raise BackendUnavailableError("Credential backend is unreachable")

    async def send_code(self, identity: IdentityReference) -> None:
        self._ensure_available()
        code = self._generate_code()
        self._codes[identity.key] = code
        self.sent.append((identity.key, code))

    async def verify_code(self, identity: IdentityReference, code: str) -> bool:
        self._ensure_available()
        self.verify_calls += 1
        stored = self._codes.get(identity.key)
        if stored is None:
            return False
        if secrets.compare_digest(stored, code):
            # Single use
            del self._codes[identity.key]
            return True
        return False

    async def verify_password(self, identity: IdentityReference, password: str) -> None:
        self._ensure_available()
        stored = self._passwords.get(identity.key)
        if stored is None or not secrets.compare_digest(stored, password):
            raise InvalidCredentialsError("Invalid login credentials")

    def register_password(self, identity: IdentityReference, password: str) -> None:
        self._passwords[identity.key] = password

    def last_code(self, identity: IdentityReference) -> str | None:
        """Return the most recent code sent to an identity."""
        for key, code in reversed(self.sent):
            if key == identity.key:
                return code
        return None


__all__: list[str] = [
    "VerificationResult",
    "OtpChallenge",
    "OtpChallengeManager",
    "InMemoryCredentialBackend",
    "guard_backend_call",
]
