"""Sign-in states, outcomes and the views handed to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from ..exceptions import (
    BackendUnavailableError,
    ChallengeExpiredError,
    CodeRejectedError,
    InvalidCredentialsError,
    InvalidIdentityError,
    LockedOutError,
    SignInError,
    StepUpDeclinedError,
    WhitelistWriteFailedError,
)
from ..otp.challenge import VerificationResult

if TYPE_CHECKING:
    from ..identity import IdentityReference
    from ..otp.challenge import OtpChallenge


class SignInState(Enum):
    """States of the authentication state machine."""

    IDLE = "idle"
    CHALLENGE_ISSUED = "challenge_issued"
    VERIFYING = "verifying"
    STEP_UP = "step_up"
    WHITELISTING = "whitelisting"
    AUTHENTICATED = "authenticated"
    LOCKED_OUT = "locked_out"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def is_transient(self) -> bool:
        """States only ever occupied while a call is in flight."""
        return self in _TRANSIENT


_TERMINAL = frozenset({SignInState.AUTHENTICATED, SignInState.FAILED})
_TRANSIENT = frozenset({SignInState.VERIFYING, SignInState.WHITELISTING})


class SignInVariant(Enum):
    """Entry path into the state machine."""

    STANDARD = "standard"
    BUSINESS = "business"


class OutcomeKind(Enum):
    AUTHENTICATED = "authenticated"
    LOCKED_OUT = "locked_out"
    FAILED = "failed"


class FailureReason(Enum):
    """Why an attempt ended in FAILED or LOCKED_OUT.

    Values match the ``code`` of the corresponding exception.
    """

    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
    INVALID_IDENTITY = "INVALID_IDENTITY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    CHALLENGE_EXPIRED = "CHALLENGE_EXPIRED"
    ATTEMPTS_EXHAUSTED = "LOCKED_OUT"
    STEP_UP_DECLINED = "STEP_UP_DECLINED"
    WHITELIST_WRITE_FAILED = "WHITELIST_WRITE_FAILED"


_REASON_ERRORS: dict[FailureReason, type[SignInError]] = {
    FailureReason.BACKEND_UNAVAILABLE: BackendUnavailableError,
    FailureReason.INVALID_IDENTITY: InvalidIdentityError,
    FailureReason.INVALID_CREDENTIALS: InvalidCredentialsError,
    FailureReason.CHALLENGE_EXPIRED: ChallengeExpiredError,
    FailureReason.ATTEMPTS_EXHAUSTED: LockedOutError,
    FailureReason.STEP_UP_DECLINED: StepUpDeclinedError,
    FailureReason.WHITELIST_WRITE_FAILED: WhitelistWriteFailedError,
}


class SignInWarning(Enum):
    """Non-fatal problems attached to a successful outcome."""

    WHITELIST_WRITE_FAILED = "WHITELIST_WRITE_FAILED"
    TRUST_STORE_UNAVAILABLE = "TRUST_STORE_UNAVAILABLE"


@dataclass(frozen=True)
class SignInOutcome:
    """Typed result of a terminal (or locked-out) attempt.

    Attributes:
        kind: Authenticated, locked out or failed.
        reason: Failure reason; None when authenticated.
        device_trusted: Whether the device is remembered for this identity
            after the attempt.
        warnings: Non-fatal problems (e.g. whitelist write failed).
        completed_at: When the outcome was reached.
    """

    kind: OutcomeKind
    completed_at: datetime
    reason: FailureReason | None = None
    device_trusted: bool = False
    warnings: tuple[SignInWarning, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.AUTHENTICATED


@dataclass(frozen=True)
class SignInSnapshot:
    """Read-only view of an attempt, returned by every orchestrator call.

    Attributes:
        identity: Identity signing in.
        state: Current state.
        variant: Standard (OTP first) or business (password first) entry.
        history: States visited by this attempt, oldest first.
        attempts_remaining: Failed submissions left before lockout.
        resend_available_in: Seconds until a new code may be requested.
        challenge_expires_at: Deadline of the active challenge, if any.
        last_result: Result of the most recent code verification.
        outcome: Set once the attempt is terminal or locked out.
    """

    identity: IdentityReference
    state: SignInState
    variant: SignInVariant
    history: tuple[SignInState, ...]
    attempts_remaining: int
    resend_available_in: float
    challenge_expires_at: datetime | None = None
    last_result: VerificationResult | None = None
    outcome: SignInOutcome | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def can_resend(self) -> bool:
        if self.resend_available_in > 0:
            return False
        if self.state in (SignInState.CHALLENGE_ISSUED, SignInState.LOCKED_OUT):
            return True
        return (
            self.outcome is not None
            and self.outcome.reason is FailureReason.CHALLENGE_EXPIRED
        )

    def raise_for_outcome(self) -> None:
        """Raise the exception matching a failed or rejected attempt.

        Does nothing for attempts that are in progress or authenticated.

        Raises:
            CodeRejectedError: Last code was wrong and retries remain.
            LockedOutError: Attempts exhausted.
            SignInError: The subclass matching the failure reason.
        """
        if self.outcome is not None and self.outcome.reason is not None:
            error_cls = _REASON_ERRORS[self.outcome.reason]
            raise error_cls()
        if (
            self.state is SignInState.CHALLENGE_ISSUED
            and self.last_result is VerificationResult.REJECTED
        ):
            raise CodeRejectedError(attempts_remaining=self.attempts_remaining)


@dataclass(frozen=True)
class StateTransition:
    """Emitted to listeners on every state change.

    Attributes:
        identity: Identity whose attempt moved.
        from_state: Previous state.
        to_state: New state.
        at: Transition time.
        outcome: Set when ``to_state`` ends the attempt.
    """

    identity: IdentityReference
    from_state: SignInState
    to_state: SignInState
    at: datetime
    outcome: SignInOutcome | None = None


@dataclass
class SignInSession:
    """Mutable per-identity attempt owned by the orchestrator."""

    identity: IdentityReference
    variant: SignInVariant = SignInVariant.STANDARD
    state: SignInState = SignInState.IDLE
    history: list[SignInState] = field(default_factory=lambda: [SignInState.IDLE])
    challenge: OtpChallenge | None = None
    last_result: VerificationResult | None = None
    outcome: SignInOutcome | None = None
    device_trusted: bool = False
    warnings: list[SignInWarning] = field(default_factory=list)


__all__: list[str] = [
    "SignInState",
    "SignInVariant",
    "OutcomeKind",
    "FailureReason",
    "SignInWarning",
    "SignInOutcome",
    "SignInSnapshot",
    "StateTransition",
    "SignInSession",
]
