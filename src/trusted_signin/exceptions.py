"""Sign-in and device-trust exceptions.

All errors inherit from SignInError. Policy outcomes derive from
SignInDomainError; collaborator failures (credential backend, trust store,
lock contention) derive from SignInInfrastructureError.

Every class carries a stable ``code`` that is reused by outcomes and
audit events.
"""

from __future__ import annotations

import math
from typing import ClassVar

# ═══════════════════════════════════════════════════════════════
# BASE ERRORS
# ═══════════════════════════════════════════════════════════════


class SignInError(Exception):
    """Root exception for the trusted-signin package."""

    code: ClassVar[str] = "SIGNIN_ERROR"


class SignInDomainError(SignInError):
    """Base class for sign-in policy failures."""


class SignInInfrastructureError(SignInError):
    """Base class for failures of external collaborators."""


# ═══════════════════════════════════════════════════════════════
# IDENTITY / CODE ERRORS
# ═══════════════════════════════════════════════════════════════


class InvalidIdentityError(SignInDomainError):
    """Raised when a phone number or email address is malformed.

    Raised locally when an IdentityReference is built, or propagated from
    the credential backend when it rejects the address.
    """

    code = "INVALID_IDENTITY"


class MalformedCodeError(SignInDomainError):
    """Raised when a submitted code is not exactly N numeric characters.

    Checked locally; the credential backend is never contacted.
    """

    code = "MALFORMED_CODE"


class ChallengeExpiredError(SignInDomainError):
    """Raised when a code is submitted after the challenge deadline."""

    code = "CHALLENGE_EXPIRED"


class ChallengeAlreadyConsumedError(SignInDomainError):
    """Raised when verifying a challenge that was consumed or superseded."""

    code = "CHALLENGE_ALREADY_CONSUMED"


class CodeRejectedError(SignInDomainError):
    """Raised when the backend rejects a code and retries remain.

    Attributes:
        attempts_remaining: Failed submissions left before lockout.
    """

    code = "REJECTED"

    def __init__(
        self,
        message: str = "Verification code rejected",
        attempts_remaining: int | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts_remaining = attempts_remaining


class LockedOutError(SignInDomainError):
    """Raised when verification attempts for a challenge are exhausted.

    Only a fresh challenge (new request or resend) clears the lockout.

    Attributes:
        failed_attempts: Number of failures that triggered the lockout.
    """

    code = "LOCKED_OUT"

    def __init__(
        self,
        message: str = "Too many failed attempts, request a new code",
        failed_attempts: int | None = None,
    ) -> None:
        super().__init__(message)
        self.failed_attempts = failed_attempts


class CooldownActiveError(SignInDomainError):
    """Raised when a code is re-requested before the cooldown elapses.

    Attributes:
        remaining_seconds: Seconds until a new code may be requested.
    """

    code = "COOLDOWN_ACTIVE"

    def __init__(self, remaining_seconds: float) -> None:
        super().__init__(
            f"Please wait {math.ceil(remaining_seconds)} seconds "
            "before requesting a new code"
        )
        self.remaining_seconds = remaining_seconds


# ═══════════════════════════════════════════════════════════════
# STEP-UP / CREDENTIAL ERRORS
# ═══════════════════════════════════════════════════════════════


class StepUpDeclinedError(SignInDomainError):
    """Raised when biometric confirmation is present but fails."""

    code = "STEP_UP_DECLINED"


class InvalidCredentialsError(SignInDomainError):
    """Raised by the credential backend when a business password is wrong."""

    code = "INVALID_CREDENTIALS"


# ═══════════════════════════════════════════════════════════════
# SESSION ERRORS
# ═══════════════════════════════════════════════════════════════


class InvalidSessionStateError(SignInDomainError):
    """Raised when an operation is not allowed in the current state."""

    code = "INVALID_STATE"


class SessionNotFoundError(InvalidSessionStateError):
    """Raised when no sign-in attempt exists for an identity."""

    code = "SESSION_NOT_FOUND"


# ═══════════════════════════════════════════════════════════════
# INFRASTRUCTURE ERRORS
# ═══════════════════════════════════════════════════════════════


class BackendUnavailableError(SignInInfrastructureError):
    """Raised when the OTP/credential backend cannot be reached."""

    code = "BACKEND_UNAVAILABLE"


class StoreUnavailableError(SignInInfrastructureError):
    """Raised when the device trust store cannot be reached."""

    code = "STORE_UNAVAILABLE"


class WhitelistWriteFailedError(StoreUnavailableError):
    """Raised when a device trust record could not be written."""

    code = "WHITELIST_WRITE_FAILED"


class SessionBusyError(SignInInfrastructureError):
    """Raised when another call for the same identity holds the session.

    Attributes:
        identity_key: Key of the contended identity.
        timeout: Seconds waited before giving up.
        reason: Optional detail (e.g. queue full).
    """

    code = "SESSION_BUSY"

    def __init__(
        self,
        identity_key: str,
        timeout: float,
        reason: str | None = None,
    ) -> None:
        self.identity_key = identity_key
        self.timeout = timeout
        self.reason = reason

        msg = (
            f"Sign-in for {identity_key} is busy, "
            f"lock not acquired within {timeout}s"
        )
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


__all__: list[str] = [
    # Base
    "SignInError",
    "SignInDomainError",
    "SignInInfrastructureError",
    # Identity / code
    "InvalidIdentityError",
    "MalformedCodeError",
    "ChallengeExpiredError",
    "ChallengeAlreadyConsumedError",
    "CodeRejectedError",
    "LockedOutError",
    "CooldownActiveError",
    # Step-up / credentials
    "StepUpDeclinedError",
    "InvalidCredentialsError",
    # Session
    "InvalidSessionStateError",
    "SessionNotFoundError",
    # Infrastructure
    "BackendUnavailableError",
    "StoreUnavailableError",
    "WhitelistWriteFailedError",
    "SessionBusyError",
]
