"""Trusted Sign-In

Passwordless sign-in with device trust: one-time codes over phone (SMS) or
email, bounded verification attempts, resend cooldowns, biometric step-up
on unrecognised devices and device whitelisting after a full verification.

Usage:
    ```python
    from trusted_signin import (
        IdentityReference,
        InMemoryDeviceTrustStore,
        SignInState,
        SystemClock,
        create_orchestrator,
    )

    orchestrator = create_orchestrator(
        backend=identity_provider,
        trust_store=InMemoryDeviceTrustStore(clock=SystemClock()),
        biometrics=platform_biometrics,
    )

    identity = IdentityReference.email("user@example.com")
    await orchestrator.begin_sign_in(identity)
    snapshot = await orchestrator.submit_code(identity, "123456")
    assert snapshot.state is SignInState.AUTHENTICATED
    ```

Submodules:
    - `otp`: challenges, attempt policy, resend cooldown
    - `device`: device trust store, biometric step-up
    - `orchestrator`: the sign-in state machine
    - `audit`: sign-in audit events and stores
    - `observability`: Prometheus metrics and OpenTelemetry spans
"""

from __future__ import annotations

# Audit
from .audit import (
    InMemorySignInAuditStore,
    SignInAuditEvent,
    SignInEventType,
    signin_event,
    signin_failure_event,
)

# Clock
from .clock import ManualClock, SystemClock

# Configuration
from .config import SignInConfig

# Device trust / step-up
from .device import (
    DeviceTrustRecord,
    InMemoryDeviceTrustStore,
    StaticBiometricCapability,
    StepUpAuthenticator,
    StepUpResult,
)

# Exceptions
from .exceptions import (
    BackendUnavailableError,
    ChallengeAlreadyConsumedError,
    ChallengeExpiredError,
    CodeRejectedError,
    CooldownActiveError,
    InvalidCredentialsError,
    InvalidIdentityError,
    InvalidSessionStateError,
    LockedOutError,
    MalformedCodeError,
    SessionBusyError,
    SessionNotFoundError,
    SignInDomainError,
    SignInError,
    SignInInfrastructureError,
    StepUpDeclinedError,
    StoreUnavailableError,
    WhitelistWriteFailedError,
)

# Factory
from .factory import create_orchestrator

# Identity
from .identity import Channel, IdentityReference, mask_address

# Locking
from .locking import IdentityLockRegistry

# Orchestrator
from .orchestrator import (
    FailureReason,
    OutcomeKind,
    SignInOrchestrator,
    SignInOutcome,
    SignInSnapshot,
    SignInState,
    SignInVariant,
    SignInWarning,
    StateTransition,
)

# OTP
from .otp import (
    AttemptPolicy,
    CooldownTimer,
    InMemoryCredentialBackend,
    OtpChallenge,
    OtpChallengeManager,
    PolicyDecision,
    VerificationResult,
)

# Ports
from .ports import (
    IBiometricCapability,
    IClock,
    ICredentialBackend,
    IDeviceTrustStore,
    ISignInAuditStore,
)

__version__ = "0.1.0"

__all__: list[str] = [
    # Identity
    "Channel",
    "IdentityReference",
    "mask_address",
    # Configuration
    "SignInConfig",
    # Clock
    "SystemClock",
    "ManualClock",
    # Ports
    "IClock",
    "ICredentialBackend",
    "IDeviceTrustStore",
    "IBiometricCapability",
    "ISignInAuditStore",
    # OTP
    "OtpChallenge",
    "OtpChallengeManager",
    "VerificationResult",
    "AttemptPolicy",
    "PolicyDecision",
    "CooldownTimer",
    "InMemoryCredentialBackend",
    # Device
    "DeviceTrustRecord",
    "InMemoryDeviceTrustStore",
    "StepUpAuthenticator",
    "StepUpResult",
    "StaticBiometricCapability",
    # Orchestrator
    "SignInOrchestrator",
    "SignInState",
    "SignInVariant",
    "SignInSnapshot",
    "SignInOutcome",
    "OutcomeKind",
    "FailureReason",
    "SignInWarning",
    "StateTransition",
    "create_orchestrator",
    # Locking
    "IdentityLockRegistry",
    # Audit
    "SignInEventType",
    "SignInAuditEvent",
    "InMemorySignInAuditStore",
    "signin_event",
    "signin_failure_event",
    # Exceptions
    "SignInError",
    "SignInDomainError",
    "SignInInfrastructureError",
    "InvalidIdentityError",
    "MalformedCodeError",
    "ChallengeExpiredError",
    "ChallengeAlreadyConsumedError",
    "CodeRejectedError",
    "LockedOutError",
    "CooldownActiveError",
    "StepUpDeclinedError",
    "InvalidCredentialsError",
    "InvalidSessionStateError",
    "SessionNotFoundError",
    "BackendUnavailableError",
    "StoreUnavailableError",
    "WhitelistWriteFailedError",
    "SessionBusyError",
]
