"""Factory for wiring a sign-in orchestrator from its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .clock import SystemClock
from .config import SignInConfig
from .device import StepUpAuthenticator
from .locking import IdentityLockRegistry
from .orchestrator import SignInOrchestrator
from .otp import AttemptPolicy, CooldownTimer, OtpChallengeManager

if TYPE_CHECKING:
    from .ports import (
        IBiometricCapability,
        IClock,
        ICredentialBackend,
        IDeviceTrustStore,
        ISignInAuditStore,
    )


def create_orchestrator(
    *,
    backend: ICredentialBackend,
    trust_store: IDeviceTrustStore,
    biometrics: IBiometricCapability,
    clock: IClock | None = None,
    config: SignInConfig | None = None,
    audit_store: ISignInAuditStore | None = None,
) -> SignInOrchestrator:
    """Build a SignInOrchestrator with components sized from ``config``.

    Args:
        backend: Hosted credential backend (code delivery, verification,
            business passwords).
        trust_store: Device trust persistence.
        biometrics: Platform biometric capability.
        clock: Time source; defaults to the system clock.
        config: Sign-in configuration; defaults to SignInConfig().
        audit_store: Optional audit sink.

    Example:
        ```python
        orchestrator = create_orchestrator(
            backend=identity_provider,
            trust_store=InMemoryDeviceTrustStore(clock=SystemClock()),
            biometrics=platform_biometrics,
            config=SignInConfig(cooldown_seconds=30),
        )
        ```
    """
    config = config or SignInConfig()
    clock = clock or SystemClock()

    cooldown = CooldownTimer(clock, default_duration=config.cooldown_seconds)
    challenges = OtpChallengeManager(
        backend=backend,
        clock=clock,
        cooldown=cooldown,
        code_length=config.code_length,
        ttl_seconds=config.code_ttl_seconds,
        cooldown_seconds=config.cooldown_seconds,
    )

    return SignInOrchestrator(
        challenges=challenges,
        policy=AttemptPolicy(clock, max_attempts=config.max_attempts),
        cooldown=cooldown,
        trust_store=trust_store,
        step_up=StepUpAuthenticator(biometrics, prompt=config.biometric_prompt),
        clock=clock,
        config=config,
        audit_store=audit_store,
        locks=IdentityLockRegistry(
            timeout=config.session_lock_timeout,
            max_queue_size=config.max_queued_calls,
        ),
    )


__all__: list[str] = ["create_orchestrator"]
