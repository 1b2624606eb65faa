"""Sign-in configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SignInConfig:
    """Sign-in orchestration configuration.

    Attributes:
        code_length: Number of digits in a one-time code.
        code_ttl_seconds: Lifetime of an issued challenge.
        max_attempts: Failed verifications allowed before lockout.
        cooldown_seconds: Minimum seconds between code requests.
        interactive_step_up: Park in STEP_UP until step_up_respond() is called
            instead of prompting for biometrics immediately.
        whitelist_failure_fatal: Fail the sign-in when the device trust record
            cannot be written. When False the user is authenticated with a
            warning and the device is not remembered.
        biometric_prompt: Message shown by the biometric prompt.
        session_lock_timeout: Seconds a concurrent call for the same identity
            waits before being rejected.
        max_queued_calls: Waiters allowed per identity before immediate rejection.
    """

    code_length: int = 6
    code_ttl_seconds: int = 300  # 5 minutes
    max_attempts: int = 3
    cooldown_seconds: int = 60  # 1 minute between resends
    interactive_step_up: bool = False
    whitelist_failure_fatal: bool = False
    biometric_prompt: str = "Verify your identity"
    session_lock_timeout: float = 5.0
    max_queued_calls: int = 10

    def __post_init__(self) -> None:
        if self.code_length <= 0:
            raise ValueError("code_length must be positive")
        if self.code_ttl_seconds <= 0:
            raise ValueError("code_ttl_seconds must be positive")
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if self.cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must not be negative")
        if self.session_lock_timeout <= 0:
            raise ValueError("session_lock_timeout must be positive")
        if self.max_queued_calls <= 0:
            raise ValueError("max_queued_calls must be positive")


__all__: list[str] = ["SignInConfig"]
