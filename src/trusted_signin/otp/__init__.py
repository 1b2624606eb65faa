"""One-time code module.

Supports:
- Challenge issuance and verification over phone (SMS) or email
- Bounded verification attempts with lockout
- Resend cooldown windows
"""

from .challenge import (
    InMemoryCredentialBackend,
    OtpChallenge,
    OtpChallengeManager,
    VerificationResult,
    guard_backend_call,
)
from .cooldown import CooldownTimer, CooldownWindow
from .policy import AttemptCounter, AttemptPolicy, PolicyDecision

__all__: list[str] = [
    # Challenges
    "OtpChallenge",
    "OtpChallengeManager",
    "VerificationResult",
    "InMemoryCredentialBackend",
    "guard_backend_call",
    # Cooldown
    "CooldownTimer",
    "CooldownWindow",
    # Attempt policy
    "AttemptPolicy",
    "AttemptCounter",
    "PolicyDecision",
]
