"""Sign-in state machine.

Usage:
    ```python
    from trusted_signin.orchestrator import SignInOrchestrator, SignInState

    snapshot = await orchestrator.begin_sign_in(identity)
    snapshot = await orchestrator.submit_code(identity, code)
    snapshot.raise_for_outcome()
    ```
"""

from __future__ import annotations

from .machine import SignInOrchestrator
from .states import (
    FailureReason,
    OutcomeKind,
    SignInOutcome,
    SignInSession,
    SignInSnapshot,
    SignInState,
    SignInVariant,
    SignInWarning,
    StateTransition,
)

__all__: list[str] = [
    "SignInOrchestrator",
    # States
    "SignInState",
    "SignInVariant",
    "SignInSession",
    "SignInSnapshot",
    "StateTransition",
    # Outcomes
    "OutcomeKind",
    "FailureReason",
    "SignInWarning",
    "SignInOutcome",
]
