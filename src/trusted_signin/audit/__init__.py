"""Sign-in audit trail."""

from __future__ import annotations

from .events import (
    SignInAuditEvent,
    SignInEventType,
    signin_event,
    signin_failure_event,
)
from .memory import InMemorySignInAuditStore

__all__: list[str] = [
    "SignInEventType",
    "SignInAuditEvent",
    "signin_event",
    "signin_failure_event",
    "InMemorySignInAuditStore",
]
