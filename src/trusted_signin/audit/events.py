"""Audit events for sign-in and device-trust operations.

Addresses are stored masked; one-time codes and passwords never appear in
an event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..identity import IdentityReference


class SignInEventType(Enum):
    """Types of sign-in audit events.

    Event naming follows the pattern: `signin.<resource>.<action>`
    """

    # Attempt lifecycle
    SIGNIN_STARTED = "signin.attempt.started"
    SIGNIN_SUCCEEDED = "signin.attempt.succeeded"
    SIGNIN_FAILED = "signin.attempt.failed"
    SIGNIN_ABANDONED = "signin.attempt.abandoned"

    # One-time codes
    CODE_SENT = "signin.code.sent"
    CODE_RESENT = "signin.code.resent"
    CODE_REJECTED = "signin.code.rejected"
    CODE_EXPIRED = "signin.code.expired"
    LOCKED_OUT = "signin.code.locked_out"

    # Password (business channel)
    PASSWORD_FAILED = "signin.password.failed"  # noqa: S105

    # Step-up
    STEP_UP_CONFIRMED = "signin.stepup.confirmed"
    STEP_UP_DECLINED = "signin.stepup.declined"
    STEP_UP_SKIPPED = "signin.stepup.skipped"

    # Device trust
    DEVICE_WHITELISTED = "signin.device.whitelisted"
    WHITELIST_FAILED = "signin.device.whitelist_failed"
    TRUST_STORE_UNAVAILABLE = "signin.device.store_unavailable"


@dataclass(frozen=True)
class SignInAuditEvent:
    """Sign-in audit event.

    Attributes:
        event_type: The type of sign-in event.
        identity_key: Channel-tagged key of the identity (unmasked key is
            needed to query by identity; it contains no secret).
        channel: Delivery channel (phone or email).
        masked_address: Address safe for display.
        timestamp: When the event occurred (UTC).
        success: Whether the operation was successful.
        error_code: Error code if the operation failed.
        error_message: Human-readable error message if failed.
        metadata: Additional event-specific data.
    """

    event_type: SignInEventType
    identity_key: str | None = None
    channel: str | None = None
    masked_address: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    success: bool = True
    error_code: str | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate event data."""
        if not self.success and not self.error_code:
            object.__setattr__(self, "error_code", "UNKNOWN_ERROR")

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization.

        Returns:
            Dictionary representation suitable for JSON serialization.
        """
        return {
            "event_type": self.event_type.value,
            "identity_key": self.identity_key,
            "channel": self.channel,
            "masked_address": self.masked_address,
            "timestamp": self.timestamp.isoformat(),
            "success": self.success,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SignInAuditEvent:
        """Create event from dictionary.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        event_type_str = data.get("event_type")
        if event_type_str is None:
            raise ValueError("Missing required 'event_type'")

        try:
            event_type = SignInEventType(event_type_str)
        except ValueError as e:
            raise ValueError(f"Invalid event_type: {event_type_str}") from e

        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
            if timestamp.tzinfo is None:
                timestamp = timestamp.replace(tzinfo=timezone.utc)
        elif timestamp is None:
            timestamp = datetime.now(timezone.utc)

        return cls(
            event_type=event_type,
            identity_key=data.get("identity_key"),
            channel=data.get("channel"),
            masked_address=data.get("masked_address"),
            timestamp=timestamp,
            success=data.get("success", True),
            error_code=data.get("error_code"),
            error_message=data.get("error_message"),
            metadata=data.get("metadata", {}),
        )


# ═══════════════════════════════════════════════════════════════
# EVENT FACTORY FUNCTIONS
# ═══════════════════════════════════════════════════════════════


def signin_event(
    event_type: SignInEventType,
    identity: IdentityReference,
    timestamp: datetime,
    *,
    metadata: dict[str, Any] | None = None,
) -> SignInAuditEvent:
    """Create a successful (informational) sign-in event."""
    return SignInAuditEvent(
        event_type=event_type,
        identity_key=identity.key,
        channel=identity.channel.value,
        masked_address=identity.masked,
        timestamp=timestamp,
        success=True,
        metadata=metadata or {},
    )


def signin_failure_event(
    event_type: SignInEventType,
    identity: IdentityReference,
    timestamp: datetime,
    *,
    error_code: str,
    error_message: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> SignInAuditEvent:
    """Create a failed sign-in event."""
    return SignInAuditEvent(
        event_type=event_type,
        identity_key=identity.key,
        channel=identity.channel.value,
        masked_address=identity.masked,
        timestamp=timestamp,
        success=False,
        error_code=error_code,
        error_message=error_message,
        metadata=metadata or {},
    )


__all__: list[str] = [
    "SignInEventType",
    "SignInAuditEvent",
    "signin_event",
    "signin_failure_event",
]
