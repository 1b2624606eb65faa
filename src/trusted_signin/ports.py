"""Collaborator ports (protocols).

The orchestration core talks to the outside world only through these
interfaces. The hosted identity provider, the device trust persistence,
the platform biometric prompt and the clock are all injected, so every
flow is testable against fakes. All ports use @runtime_checkable for
isinstance checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from .audit.events import SignInAuditEvent, SignInEventType
    from .identity import IdentityReference


# ═══════════════════════════════════════════════════════════════
# CLOCK PORT
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class IClock(Protocol):
    """Source of the current time (timezone-aware, UTC)."""

    def now(self) -> datetime: ...


# ═══════════════════════════════════════════════════════════════
# CREDENTIAL BACKEND PORT
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class ICredentialBackend(Protocol):
    """Protocol for the hosted OTP/credential backend.

    The backend owns code generation, delivery and credential storage.
    The core only asks it to send a code, to check a code and, for the
    business channel, to check a password.

    Implementations raise:
        BackendUnavailableError: Backend cannot be reached.
        InvalidIdentityError: Backend rejected the address.
        InvalidCredentialsError: Password is wrong (verify_password only).
    """

    async def send_code(self, identity: IdentityReference) -> None:
        """Send a fresh one-time code to the identity's address.

        Args:
            identity: Phone or email identity to deliver to.
        """
        ...

    async def verify_code(self, identity: IdentityReference, code: str) -> bool:
        """Check a one-time code.

        Args:
            identity: Identity the code was sent to.
            code: Code typed by the user.

        Returns:
            True if accepted, False if rejected.
        """
        ...

    async def verify_password(self, identity: IdentityReference, password: str) -> None:
        """Check a business account password.

        Args:
            identity: Business email identity.
            password: Password typed by the user.

        Raises:
            InvalidCredentialsError: Password does not match.
        """
        ...


# ═══════════════════════════════════════════════════════════════
# DEVICE TRUST STORE PORT
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class IDeviceTrustStore(Protocol):
    """Protocol for persisted device trust records.

    A record for an identity means this device completed a full
    verification for that account and may skip step-up.
    """

    async def is_trusted(self, identity: IdentityReference) -> bool:
        """Check whether a trust record exists.

        Raises:
            StoreUnavailableError: Store cannot be reached.
        """
        ...

    async def whitelist(self, identity: IdentityReference) -> None:
        """Create a trust record stamped with the current time.

        Idempotent: whitelisting a trusted identity is a no-op.

        Raises:
            StoreUnavailableError: Store cannot be reached.
            WhitelistWriteFailedError: Record could not be written.
        """
        ...

    async def revoke(self, identity: IdentityReference) -> None:
        """Remove the trust record (external revocation).

        Args:
            identity: Identity to forget.
        """
        ...


# ═══════════════════════════════════════════════════════════════
# BIOMETRIC CAPABILITY PORT
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class IBiometricCapability(Protocol):
    """Protocol for the platform biometric prompt."""

    async def is_available(self) -> bool:
        """Return True if biometric hardware is present and enrolled."""
        ...

    async def confirm(self, prompt: str) -> bool:
        """Show the biometric prompt.

        Args:
            prompt: Message shown to the user.

        Returns:
            True if confirmed, False if declined or failed.
        """
        ...


# ═══════════════════════════════════════════════════════════════
# AUDIT PORT
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class ISignInAuditStore(Protocol):
    """Protocol for sign-in audit event storage."""

    async def record(self, event: SignInAuditEvent) -> None:
        """Record an audit event."""
        ...

    async def get_events(
        self,
        identity_key: str,
        *,
        event_types: list[SignInEventType] | None = None,
        limit: int = 100,
    ) -> list[SignInAuditEvent]:
        """Get audit events for an identity, most recent first."""
        ...

    async def get_events_by_type(
        self,
        event_type: SignInEventType,
        *,
        limit: int = 100,
    ) -> list[SignInAuditEvent]:
        """Get audit events of one type across identities, most recent first."""
        ...


__all__: list[str] = [
    "IClock",
    "ICredentialBackend",
    "IDeviceTrustStore",
    "IBiometricCapability",
    "ISignInAuditStore",
]
