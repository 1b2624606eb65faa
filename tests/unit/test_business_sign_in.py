"""Tests for the business (password first) sign-in variant."""

from __future__ import annotations

import pytest

from trusted_signin import (
    FailureReason,
    IdentityReference,
    InMemoryCredentialBackend,
    InMemoryDeviceTrustStore,
    InMemorySignInAuditStore,
    ManualClock,
    SignInEventType,
    SignInOrchestrator,
    SignInState,
    SignInVariant,
    StaticBiometricCapability,
)
from trusted_signin.exceptions import CooldownActiveError, InvalidCredentialsError

PASSWORD = "C0rrect-Horse"  # noqa: S105


@pytest.fixture
def account(
    backend: InMemoryCredentialBackend, email: IdentityReference
) -> IdentityReference:
    backend.register_password(email, PASSWORD)
    return email


class TestPasswordStep:
    """Test the password check that opens a business sign-in."""

    @pytest.mark.asyncio
    async def test_wrong_password_fails(
        self,
        orchestrator: SignInOrchestrator,
        backend: InMemoryCredentialBackend,
        audit_store: InMemorySignInAuditStore,
        account: IdentityReference,
    ) -> None:
        snapshot = await orchestrator.begin_business_sign_in(account, "nope")

        assert snapshot.state is SignInState.FAILED
        assert snapshot.variant is SignInVariant.BUSINESS
        assert snapshot.outcome is not None
        assert snapshot.outcome.reason is FailureReason.INVALID_CREDENTIALS
        assert backend.sent == []
        assert len(
            await audit_store.get_events_by_type(SignInEventType.PASSWORD_FAILED)
        ) == 1
        with pytest.raises(InvalidCredentialsError):
            snapshot.raise_for_outcome()

    @pytest.mark.asyncio
    async def test_backend_outage_fails(
        self,
        orchestrator: SignInOrchestrator,
        backend: InMemoryCredentialBackend,
        account: IdentityReference,
    ) -> None:
        backend.available = False

        snapshot = await orchestrator.begin_business_sign_in(account, PASSWORD)

        assert snapshot.outcome is not None
        assert snapshot.outcome.reason is FailureReason.BACKEND_UNAVAILABLE


class TestTrustedDevice:
    """Test business sign-in on a recognised device."""

    @pytest.mark.asyncio
    async def test_goes_straight_to_step_up(
        self,
        orchestrator: SignInOrchestrator,
        backend: InMemoryCredentialBackend,
        trust_store: InMemoryDeviceTrustStore,
        biometrics: StaticBiometricCapability,
        account: IdentityReference,
    ) -> None:
        await trust_store.whitelist(account)

        snapshot = await orchestrator.begin_business_sign_in(account, PASSWORD)

        assert snapshot.state is SignInState.AUTHENTICATED
        assert snapshot.history == (
            SignInState.IDLE,
            SignInState.STEP_UP,
            SignInState.WHITELISTING,
            SignInState.AUTHENTICATED,
        )
        assert biometrics.prompts == ["Verify your identity"]
        assert backend.sent == []

    @pytest.mark.asyncio
    async def test_no_biometric_hardware_proceeds(
        self,
        orchestrator: SignInOrchestrator,
        trust_store: InMemoryDeviceTrustStore,
        biometrics: StaticBiometricCapability,
        account: IdentityReference,
    ) -> None:
        await trust_store.whitelist(account)
        biometrics.available = False

        snapshot = await orchestrator.begin_business_sign_in(account, PASSWORD)

        assert snapshot.state is SignInState.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_declined_step_up_fails(
        self,
        orchestrator: SignInOrchestrator,
        trust_store: InMemoryDeviceTrustStore,
        biometrics: StaticBiometricCapability,
        account: IdentityReference,
    ) -> None:
        await trust_store.whitelist(account)
        biometrics.default = False

        snapshot = await orchestrator.begin_business_sign_in(account, PASSWORD)

        assert snapshot.state is SignInState.FAILED
        assert snapshot.outcome is not None
        assert snapshot.outcome.reason is FailureReason.STEP_UP_DECLINED
        # Existing trust is left alone
        assert await trust_store.is_trusted(account)


class TestUntrustedDevice:
    """Test business sign-in on an unrecognised device."""

    @pytest.mark.asyncio
    async def test_requires_code_then_step_up(
        self,
        orchestrator: SignInOrchestrator,
        backend: InMemoryCredentialBackend,
        trust_store: InMemoryDeviceTrustStore,
        biometrics: StaticBiometricCapability,
        account: IdentityReference,
        code: str,
    ) -> None:
        snapshot = await orchestrator.begin_business_sign_in(account, PASSWORD)

        assert snapshot.state is SignInState.CHALLENGE_ISSUED
        assert len(backend.sent) == 1

        snapshot = await orchestrator.submit_code(account, code)

        assert snapshot.state is SignInState.AUTHENTICATED
        assert SignInState.STEP_UP in snapshot.history
        assert biometrics.prompts == ["Verify your identity"]
        assert await trust_store.is_trusted(account)

    @pytest.mark.asyncio
    async def test_unreachable_trust_store_requires_code(
        self,
        orchestrator: SignInOrchestrator,
        backend: InMemoryCredentialBackend,
        trust_store: InMemoryDeviceTrustStore,
        account: IdentityReference,
    ) -> None:
        await trust_store.whitelist(account)
        trust_store.available = False

        snapshot = await orchestrator.begin_business_sign_in(account, PASSWORD)

        assert snapshot.state is SignInState.CHALLENGE_ISSUED
        assert len(backend.sent) == 1

    @pytest.mark.asyncio
    async def test_cooldown_keeps_previous_attempt(
        self,
        orchestrator: SignInOrchestrator,
        account: IdentityReference,
    ) -> None:
        await orchestrator.begin_sign_in(account)
        for _ in range(3):
            await orchestrator.submit_code(account, "000000")

        with pytest.raises(CooldownActiveError):
            await orchestrator.begin_business_sign_in(account, PASSWORD)

        snapshot = orchestrator.snapshot(account)
        assert snapshot.state is SignInState.LOCKED_OUT
        assert snapshot.variant is SignInVariant.STANDARD

    @pytest.mark.asyncio
    async def test_live_challenge_is_reused(
        self,
        orchestrator: SignInOrchestrator,
        backend: InMemoryCredentialBackend,
        clock: ManualClock,
        account: IdentityReference,
        code: str,
    ) -> None:
        await orchestrator.begin_business_sign_in(account, PASSWORD)
        clock.advance(5)

        snapshot = await orchestrator.begin_business_sign_in(account, PASSWORD)

        assert snapshot.state is SignInState.CHALLENGE_ISSUED
        assert len(backend.sent) == 1
        snapshot = await orchestrator.submit_code(account, code)
        assert snapshot.state is SignInState.AUTHENTICATED
