"""Tests for OTP challenge issuance and verification."""

from __future__ import annotations

import pytest

from trusted_signin import IdentityReference, ManualClock
from trusted_signin.exceptions import (
    BackendUnavailableError,
    ChallengeAlreadyConsumedError,
    InvalidCredentialsError,
    MalformedCodeError,
)
from trusted_signin.otp import (
    CooldownTimer,
    InMemoryCredentialBackend,
    OtpChallengeManager,
    VerificationResult,
)


class ExplodingBackend(InMemoryCredentialBackend):
    """Backend whose transport fails with a foreign exception."""

    async def send_code(self, identity: IdentityReference) -> None:
        raise ConnectionError("connection reset")


@pytest.fixture
def cooldown(clock: ManualClock) -> CooldownTimer:
    return CooldownTimer(clock)


@pytest.fixture
def manager(
    backend: InMemoryCredentialBackend,
    clock: ManualClock,
    cooldown: CooldownTimer,
) -> OtpChallengeManager:
    return OtpChallengeManager(backend=backend, clock=clock, cooldown=cooldown)


class TestIssue:
    """Test challenge issuance."""

    @pytest.mark.asyncio
    async def test_issue_sends_code_and_tracks_challenge(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        clock: ManualClock,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)

        assert backend.last_code(phone) is not None
        assert challenge.identity == phone
        assert challenge.channel == "phone"
        assert (challenge.expires_at - challenge.issued_at).total_seconds() == 300
        assert challenge.issued_at == clock.now()
        assert manager.active_challenge(phone) is challenge

    @pytest.mark.asyncio
    async def test_issue_starts_cooldown(
        self,
        manager: OtpChallengeManager,
        cooldown: CooldownTimer,
        phone: IdentityReference,
    ) -> None:
        await manager.issue(phone)

        assert cooldown.remaining(phone) == pytest.approx(60)

    @pytest.mark.asyncio
    async def test_reissue_supersedes_previous(
        self, manager: OtpChallengeManager, phone: IdentityReference
    ) -> None:
        first = await manager.issue(phone)
        second = await manager.issue(phone)

        assert first.consumed
        assert first.challenge_id != second.challenge_id
        assert manager.active_challenge(phone) is second

    @pytest.mark.asyncio
    async def test_backend_unavailable_propagates(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        cooldown: CooldownTimer,
        phone: IdentityReference,
    ) -> None:
        backend.available = False

        with pytest.raises(BackendUnavailableError):
            await manager.issue(phone)

        assert manager.active_challenge(phone) is None
        assert cooldown.is_eligible(phone)

    @pytest.mark.asyncio
    async def test_foreign_backend_error_is_wrapped(
        self, clock: ManualClock, cooldown: CooldownTimer, phone: IdentityReference
    ) -> None:
        manager = OtpChallengeManager(
            backend=ExplodingBackend(), clock=clock, cooldown=cooldown
        )

        with pytest.raises(BackendUnavailableError, match="connection reset") as exc:
            await manager.issue(phone)

        assert isinstance(exc.value.__cause__, ConnectionError)


class TestVerify:
    """Test code verification."""

    @pytest.mark.asyncio
    async def test_correct_code_accepted(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)

        result = await manager.verify(challenge, backend.last_code(phone) or "")

        assert result is VerificationResult.ACCEPTED
        assert challenge.consumed
        assert manager.active_challenge(phone) is None

    @pytest.mark.asyncio
    async def test_code_with_surrounding_whitespace_accepted(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)

        result = await manager.verify(challenge, f" {backend.last_code(phone)} ")

        assert result is VerificationResult.ACCEPTED

    @pytest.mark.asyncio
    async def test_wrong_code_rejected(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)
        wrong = "000000" if backend.last_code(phone) != "000000" else "111111"

        result = await manager.verify(challenge, wrong)

        assert result is VerificationResult.REJECTED
        assert not challenge.consumed
        assert manager.active_challenge(phone) is challenge

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["", "12345", "1234567", "12a456", "１２３４５６"])
    async def test_malformed_code_never_reaches_backend(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        phone: IdentityReference,
        code: str,
    ) -> None:
        challenge = await manager.issue(phone)

        with pytest.raises(MalformedCodeError, match="6-digit"):
            await manager.verify(challenge, code)

        assert backend.verify_calls == 0

    @pytest.mark.asyncio
    async def test_stale_challenge_is_never_accepted(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        phone: IdentityReference,
    ) -> None:
        stale = await manager.issue(phone)
        await manager.issue(phone)

        with pytest.raises(ChallengeAlreadyConsumedError):
            await manager.verify(stale, backend.last_code(phone) or "")

        assert backend.verify_calls == 0

    @pytest.mark.asyncio
    async def test_consumed_challenge_cannot_be_reused(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)
        code = backend.last_code(phone) or ""
        await manager.verify(challenge, code)

        with pytest.raises(ChallengeAlreadyConsumedError):
            await manager.verify(challenge, code)

    @pytest.mark.asyncio
    async def test_expiry_checked_before_backend(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        clock: ManualClock,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)
        clock.advance(301)

        result = await manager.verify(challenge, backend.last_code(phone) or "")

        assert result is VerificationResult.EXPIRED
        assert backend.verify_calls == 0

    @pytest.mark.asyncio
    async def test_deadline_itself_is_not_expired(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        clock: ManualClock,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)
        clock.advance(300)

        result = await manager.verify(challenge, backend.last_code(phone) or "")

        assert result is VerificationResult.ACCEPTED

    @pytest.mark.asyncio
    async def test_backend_outage_during_verify(
        self,
        manager: OtpChallengeManager,
        backend: InMemoryCredentialBackend,
        phone: IdentityReference,
    ) -> None:
        challenge = await manager.issue(phone)
        backend.available = False

        with pytest.raises(BackendUnavailableError):
            await manager.verify(challenge, "123456")

        assert manager.active_challenge(phone) is challenge

    def test_custom_code_length(
        self, backend: InMemoryCredentialBackend, clock: ManualClock
    ) -> None:
        manager = OtpChallengeManager(
            backend=backend,
            clock=clock,
            cooldown=CooldownTimer(clock),
            code_length=4,
        )

        assert manager.check_code_format(" 1234 ") == "1234"
        with pytest.raises(MalformedCodeError, match="4-digit"):
            manager.check_code_format("123456")


class TestInMemoryCredentialBackend:
    """Test the in-memory backend used by the suite."""

    @pytest.mark.asyncio
    async def test_codes_are_single_use(self, phone: IdentityReference) -> None:
        backend = InMemoryCredentialBackend()
        await backend.send_code(phone)
        code = backend.last_code(phone) or ""

        assert await backend.verify_code(phone, code)
        assert not await backend.verify_code(phone, code)

    @pytest.mark.asyncio
    async def test_generated_codes_have_configured_length(
        self, email: IdentityReference
    ) -> None:
        backend = InMemoryCredentialBackend(code_length=8)
        await backend.send_code(email)

        code = backend.last_code(email)
        assert code is not None
        assert len(code) == 8
        assert code.isdigit()

    @pytest.mark.asyncio
    async def test_password_check(self, email: IdentityReference) -> None:
        backend = InMemoryCredentialBackend()
        backend.register_password(email, "s3cret!")

        await backend.verify_password(email, "s3cret!")
        with pytest.raises(InvalidCredentialsError):
            await backend.verify_password(email, "wrong")
