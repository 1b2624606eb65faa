"""Sign-in orchestrator.

One authoritative state machine for every sign-in channel. Phone and email
sign-ins enter at the challenge step; business sign-ins verify a password
first and join at the device trust check. Callers (screens, APIs) are thin
views over the returned snapshots and the transitions sent to listeners.

Flow:
    IDLE -> CHALLENGE_ISSUED -> VERIFYING -> [STEP_UP] -> WHITELISTING
         -> AUTHENTICATED

    with LOCKED_OUT (recoverable by a fresh challenge) and FAILED.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from ..audit import SignInEventType, signin_event, signin_failure_event
from ..config import SignInConfig
from ..device import StepUpResult
from ..exceptions import (
    BackendUnavailableError,
    ChallengeAlreadyConsumedError,
    CooldownActiveError,
    InvalidCredentialsError,
    InvalidIdentityError,
    InvalidSessionStateError,
    LockedOutError,
    SessionNotFoundError,
    SignInError,
    StoreUnavailableError,
    WhitelistWriteFailedError,
)
from ..locking import IdentityLockRegistry
from ..observability import SignInMetrics, SignInTracing
from ..otp import PolicyDecision, VerificationResult, guard_backend_call
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

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..audit import SignInAuditEvent
    from ..device import StepUpAuthenticator
    from ..identity import IdentityReference
    from ..otp import AttemptPolicy, CooldownTimer, OtpChallenge, OtpChallengeManager
    from ..ports import IClock, IDeviceTrustStore, ISignInAuditStore

    TransitionListener = Callable[[StateTransition], Awaitable[None]]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# States whose transitions carry the attempt outcome
_OUTCOME_STATES = frozenset(
    {SignInState.AUTHENTICATED, SignInState.FAILED, SignInState.LOCKED_OUT}
)


class SignInOrchestrator:
    """Drives sign-in attempts, one session per identity.

    Every mutating call runs under a per-identity lock: a second concurrent
    call for the same identity waits for the first (up to the configured
    timeout) instead of racing it. Different identities never contend.

    Counters, cooldown windows and active challenges are keyed by identity
    and outlive abandoned sessions, so a returning user resumes against
    the same limits.

    Example:
        ```python
        orchestrator = create_orchestrator(
            backend=backend,
            trust_store=trust_store,
            biometrics=biometrics,
        )

        identity = IdentityReference.phone("+2348011111111")
        snapshot = await orchestrator.begin_sign_in(identity)
        snapshot = await orchestrator.submit_code(identity, "123456")

        if snapshot.state is SignInState.AUTHENTICATED:
            ...
        ```
    """

    def __init__(
        self,
        *,
        challenges: OtpChallengeManager,
        policy: AttemptPolicy,
        cooldown: CooldownTimer,
        trust_store: IDeviceTrustStore,
        step_up: StepUpAuthenticator,
        clock: IClock,
        config: SignInConfig | None = None,
        audit_store: ISignInAuditStore | None = None,
        locks: IdentityLockRegistry | None = None,
    ) -> None:
        self.config = config or SignInConfig()
        self._challenges = challenges
        self._policy = policy
        self._cooldown = cooldown
        self._trust_store = trust_store
        self._step_up = step_up
        self._clock = clock
        self._audit_store = audit_store
        self._locks = locks or IdentityLockRegistry(
            timeout=self.config.session_lock_timeout,
            max_queue_size=self.config.max_queued_calls,
        )
        self._sessions: dict[str, SignInSession] = {}
        self._listeners: list[TransitionListener] = []

    # ═══════════════════════════════════════════════════════════════
    # OPERATIONS
    # ═══════════════════════════════════════════════════════════════

    async def begin_sign_in(self, identity: IdentityReference) -> SignInSnapshot:
        """Start (or resume) a phone or email sign-in.

        An in-progress attempt is returned as is. A challenge still active
        inside its cooldown window is resumed rather than re-sent. Otherwise
        a fresh code is requested, which also clears a lockout.

        Raises:
            CooldownActiveError: No live challenge to resume and the cooldown
                window has not elapsed.
            SessionBusyError: Another call for this identity is in flight.
        """
        async with self._locks.hold(identity.key):
            session = self._sessions.get(identity.key)
            if session is not None and self._is_resumable(session):
                logger.debug("Resuming sign-in for %s", identity)
                return self._snapshot(session)

            resumable = self._resumable_challenge(identity)

            session = SignInSession(identity=identity)
            self._sessions[identity.key] = session
            await self._audit(
                signin_event(
                    SignInEventType.SIGNIN_STARTED,
                    identity,
                    self._clock.now(),
                    metadata={"variant": session.variant.value},
                )
            )

            if resumable is not None:
                logger.debug(
                    "Resuming challenge %s for %s", resumable.challenge_id, identity
                )
                session.challenge = resumable
                await self._transition(session, SignInState.CHALLENGE_ISSUED)
                return self._snapshot(session)

            return await self._open_challenge(session)

    async def begin_business_sign_in(
        self, identity: IdentityReference, password: str
    ) -> SignInSnapshot:
        """Start a business sign-in with a password.

        The password is checked by the credential backend. On a trusted
        device the attempt goes straight to biometric step-up; on an
        unrecognised one an OTP challenge is sent first.

        Raises:
            CooldownActiveError: Untrusted device, no live challenge to resume
                and the cooldown window has not elapsed.
            SessionBusyError: Another call for this identity is in flight.
        """
        async with self._locks.hold(identity.key):
            previous = self._sessions.get(identity.key)
            session = SignInSession(identity=identity, variant=SignInVariant.BUSINESS)
            self._sessions[identity.key] = session
            await self._audit(
                signin_event(
                    SignInEventType.SIGNIN_STARTED,
                    identity,
                    self._clock.now(),
                    metadata={"variant": session.variant.value},
                )
            )

            try:
                with SignInTracing.span("verify_password", identity=identity):
                    with SignInMetrics.operation("verify_password"):
                        await guard_backend_call(
                            self._challenges.backend.verify_password(
                                identity, password
                            )
                        )
            except InvalidCredentialsError as exc:
                await self._audit(
                    signin_failure_event(
                        SignInEventType.PASSWORD_FAILED,
                        identity,
                        self._clock.now(),
                        error_code=exc.code,
                        error_message=str(exc),
                    )
                )
                return await self._fail(session, FailureReason.INVALID_CREDENTIALS)
            except BackendUnavailableError as exc:
                logger.warning("Password check for %s failed: %s", identity, exc)
                return await self._fail(session, FailureReason.BACKEND_UNAVAILABLE)

            trusted = await self._check_trust(session)
            session.device_trusted = trusted
            if trusted:
                try:
                    return await self._enter_step_up(session)
                except asyncio.CancelledError:
                    await self._settle_interrupted(session)
                    raise

            try:
                resumable = self._resumable_challenge(identity)
            except CooldownActiveError:
                if previous is not None:
                    self._sessions[identity.key] = previous
                else:
                    del self._sessions[identity.key]
                raise

            if resumable is not None:
                session.challenge = resumable
                await self._transition(session, SignInState.CHALLENGE_ISSUED)
                return self._snapshot(session)

            return await self._open_challenge(session)

    async def submit_code(self, identity: IdentityReference, code: str) -> SignInSnapshot:
        """Submit a one-time code for the active challenge.

        A wrong code with retries left returns a snapshot whose
        ``last_result`` is REJECTED; the exhausting failure returns a
        LOCKED_OUT snapshot. Backend failures raise and leave the attempt
        in CHALLENGE_ISSUED so the caller may retry.

        Raises:
            MalformedCodeError: Code is not ``code_length`` digits.
            LockedOutError: Attempts already exhausted.
            ChallengeAlreadyConsumedError: Attempt already authenticated or
                its challenge was superseded.
            InvalidSessionStateError: No challenge is awaiting a code.
            BackendUnavailableError: Backend cannot be reached.
        """
        async with self._locks.hold(identity.key):
            session = self._require_session(identity)

            if session.state is SignInState.LOCKED_OUT:
                raise LockedOutError(failed_attempts=self._policy.attempts(identity))
            if session.state is SignInState.AUTHENTICATED:
                raise ChallengeAlreadyConsumedError(
                    "This sign-in was already completed"
                )
            challenge = session.challenge
            if session.state is not SignInState.CHALLENGE_ISSUED or challenge is None:
                raise InvalidSessionStateError(
                    f"Cannot submit a code while {session.state.value}"
                )

            # Malformed codes never leave CHALLENGE_ISSUED
            self._challenges.check_code_format(code)

            await self._transition(session, SignInState.VERIFYING)
            try:
                result = await self._challenges.verify(challenge, code)
            except (SignInError, asyncio.CancelledError):
                await self._transition(session, SignInState.CHALLENGE_ISSUED)
                raise

            session.last_result = result

            if result is VerificationResult.EXPIRED:
                return await self._expire(session, challenge)
            if result is VerificationResult.REJECTED:
                return await self._reject(session, challenge)

            self._policy.reset(identity)
            session.challenge = None
            try:
                return await self._after_verification(session)
            except asyncio.CancelledError:
                await self._settle_interrupted(session)
                raise

    async def resend(self, identity: IdentityReference) -> SignInSnapshot:
        """Request a new code, superseding the current challenge.

        Allowed while a challenge is awaiting a code, after a lockout and
        after the challenge expired. Restarts the cooldown window; the
        attempt counter carries over unless the attempt was locked out.

        Raises:
            InvalidSessionStateError: Nothing to resend in the current state.
            CooldownActiveError: Cooldown window still open.
            BackendUnavailableError: Backend cannot be reached; the attempt
                is left unchanged.
        """
        async with self._locks.hold(identity.key):
            session = self._require_session(identity)

            expired = (
                session.outcome is not None
                and session.outcome.reason is FailureReason.CHALLENGE_EXPIRED
            )
            if (
                session.state
                not in (SignInState.CHALLENGE_ISSUED, SignInState.LOCKED_OUT)
                and not expired
            ):
                raise InvalidSessionStateError(
                    f"Cannot resend a code while {session.state.value}"
                )

            if not self._cooldown.is_eligible(identity):
                raise CooldownActiveError(self._cooldown.remaining(identity))

            return await self._issue(session, SignInEventType.CODE_RESENT)

    async def step_up_respond(self, identity: IdentityReference) -> SignInSnapshot:
        """Run the biometric prompt for an attempt parked in STEP_UP.

        Only needed with ``interactive_step_up``; otherwise the prompt runs
        as soon as the attempt reaches STEP_UP.

        Raises:
            InvalidSessionStateError: The attempt is not in STEP_UP.
        """
        async with self._locks.hold(identity.key):
            session = self._require_session(identity)
            if session.state is not SignInState.STEP_UP:
                raise InvalidSessionStateError(
                    f"No step-up pending, sign-in is {session.state.value}"
                )
            try:
                return await self._run_step_up(session)
            except asyncio.CancelledError:
                await self._settle_interrupted(session)
                raise

    async def abandon(self, identity: IdentityReference) -> None:
        """Drop the attempt for an identity (user navigated away).

        Attempt counters, cooldown windows and the active challenge are
        kept, so a later begin_sign_in() resumes against them.
        """
        async with self._locks.hold(identity.key):
            session = self._sessions.pop(identity.key, None)
            if session is None or session.state.is_terminal:
                return

            logger.info("Sign-in abandoned for %s in %s", identity, session.state.value)
            await self._audit(
                signin_event(
                    SignInEventType.SIGNIN_ABANDONED,
                    identity,
                    self._clock.now(),
                    metadata={"state": session.state.value},
                )
            )

    def snapshot(self, identity: IdentityReference) -> SignInSnapshot:
        """Return the current view of the attempt for an identity.

        Raises:
            SessionNotFoundError: No attempt exists for the identity.
        """
        return self._snapshot(self._require_session(identity))

    def subscribe(self, listener: TransitionListener) -> Callable[[], None]:
        """Register an async listener for state transitions.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ═══════════════════════════════════════════════════════════════
    # CHALLENGE STEPS
    # ═══════════════════════════════════════════════════════════════

    def _is_resumable(self, session: SignInSession) -> bool:
        if session.state is SignInState.STEP_UP:
            return True
        if session.state is not SignInState.CHALLENGE_ISSUED:
            return False
        active = self._challenges.active_challenge(session.identity)
        return active is not None and active is session.challenge

    def _resumable_challenge(self, identity: IdentityReference) -> OtpChallenge | None:
        """Gate a fresh request on the cooldown window.

        Returns None when a new code may be sent, or the live challenge to
        resume while the window is still open.

        Raises:
            CooldownActiveError: Window open and no live challenge.
        """
        if self._cooldown.is_eligible(identity):
            return None

        challenge = self._challenges.active_challenge(identity)
        if challenge is None:
            raise CooldownActiveError(self._cooldown.remaining(identity))
        return challenge

    async def _open_challenge(self, session: SignInSession) -> SignInSnapshot:
        try:
            return await self._issue(session, SignInEventType.CODE_SENT)
        except (BackendUnavailableError, InvalidIdentityError) as exc:
            logger.warning("Could not send a code to %s: %s", session.identity, exc)
            return await self._fail(session, FailureReason(exc.code))

    async def _issue(
        self, session: SignInSession, event_type: SignInEventType
    ) -> SignInSnapshot:
        identity = session.identity
        challenge = await self._challenges.issue(identity)

        # Resends keep the count; only a reissue after lockout clears it
        if self._policy.is_locked_out(identity):
            self._policy.reset(identity)
        session.challenge = challenge
        session.last_result = None
        session.outcome = None

        await self._audit(
            signin_event(
                event_type,
                identity,
                self._clock.now(),
                metadata={
                    "challenge_id": challenge.challenge_id,
                    "expires_at": challenge.expires_at.isoformat(),
                },
            )
        )
        await self._transition(session, SignInState.CHALLENGE_ISSUED)
        return self._snapshot(session)

    async def _reject(
        self, session: SignInSession, challenge: OtpChallenge
    ) -> SignInSnapshot:
        identity = session.identity
        decision = self._policy.record_failure(identity)

        await self._audit(
            signin_failure_event(
                SignInEventType.CODE_REJECTED,
                identity,
                self._clock.now(),
                error_code="REJECTED",
                metadata={"attempts_remaining": self._policy.remaining(identity)},
            )
        )

        if decision is PolicyDecision.LOCKOUT:
            self._challenges.discard(challenge)
            session.challenge = None
            return await self._lock_out(session)

        await self._transition(session, SignInState.CHALLENGE_ISSUED)
        return self._snapshot(session)

    async def _expire(
        self, session: SignInSession, challenge: OtpChallenge
    ) -> SignInSnapshot:
        self._challenges.discard(challenge)
        session.challenge = None
        await self._audit(
            signin_failure_event(
                SignInEventType.CODE_EXPIRED,
                session.identity,
                self._clock.now(),
                error_code=FailureReason.CHALLENGE_EXPIRED.value,
                metadata={"challenge_id": challenge.challenge_id},
            )
        )
        return await self._fail(session, FailureReason.CHALLENGE_EXPIRED)

    # ═══════════════════════════════════════════════════════════════
    # DEVICE TRUST STEPS
    # ═══════════════════════════════════════════════════════════════

    async def _after_verification(self, session: SignInSession) -> SignInSnapshot:
        trusted = await self._check_trust(session)
        session.device_trusted = trusted

        always = session.variant is SignInVariant.BUSINESS
        if self._step_up.is_required(trusted=trusted, always=always):
            return await self._enter_step_up(session)

        await self._audit(
            signin_event(
                SignInEventType.STEP_UP_SKIPPED,
                session.identity,
                self._clock.now(),
                metadata={"reason": "trusted_device"},
            )
        )
        return await self._whitelist_and_finish(session)

    async def _check_trust(self, session: SignInSession) -> bool:
        """Ask the trust store; an unreachable store means untrusted."""
        identity = session.identity
        try:
            with SignInTracing.span("is_trusted", identity=identity):
                with SignInMetrics.operation("is_trusted"):
                    return await _call_store(self._trust_store.is_trusted(identity))
        except StoreUnavailableError as exc:
            logger.warning(
                "Trust store unavailable for %s, treating device as untrusted: %s",
                identity,
                exc,
            )
            session.warnings.append(SignInWarning.TRUST_STORE_UNAVAILABLE)
            await self._audit(
                signin_failure_event(
                    SignInEventType.TRUST_STORE_UNAVAILABLE,
                    identity,
                    self._clock.now(),
                    error_code=exc.code,
                    error_message=str(exc),
                )
            )
            return False

    async def _enter_step_up(self, session: SignInSession) -> SignInSnapshot:
        await self._transition(session, SignInState.STEP_UP)
        if self.config.interactive_step_up:
            return self._snapshot(session)
        return await self._run_step_up(session)

    async def _run_step_up(self, session: SignInSession) -> SignInSnapshot:
        identity = session.identity
        result = await self._step_up.challenge()

        if result is StepUpResult.DECLINED:
            await self._audit(
                signin_failure_event(
                    SignInEventType.STEP_UP_DECLINED,
                    identity,
                    self._clock.now(),
                    error_code=FailureReason.STEP_UP_DECLINED.value,
                )
            )
            return await self._fail(session, FailureReason.STEP_UP_DECLINED)

        if result is StepUpResult.CONFIRMED:
            await self._audit(
                signin_event(
                    SignInEventType.STEP_UP_CONFIRMED, identity, self._clock.now()
                )
            )
        else:
            await self._audit(
                signin_event(
                    SignInEventType.STEP_UP_SKIPPED,
                    identity,
                    self._clock.now(),
                    metadata={"reason": "biometrics_unavailable"},
                )
            )
        return await self._whitelist_and_finish(session)

    async def _whitelist_and_finish(self, session: SignInSession) -> SignInSnapshot:
        identity = session.identity
        await self._transition(session, SignInState.WHITELISTING)

        try:
            with SignInTracing.span("whitelist", identity=identity):
                with SignInMetrics.operation("whitelist"):
                    await _call_store(self._trust_store.whitelist(identity))
        except StoreUnavailableError as exc:
            return await self._whitelist_failed(session, exc)

        session.device_trusted = True
        await self._audit(
            signin_event(
                SignInEventType.DEVICE_WHITELISTED, identity, self._clock.now()
            )
        )
        return await self._succeed(session)

    async def _whitelist_failed(
        self, session: SignInSession, cause: Exception | str
    ) -> SignInSnapshot:
        identity = session.identity
        error = WhitelistWriteFailedError(f"Could not remember this device: {cause}")
        logger.warning("Whitelisting failed for %s: %s", identity, cause)
        await self._audit(
            signin_failure_event(
                SignInEventType.WHITELIST_FAILED,
                identity,
                self._clock.now(),
                error_code=error.code,
                error_message=str(error),
            )
        )
        session.device_trusted = False
        if self.config.whitelist_failure_fatal:
            return await self._fail(session, FailureReason.WHITELIST_WRITE_FAILED)
        session.warnings.append(SignInWarning.WHITELIST_WRITE_FAILED)
        return await self._succeed(session)

    async def _settle_interrupted(self, session: SignInSession) -> None:
        """Move an attempt out of a transient state after a cancelled call.

        The code was already accepted at this point. A cancelled whitelist
        write is handled as a failed write; a cancelled trust check or
        prompt parks the attempt in STEP_UP for step_up_respond().
        """
        if session.state is SignInState.WHITELISTING:
            await self._whitelist_failed(session, "write was cancelled")
        elif session.state is SignInState.VERIFYING:
            await self._transition(session, SignInState.STEP_UP)

    # ═══════════════════════════════════════════════════════════════
    # OUTCOMES
    # ═══════════════════════════════════════════════════════════════

    async def _succeed(self, session: SignInSession) -> SignInSnapshot:
        identity = session.identity
        self._policy.reset(identity)
        session.outcome = SignInOutcome(
            kind=OutcomeKind.AUTHENTICATED,
            completed_at=self._clock.now(),
            device_trusted=session.device_trusted,
            warnings=tuple(session.warnings),
        )

        logger.info("Sign-in succeeded for %s", identity)
        SignInMetrics.record_outcome(
            identity.channel.value, OutcomeKind.AUTHENTICATED.value, None
        )
        await self._audit(
            signin_event(
                SignInEventType.SIGNIN_SUCCEEDED,
                identity,
                session.outcome.completed_at,
                metadata={
                    "variant": session.variant.value,
                    "device_trusted": session.device_trusted,
                    "warnings": [w.value for w in session.warnings],
                },
            )
        )
        await self._transition(session, SignInState.AUTHENTICATED)
        return self._snapshot(session)

    async def _fail(
        self, session: SignInSession, reason: FailureReason
    ) -> SignInSnapshot:
        identity = session.identity
        session.outcome = SignInOutcome(
            kind=OutcomeKind.FAILED,
            completed_at=self._clock.now(),
            reason=reason,
            device_trusted=session.device_trusted,
            warnings=tuple(session.warnings),
        )

        logger.info("Sign-in failed for %s: %s", identity, reason.value)
        SignInMetrics.record_outcome(
            identity.channel.value, OutcomeKind.FAILED.value, reason.value
        )
        await self._audit(
            signin_failure_event(
                SignInEventType.SIGNIN_FAILED,
                identity,
                session.outcome.completed_at,
                error_code=reason.value,
                metadata={"variant": session.variant.value},
            )
        )
        await self._transition(session, SignInState.FAILED)
        return self._snapshot(session)

    async def _lock_out(self, session: SignInSession) -> SignInSnapshot:
        identity = session.identity
        failed = self._policy.attempts(identity)
        session.outcome = SignInOutcome(
            kind=OutcomeKind.LOCKED_OUT,
            completed_at=self._clock.now(),
            reason=FailureReason.ATTEMPTS_EXHAUSTED,
        )

        logger.warning("Sign-in locked out for %s after %d attempts", identity, failed)
        SignInMetrics.record_outcome(
            identity.channel.value,
            OutcomeKind.LOCKED_OUT.value,
            FailureReason.ATTEMPTS_EXHAUSTED.value,
        )
        await self._audit(
            signin_failure_event(
                SignInEventType.LOCKED_OUT,
                identity,
                session.outcome.completed_at,
                error_code=LockedOutError.code,
                metadata={"failed_attempts": failed},
            )
        )
        await self._transition(session, SignInState.LOCKED_OUT)
        return self._snapshot(session)

    # ═══════════════════════════════════════════════════════════════
    # PLUMBING
    # ═══════════════════════════════════════════════════════════════

    async def _transition(self, session: SignInSession, to_state: SignInState) -> None:
        from_state = session.state
        session.state = to_state
        session.history.append(to_state)

        channel = session.identity.channel.value
        SignInMetrics.record_transition(channel, from_state.value, to_state.value)
        logger.debug(
            "Sign-in %s: %s -> %s", session.identity, from_state.value, to_state.value
        )

        await self._notify(
            StateTransition(
                identity=session.identity,
                from_state=from_state,
                to_state=to_state,
                at=self._clock.now(),
                outcome=session.outcome if to_state in _OUTCOME_STATES else None,
            )
        )

    async def _notify(self, transition: StateTransition) -> None:
        for listener in list(self._listeners):
            try:
                await listener(transition)
            except Exception:
                logger.warning(
                    "Sign-in listener %r failed on %s",
                    listener,
                    transition.to_state.value,
                    exc_info=True,
                )

    async def _audit(self, event: SignInAuditEvent) -> None:
        if self._audit_store is None:
            return
        try:
            await self._audit_store.record(event)
        except Exception:
            logger.warning(
                "Failed to record audit event %s", event.event_type.value, exc_info=True
            )

    def _snapshot(self, session: SignInSession) -> SignInSnapshot:
        identity = session.identity
        challenge = session.challenge
        return SignInSnapshot(
            identity=identity,
            state=session.state,
            variant=session.variant,
            history=tuple(session.history),
            attempts_remaining=self._policy.remaining(identity),
            resend_available_in=self._cooldown.remaining(identity),
            challenge_expires_at=challenge.expires_at if challenge else None,
            last_result=session.last_result,
            outcome=session.outcome,
        )

    def _require_session(self, identity: IdentityReference) -> SignInSession:
        session = self._sessions.get(identity.key)
        if session is None:
            raise SessionNotFoundError(f"No sign-in in progress for {identity}")
        return session


async def _call_store(awaitable: Awaitable[T]) -> T:
    """Await a trust store call; any other failure becomes StoreUnavailableError."""
    try:
        return await awaitable
    except StoreUnavailableError:
        raise
    except Exception as exc:
        raise StoreUnavailableError(f"Device trust store call failed: {exc}") from exc


__all__: list[str] = ["SignInOrchestrator"]
