"""Test configuration and fixtures."""

from __future__ import annotations

import pytest

from trusted_signin import (
    IdentityReference,
    InMemoryCredentialBackend,
    InMemoryDeviceTrustStore,
    InMemorySignInAuditStore,
    ManualClock,
    SignInConfig,
    SignInOrchestrator,
    StaticBiometricCapability,
    create_orchestrator,
)


CODE = "424242"


class FixedCodeBackend(InMemoryCredentialBackend):
    """Credential backend that always sends the same code."""

    def __init__(self, code: str = CODE) -> None:
        super().__init__(code_length=len(code))
        self.code = code

    def _generate_code(self) -> str:
        return self.code


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "scenario: end-to-end sign-in scenarios driven through the orchestrator",
    )


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock starting at 2024-01-01T00:00:00Z."""
    return ManualClock()


@pytest.fixture
def backend() -> InMemoryCredentialBackend:
    """Backend that always sends CODE."""
    return FixedCodeBackend()


@pytest.fixture
def trust_store(clock: ManualClock) -> InMemoryDeviceTrustStore:
    return InMemoryDeviceTrustStore(clock=clock)


@pytest.fixture
def biometrics() -> StaticBiometricCapability:
    """Biometric hardware present, confirms every prompt."""
    return StaticBiometricCapability(available=True)


@pytest.fixture
def audit_store() -> InMemorySignInAuditStore:
    return InMemorySignInAuditStore()


@pytest.fixture
def config() -> SignInConfig:
    return SignInConfig()


@pytest.fixture
def orchestrator(
    backend: InMemoryCredentialBackend,
    trust_store: InMemoryDeviceTrustStore,
    biometrics: StaticBiometricCapability,
    clock: ManualClock,
    config: SignInConfig,
    audit_store: InMemorySignInAuditStore,
) -> SignInOrchestrator:
    return create_orchestrator(
        backend=backend,
        trust_store=trust_store,
        biometrics=biometrics,
        clock=clock,
        config=config,
        audit_store=audit_store,
    )


@pytest.fixture
def phone() -> IdentityReference:
    return IdentityReference.phone("+2348011111111")


@pytest.fixture
def email() -> IdentityReference:
    return IdentityReference.email("user@example.com")


@pytest.fixture
def code() -> str:
    """The code FixedCodeBackend sends."""
    return CODE
