"""Device trust and biometric step-up."""

from .step_up import StaticBiometricCapability, StepUpAuthenticator, StepUpResult
from .trust import DeviceTrustRecord, InMemoryDeviceTrustStore

__all__: list[str] = [
    # Trust
    "DeviceTrustRecord",
    "InMemoryDeviceTrustStore",
    # Step-up
    "StepUpAuthenticator",
    "StepUpResult",
    "StaticBiometricCapability",
]
