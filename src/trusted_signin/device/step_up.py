"""Biometric step-up authentication.

Absent biometric hardware never blocks a sign-in (UNAVAILABLE, proceed);
hardware that is present but fails or is cancelled aborts it (DECLINED).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..observability import SignInMetrics, SignInTracing
from ..ports import IBiometricCapability

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class StepUpResult(Enum):
    """Outcome of a biometric step-up."""

    CONFIRMED = "confirmed"
    DECLINED = "declined"
    UNAVAILABLE = "unavailable"


class StepUpAuthenticator:
    """Decides on and drives biometric confirmation.

    Example:
        ```python
        step_up = StepUpAuthenticator(biometrics=platform_biometrics)

        if step_up.is_required(trusted=False):
            result = await step_up.challenge()
        ```
    """

    def __init__(
        self,
        biometrics: IBiometricCapability,
        *,
        prompt: str = "Verify your identity",
    ) -> None:
        self.biometrics = biometrics
        self.prompt = prompt

    @staticmethod
    def is_required(*, trusted: bool, always: bool = False) -> bool:
        """Step-up is needed on untrusted devices, or always when asked.

        Args:
            trusted: Whether the device trust store recognises the identity.
            always: Force step-up even on trusted devices (business channel).
        """
        return always or not trusted

    async def is_available(self) -> bool:
        """Query the biometric hardware.

        Capability errors propagate and are never reported as missing
        hardware; challenge() counts them as DECLINED.
        """
        with SignInMetrics.operation("biometric_available"):
            return await self.biometrics.is_available()

    async def challenge(self) -> StepUpResult:
        """Run the biometric prompt if hardware is present.

        Errors raised by the capability, during the hardware check or the
        prompt, count as DECLINED: only a clean "no hardware" answer lets
        the sign-in proceed without confirmation.
        """
        with SignInTracing.span("step_up") as span:
            result = await self._run_prompt()
            span.set_attribute("signin.step_up.result", result.value)
            return result

    async def _run_prompt(self) -> StepUpResult:
        try:
            if not await self.is_available():
                return StepUpResult.UNAVAILABLE

            with SignInMetrics.operation("biometric_confirm"):
                confirmed = await self.biometrics.confirm(self.prompt)
        except Exception:
            logger.warning("Biometric authentication failed", exc_info=True)
            return StepUpResult.DECLINED

        return StepUpResult.CONFIRMED if confirmed else StepUpResult.DECLINED


class StaticBiometricCapability(IBiometricCapability):
    """Scripted biometric capability for tests and simulators.

    Example:
        ```python
        biometrics = StaticBiometricCapability(available=True, responses=[False])
        ```
    """

    def __init__(
        self,
        *,
        available: bool = True,
        responses: list[bool] | None = None,
        default: bool = True,
    ) -> None:
        self.available = available
        self.default = default
        self._responses: Iterator[bool] = iter(responses or [])
        self.prompts: list[str] = []

    async def is_available(self) -> bool:
        return self.available

    async def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return next(self._responses, self.default)


__all__: list[str] = [
    "StepUpResult",
    "StepUpAuthenticator",
    "StaticBiometricCapability",
]
