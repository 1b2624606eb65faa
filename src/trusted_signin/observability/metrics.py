"""Sign-in metrics over prometheus_client.

Usage:
    ```python
    from trusted_signin.observability import SignInMetrics

    with SignInMetrics.operation("send_code"):
        await backend.send_code(identity)

    SignInMetrics.record_transition("phone", "challenge_issued", "verifying")
    ```
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Generator


class _SignInMetricsRegistry:
    """Registry for sign-in Prometheus metrics.

    Lazily creates the collectors on first use so importing the package
    never registers anything.
    """

    def __init__(self) -> None:
        self._transitions: Counter | None = None
        self._outcomes: Counter | None = None
        self._duration: Histogram | None = None

    def _ensure_initialized(self) -> None:
        if self._transitions is not None:
            return

        self._transitions = Counter(
            "signin_transitions_total",
            "Sign-in state machine transitions",
            ["channel", "from_state", "to_state"],
        )
        self._outcomes = Counter(
            "signin_outcomes_total",
            "Terminal sign-in outcomes",
            ["channel", "outcome", "reason"],
        )
        self._duration = Histogram(
            "signin_operation_duration_seconds",
            "Duration of calls to sign-in collaborators",
            ["operation", "result"],
        )

    @property
    def transitions(self) -> Counter:
        self._ensure_initialized()
        assert self._transitions is not None
        return self._transitions

    @property
    def outcomes(self) -> Counter:
        self._ensure_initialized()
        assert self._outcomes is not None
        return self._outcomes

    @property
    def duration(self) -> Histogram:
        self._ensure_initialized()
        assert self._duration is not None
        return self._duration


# Global registry instance
_registry = _SignInMetricsRegistry()


class SignInMetrics:
    """Helpers for recording sign-in metrics.

    Metric failures are logged and never interrupt a sign-in.
    """

    @staticmethod
    @contextmanager
    def operation(operation: str) -> Generator[None, None, None]:
        """Time a collaborator call.

        Args:
            operation: Operation name (send_code, verify_code, is_trusted, ...).
        """
        result = "success"
        start = time.monotonic()

        try:
            yield
        except Exception:
            result = "error"
            raise
        finally:
            duration = time.monotonic() - start
            try:
                _registry.duration.labels(
                    operation=operation, result=result
                ).observe(duration)
            except Exception:
                _logger.debug("Failed to record duration for %s", operation)

    @staticmethod
    def record_transition(channel: str, from_state: str, to_state: str) -> None:
        """Count one state machine transition."""
        try:
            _registry.transitions.labels(
                channel=channel, from_state=from_state, to_state=to_state
            ).inc()
        except Exception:
            _logger.debug("Failed to record transition %s -> %s", from_state, to_state)

    @staticmethod
    def record_outcome(channel: str, outcome: str, reason: str | None) -> None:
        """Count one terminal outcome."""
        try:
            _registry.outcomes.labels(
                channel=channel, outcome=outcome, reason=reason or "none"
            ).inc()
        except Exception:
            _logger.debug("Failed to record outcome %s", outcome)


__all__: list[str] = ["SignInMetrics"]
