"""Sign-in tracing over OpenTelemetry.

Without an SDK configured the OpenTelemetry API hands out non-recording
spans, so these helpers cost nothing in tests.

Usage:
    ```python
    from trusted_signin.observability import SignInTracing

    with SignInTracing.span("send_code", identity=identity):
        await backend.send_code(identity)
    ```
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator

    from ..identity import IdentityReference

TRACER_NAME = "trusted-signin"


class SignInTracing:
    """Span helpers for calls the orchestration core makes."""

    @staticmethod
    @contextmanager
    def span(
        operation: str,
        *,
        identity: IdentityReference | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> Generator[trace.Span, None, None]:
        """Context manager for a traced sign-in operation.

        Args:
            operation: Operation name (send_code, verify_code, whitelist, ...).
            identity: Identity the operation acts on; only the channel and
                the masked address are recorded.
            attributes: Additional span attributes.

        Yields:
            The active span.
        """
        tracer = trace.get_tracer(TRACER_NAME)
        with tracer.start_as_current_span(f"signin.{operation}") as span:
            span.set_attribute("signin.operation", operation)
            if identity is not None:
                span.set_attribute("signin.channel", identity.channel.value)
                span.set_attribute("signin.identity", identity.masked)
            if attributes:
                for key, value in attributes.items():
                    span.set_attribute(key, str(value))

            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise


__all__: list[str] = ["SignInTracing", "TRACER_NAME"]
