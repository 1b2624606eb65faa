"""Sign-in observability helpers for metrics and tracing.

Usage:
    ```python
    from trusted_signin.observability import SignInMetrics, SignInTracing

    with SignInTracing.span("verify_code", identity=identity):
        with SignInMetrics.operation("verify_code"):
            accepted = await backend.verify_code(identity, code)
    ```
"""

from __future__ import annotations

from .metrics import SignInMetrics
from .tracing import TRACER_NAME, SignInTracing

__all__: list[str] = [
    # Metrics
    "SignInMetrics",
    # Tracing
    "SignInTracing",
    "TRACER_NAME",
]
