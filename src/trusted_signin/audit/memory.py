"""In-memory audit store for testing and development."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from ..ports import ISignInAuditStore

if TYPE_CHECKING:
    from .events import SignInAuditEvent, SignInEventType


class InMemorySignInAuditStore(ISignInAuditStore):
    """In-memory implementation of ISignInAuditStore.

    Note:
        Events are stored in memory and will be lost on restart.
        Not suitable for production use.

    Example:
        ```python
        store = InMemorySignInAuditStore()
        orchestrator = create_orchestrator(..., audit_store=store)

        events = await store.get_events(identity.key)
        ```
    """

    def __init__(self) -> None:
        self._events: list[SignInAuditEvent] = []
        self._by_identity: dict[str, list[int]] = defaultdict(list)
        self._by_type: dict[str, list[int]] = defaultdict(list)

    async def record(self, event: SignInAuditEvent) -> None:
        index = len(self._events)
        self._events.append(event)

        if event.identity_key:
            self._by_identity[event.identity_key].append(index)
        self._by_type[event.event_type.value].append(index)

    async def get_events(
        self,
        identity_key: str,
        *,
        event_types: list[SignInEventType] | None = None,
        limit: int = 100,
    ) -> list[SignInAuditEvent]:
        indices = self._by_identity.get(identity_key, [])

        results: list[SignInAuditEvent] = []
        for idx in reversed(indices):  # Most recent first
            event = self._events[idx]
            if event_types and event.event_type not in event_types:
                continue
            results.append(event)
            if len(results) >= limit:
                break

        return results

    async def get_events_by_type(
        self,
        event_type: SignInEventType,
        *,
        limit: int = 100,
    ) -> list[SignInAuditEvent]:
        indices = self._by_type.get(event_type.value, [])
        return [self._events[idx] for idx in reversed(indices)][:limit]

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        """Clear all events. Useful for testing cleanup."""
        self._events.clear()
        self._by_identity.clear()
        self._by_type.clear()


__all__: list[str] = ["InMemorySignInAuditStore"]
