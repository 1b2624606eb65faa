"""Per-identity mutual exclusion for sign-in sessions.

One sign-in attempt is processed at a time per identity. A second call for
the same identity waits in FIFO order (asyncio.Lock wakes waiters in order)
and is rejected with SessionBusyError when the wait exceeds the timeout or
the queue is full. Different identities never contend.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import SessionBusyError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger("trusted_signin.locking")


@dataclass
class _IdentityLock:
    """Lock plus the number of callers holding or waiting for it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class IdentityLockRegistry:
    """Registry of per-identity asyncio locks.

    Entries are created on first use and dropped once nobody holds or waits
    for them, so the registry does not grow with the number of identities
    ever seen.

    Example:
        ```python
        locks = IdentityLockRegistry(timeout=5.0)

        async with locks.hold(identity.key):
            ...  # exclusive for this identity
        ```
    """

    def __init__(self, *, timeout: float = 5.0, max_queue_size: int = 10) -> None:
        self.timeout = timeout
        self.max_queue_size = max_queue_size
        self._locks: dict[str, _IdentityLock] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block.

        Raises:
            SessionBusyError: Lock not acquired within the timeout, or too
                many callers already queued for this identity.
        """
        entry = self._locks.get(key)
        if entry is None:
            entry = _IdentityLock()
            self._locks[key] = entry

        # users includes the current holder
        if entry.users > self.max_queue_size:
            raise SessionBusyError(
                key,
                self.timeout,
                reason=f"queue full ({entry.users - 1}/{self.max_queue_size})",
            )

        entry.users += 1
        try:
            await self._acquire(key, entry)
            try:
                yield
            finally:
                entry.lock.release()
                logger.debug("Lock released: %s", key)
        finally:
            entry.users -= 1
            if entry.users == 0:
                self._locks.pop(key, None)
                logger.debug("Lock cleaned up: %s", key)

    async def _acquire(self, key: str, entry: _IdentityLock) -> None:
        if not entry.lock.locked():
            await entry.lock.acquire()
            logger.debug("Lock acquired immediately: %s", key)
            return

        logger.debug("Waiting for lock: %s (%d queued)", key, entry.users - 1)
        try:
            await asyncio.wait_for(entry.lock.acquire(), timeout=self.timeout)
        except asyncio.TimeoutError as err:
            logger.warning(
                "Lock acquisition for %s timed out after %.1fs", key, self.timeout
            )
            raise SessionBusyError(key, self.timeout) from err
        logger.debug("Lock acquired from queue: %s", key)

    def is_locked(self, key: str) -> bool:
        """Return True if a caller currently holds the lock for ``key``."""
        entry = self._locks.get(key)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


__all__: list[str] = ["IdentityLockRegistry"]
