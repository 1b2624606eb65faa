"""Device trust records.

A trust record says: this device completed a full verification for this
account. While it exists, sign-ins for the account may skip step-up.
Records are append-only apart from explicit revocation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from ..exceptions import StoreUnavailableError
from ..ports import IDeviceTrustStore

if TYPE_CHECKING:
    from ..identity import IdentityReference
    from ..ports import IClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceTrustRecord:
    """Whitelisting of one identity on this device.

    Attributes:
        identity_key: Identity the device is trusted for.
        whitelisted_at: When the record was created.
    """

    identity_key: str
    whitelisted_at: datetime


class InMemoryDeviceTrustStore(IDeviceTrustStore):
    """In-memory device trust store for development and testing.

    ⚠️ WARNING: Records live in a local dictionary and are lost on restart.

    Set ``available = False`` to simulate an unreachable store.

    Example:
        ```python
        store = InMemoryDeviceTrustStore(clock=SystemClock())
        await store.whitelist(identity)
        assert await store.is_trusted(identity)
        ```
    """

    def __init__(self, clock: IClock) -> None:
        self._clock = clock
        self._records: dict[str, DeviceTrustRecord] = {}
        self.available = True

    def _ensure_available(self) -> None:
        if not self.available:
            raise StoreUnavailableError("Device trust store is unreachable")

    async def is_trusted(self, identity: IdentityReference) -> bool:
        self._ensure_available()
        return identity.key in self._records

    async def whitelist(self, identity: IdentityReference) -> None:
        self._ensure_available()
        if identity.key in self._records:
            return
        self._records[identity.key] = DeviceTrustRecord(
            identity_key=identity.key,
            whitelisted_at=self._clock.now(),
        )
        logger.debug("Device whitelisted for %s", identity)

    async def revoke(self, identity: IdentityReference) -> None:
        self._ensure_available()
        if self._records.pop(identity.key, None) is not None:
            logger.info("Device trust revoked for %s", identity)

    def get_record(self, identity: IdentityReference) -> DeviceTrustRecord | None:
        return self._records.get(identity.key)

    def __len__(self) -> int:
        return len(self._records)


__all__: list[str] = ["DeviceTrustRecord", "InMemoryDeviceTrustStore"]
