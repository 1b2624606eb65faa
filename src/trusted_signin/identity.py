"""Identity reference value object.

An identity reference names the account signing in: a channel tag plus the
address the one-time code is delivered to. It is immutable for the whole
sign-in attempt and is the key every counter, cooldown and trust record
hangs off.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .exceptions import InvalidIdentityError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")

# Formatting characters users type into phone inputs
_PHONE_FORMATTING = re.compile(r"[\s\-().]")


class Channel(Enum):
    """Delivery channel for one-time codes."""

    PHONE = "phone"
    EMAIL = "email"


class IdentityReference(BaseModel):
    """Channel-tagged address of the account signing in.

    Phone addresses are normalized to E.164 (formatting characters removed),
    email addresses are trimmed and lower-cased.

    Example:
        ```python
        identity = IdentityReference.phone("+234 801 111 1111")
        identity.address  # "+2348011111111"
        identity.key      # "phone:+2348011111111"
        ```
    """

    model_config = ConfigDict(frozen=True)

    channel: Channel
    address: str

    @field_validator("address")
    @classmethod
    def _normalize_address(cls, value: str, info: ValidationInfo) -> str:
        channel = info.data.get("channel")
        cleaned = value.strip()
        if channel is Channel.PHONE:
            cleaned = _PHONE_FORMATTING.sub("", cleaned)
            if not E164_PATTERN.match(cleaned):
                raise ValueError("phone number must be in E.164 format")
        elif channel is Channel.EMAIL:
            cleaned = cleaned.lower()
            if not EMAIL_PATTERN.match(cleaned):
                raise ValueError("invalid email address")
        return cleaned

    @classmethod
    def parse(cls, address: str, channel: Channel | str) -> IdentityReference:
        """Build a validated identity reference.

        Raises:
            InvalidIdentityError: If the address is malformed for the channel.
        """
        try:
            return cls(channel=Channel(channel), address=address)
        except (ValidationError, ValueError) as exc:
            label = channel.value if isinstance(channel, Channel) else channel
            raise InvalidIdentityError(
                f"Invalid {label} identity: {mask_address(address)}"
            ) from exc

    @classmethod
    def phone(cls, number: str) -> IdentityReference:
        """Shortcut for a phone identity."""
        return cls.parse(number, Channel.PHONE)

    @classmethod
    def email(cls, address: str) -> IdentityReference:
        """Shortcut for an email identity."""
        return cls.parse(address, Channel.EMAIL)

    @property
    def key(self) -> str:
        """Stable key used by counters, cooldowns, locks and trust records."""
        return f"{self.channel.value}:{self.address}"

    @property
    def masked(self) -> str:
        """Address safe for logs and audit events."""
        return mask_address(self.address)

    def __str__(self) -> str:
        return f"{self.channel.value}:{self.masked}"


def mask_address(address: str) -> str:
    """Mask a phone number or email address for logging.

    Phone numbers keep their last four characters, email addresses keep the
    first and last character of the local part plus the domain.
    """
    raw = (address or "").strip()
    if "@" in raw:
        local, domain = raw.split("@", 1)
        if len(local) <= 2:
            local_masked = (local[0] + "*") if local else "***"
        else:
            local_masked = local[0] + ("*" * (len(local) - 2)) + local[-1]
        return f"{local_masked}@{domain}"
    if len(raw) <= 4:
        return "*" * len(raw)
    return f"{'*' * (len(raw) - 4)}{raw[-4:]}"


__all__: list[str] = [
    "Channel",
    "IdentityReference",
    "mask_address",
    "EMAIL_PATTERN",
    "E164_PATTERN",
]
