from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import os
import uuid


def uuid7(ts: datetime | None = None) -> uuid.UUID:
    """Build a version 7 UUID: 48-bit unix-ms timestamp, then random bits."""

    moment = ts or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    unix_ms = int(moment.timestamp() * 1000)
    if not 0 <= unix_ms < (1 << 48):
        raise ValueError("timestamp out of range for uuid7")

    rand = int.from_bytes(os.urandom(10), "big")
    rand_a = rand >> 68
    rand_b = rand & ((1 << 62) - 1)

    value = unix_ms << 80
    value |= 0x7 << 76
    value |= rand_a << 64
    value |= 0b10 << 62
    value |= rand_b
    return uuid.UUID(int=value)


@dataclass(frozen=True, order=True)
class _UuidId:
    value: uuid.UUID

    @classmethod
    def create(cls):
        return cls(uuid7())

    @classmethod
    def create_with_timestamp(cls, ts: datetime):
        return cls(uuid7(ts))

    @classmethod
    def parse(cls, text: str):
        return cls(uuid.UUID(str(text)))

    def __str__(self) -> str:
        return str(self.value)


class StoryId(_UuidId):
    """Identifier of a stored story."""


class UserId(_UuidId):
    """Identifier of a user."""


class RoleId(_UuidId):
    """Identifier of a role."""
