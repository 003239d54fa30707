"""Account addresses identifying senders, recipients and the owner."""
from __future__ import annotations

import string
from dataclasses import dataclass

ADDRESS_LENGTH = 32
_NAME_PADDING = b"_"


@dataclass(frozen=True)
class Address:
    """A 32-byte account identifier.

    Addresses compare and hash by their raw bytes. Development setups often
    name accounts (``owner``, ``user2``); :meth:`from_name` right-pads such a
    name with ``_`` up to the full width.
    """

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes):
            raise TypeError("address must be built from bytes")
        if len(self.raw) != ADDRESS_LENGTH:
            raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(self.raw)}")

    @classmethod
    def from_name(cls, name: str) -> "Address":
        encoded = name.encode("utf-8")
        if not encoded or len(encoded) > ADDRESS_LENGTH:
            raise ValueError(f"account name must be 1..{ADDRESS_LENGTH} bytes: {name!r}")
        return cls(encoded.ljust(ADDRESS_LENGTH, _NAME_PADDING))

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        return cls(bytes.fromhex(value))

    @classmethod
    def parse(cls, value: str) -> "Address":
        """Accept either a 64-character hex string or an account name."""

        if len(value) == ADDRESS_LENGTH * 2 and all(ch in string.hexdigits for ch in value):
            return cls.from_hex(value)
        return cls.from_name(value)

    def hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.hex()
