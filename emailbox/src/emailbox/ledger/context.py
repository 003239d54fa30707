"""Per-call execution context supplied by the ledger."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from ..core.address import Address

U64_MAX = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class CallContext:
    """Who is calling, and the block timestamp the call executes at.

    Attributes:
      caller: Address that signed the call.
      timestamp: Block timestamp in seconds since the epoch (u64).
    """

    caller: Address
    timestamp: int

    def __post_init__(self) -> None:
        if not isinstance(self.caller, Address):
            raise TypeError("caller must be an Address")
        if not 0 <= self.timestamp <= U64_MAX:
            raise ValueError(f"timestamp out of u64 range: {self.timestamp}")

    @classmethod
    def at(cls, caller: Address, timestamp: Optional[int] = None) -> "CallContext":
        """Build a context, stamping the current wall clock when ``timestamp`` is omitted."""

        return cls(caller=caller, timestamp=int(time.time()) if timestamp is None else timestamp)
