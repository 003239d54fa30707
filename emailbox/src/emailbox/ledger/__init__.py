"""In-process stand-in for the contract execution environment.

What:
  Provide the caller/timestamp context of a call, the transactional key/value
  state the contract persists into, and typed storage mappers over it.

Interfaces:
  - CallContext: caller address and block timestamp.
  - MemoryState / SqliteState: state backends with ``transaction()``.
  - SingleValueMapper / VecMapper: typed views over raw storage keys.
"""

from .context import CallContext
from .mappers import SingleValueMapper, VecMapper
from .state import LoggedEvent, MemoryState, SqliteState, StateBackend, StateError

__all__ = [
    "CallContext",
    "LoggedEvent",
    "MemoryState",
    "SingleValueMapper",
    "SqliteState",
    "StateBackend",
    "StateError",
    "VecMapper",
]
