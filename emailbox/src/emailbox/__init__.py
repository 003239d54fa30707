"""
Module: emailbox.__init__

What:
  Aggregate package exports for the emailbox message store: an append-only,
  per-address record of message summaries with administrator-controlled
  size limits, running over a transactional ledger state.

Interfaces:
  - EmailBox: contract surface (send, limits, paginated inbox).
  - Address / EmailSummary: identities and stored records.
  - CallContext / MemoryState / SqliteState: the execution environment.
  - config, core, ledger, utils: subpackages.
"""

from .contract import EmailBox
from .core.address import Address
from .core.records import EmailSummary
from .ledger.context import CallContext
from .ledger.state import MemoryState, SqliteState

__all__ = [
    "EmailBox",
    "Address",
    "EmailSummary",
    "CallContext",
    "MemoryState",
    "SqliteState",
    "config",
    "core",
    "ledger",
    "utils",
]
