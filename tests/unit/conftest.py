"""Pytest fixtures for unit tests exercising a deployed contract.

What:
  Make ``tests/unit`` importable for the shared :mod:`accounts` helper and
  expose fixtures for an in-memory ledger state, a captured log stream, and
  a contract deployed by ``OWNER`` with default limits.

Invariants & Safety:
  - Each test receives a fresh :class:`MemoryState`; nothing leaks between
    tests.
  - Contract logs are written to an in-memory stream so assertions can
    inspect them.
"""

import io
import sys
from pathlib import Path

import pytest

from emailbox.contract import EmailBox
from emailbox.ledger.state import MemoryState
from emailbox.utils.logging import JsonLogger

UNIT_DIR = Path(__file__).resolve().parent
if str(UNIT_DIR) not in sys.path:
    sys.path.insert(0, str(UNIT_DIR))

from accounts import OWNER


@pytest.fixture
def state() -> MemoryState:
    return MemoryState()


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def box(state: MemoryState, log_stream: io.StringIO) -> EmailBox:
    """Yield a contract deployed by ``OWNER`` over the fresh in-memory state."""

    return EmailBox.deploy(state, OWNER, logger=JsonLogger(stream=log_stream, component="test"))
