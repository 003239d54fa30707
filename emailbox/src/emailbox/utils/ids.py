"""Transaction identifiers and content checksums.

What:
  Provide helpers for creating unique transaction IDs and the SHA-256 content
  references used when a caller does not supply one.

How:
  Combines ISO8601 timestamps with random suffixes for IDs and wraps
  ``hashlib`` with a ``sha256:`` prefix for checksums.

Interfaces:
  :func:`new_tx_id` and :func:`checksum`.

Invariants & Safety:
  - Transaction IDs always include timezone-aware timestamps.
  - Checksums are namespaced with ``sha256:`` so other algorithms can coexist
    as content references (for example IPFS CIDs).
"""
from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timezone


def new_tx_id() -> str:
    """Return a unique identifier for a contract call.

    Returns:
      Identifier string such as ``2024-01-01T00:00:00+00:00#1a2b3c``.
    """

    timestamp = datetime.now(timezone.utc).isoformat()
    suffix = secrets.token_hex(3)
    return f"{timestamp}#{suffix}"


def checksum(data: bytes) -> str:
    """Compute a namespaced SHA-256 digest for ``data``."""

    return f"sha256:{hashlib.sha256(data).hexdigest()}"
