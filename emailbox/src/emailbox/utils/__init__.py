"""Expose the public utility surface for emailbox.

Interfaces:
  ``get_logger``, ``JsonLogger``, ``new_tx_id``, ``checksum``,
  ``SqlCipherUnavailable``, and ``open_encrypted_database``.
"""

from .logging import JsonLogger, get_logger
from .ids import new_tx_id, checksum
from .sqlcipher import SqlCipherUnavailable, open_encrypted_database

__all__ = [
    "get_logger",
    "JsonLogger",
    "new_tx_id",
    "checksum",
    "SqlCipherUnavailable",
    "open_encrypted_database",
]
