"""SQLCipher helpers for encrypted ledger state.

What:
  Provide a guarded import of :mod:`pysqlcipher3` plus a convenience function
  for opening encrypted SQLite databases with optional PRAGMA configuration.

Why:
  Mailbox state holds subjects and previews. Deployments that configure an
  encryption key store it through SQLCipher; hosts without the driver must fail
  with a descriptive error instead of silently writing plaintext.

How:
  Attempt to import :mod:`pysqlcipher3`. When present,
  :func:`open_encrypted_database` calls ``sqlcipher.connect`` and applies the
  key followed by caller-supplied PRAGMAs.

Interfaces:
  :class:`SqlCipherUnavailable`, :func:`open_encrypted_database`.

Invariants & Safety:
  - Connections are only returned once ``PRAGMA key`` has executed.
  - Additional PRAGMAs are executed verbatim; callers must supply trusted
    values sourced from configuration.
"""
from __future__ import annotations

from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from pysqlcipher3 import dbapi2 as _sqlcipher

    SqlCipherConnection = _sqlcipher.Connection
else:  # pragma: no cover - runtime fallback
    SqlCipherConnection = object


try:  # pragma: no cover - optional dependency
    from pysqlcipher3 import dbapi2 as sqlcipher
except ImportError:  # pragma: no cover
    sqlcipher = None  # type: ignore[assignment]


class SqlCipherUnavailable(RuntimeError):
    """Raised when :mod:`pysqlcipher3` could not be imported."""


def open_encrypted_database(
    path: str,
    *,
    key: str,
    pragmas: Optional[Dict[str, str]] = None,
) -> SqlCipherConnection:
    """Open an encrypted SQLite database guarded by SQLCipher.

    Args:
      path: Filesystem path to the encrypted database file.
      key: Secret string used to derive the SQLCipher encryption key.
      pragmas: Optional mapping of PRAGMA directives
        (e.g., ``{"cipher_page_size": "4096"}``).

    Returns:
      Active SQLCipher connection object.

    Raises:
      SqlCipherUnavailable: If ``pysqlcipher3`` is not installed on the host.
    """

    if sqlcipher is None:
        raise SqlCipherUnavailable("SQLCipher driver pysqlcipher3 is required for encrypted state")
    connection = sqlcipher.connect(path)
    connection.execute("PRAGMA key = ?", (key,))
    for pragma, value in (pragmas or {}).items():
        connection.execute(f"PRAGMA {pragma} = {value}")
    return connection
