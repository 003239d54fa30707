"""Ledger state backends with all-or-nothing transactions.

What:
  Store the contract's key/value state and its ordered event log. Two
  backends share one interface: :class:`MemoryState` for tests and embedded
  use, :class:`SqliteState` for durable state on disk (optionally encrypted
  through SQLCipher).

Why:
  Contract calls must either land completely or leave no trace. Writes and
  events therefore only happen inside :meth:`transaction`; an exception
  escaping the block discards everything the call wrote.

How:
  ``MemoryState`` stages writes and events in an overlay that is merged on
  success and dropped on failure. ``SqliteState`` relies on the sqlite3
  connection context manager, which commits on success and rolls back when
  the block raises.

Interfaces:
  :class:`StateBackend`, :class:`LoggedEvent`, :class:`MemoryState`,
  :class:`SqliteState`, :class:`StateError`.

Invariants & Safety:
  - Reads inside a transaction observe that transaction's own writes.
  - Events become visible through :meth:`events` only after commit.
  - Transactions do not nest.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple, Union

from ..utils.sqlcipher import open_encrypted_database


class StateError(RuntimeError):
    """Raised when the state is used outside its transaction discipline."""


@dataclass(frozen=True)
class LoggedEvent:
    """One committed entry of the event log."""

    seq: int
    identifier: str
    data: bytes


class StateBackend(Protocol):
    """Interface shared by every ledger state backend."""

    def get(self, key: bytes) -> Optional[bytes]: ...

    def set(self, key: bytes, value: bytes) -> None: ...

    def emit(self, identifier: str, data: bytes) -> None: ...

    def events(self) -> List[LoggedEvent]: ...

    def transaction(self) -> Any: ...


@dataclass
class _Overlay:
    writes: Dict[bytes, bytes] = field(default_factory=dict)
    events: List[Tuple[str, bytes]] = field(default_factory=list)


class MemoryState:
    """In-process state whose transactions stage writes in an overlay."""

    def __init__(self) -> None:
        self._storage: Dict[bytes, bytes] = {}
        self._events: List[LoggedEvent] = []
        self._pending: Optional[_Overlay] = None

    def get(self, key: bytes) -> Optional[bytes]:
        if self._pending is not None and key in self._pending.writes:
            return self._pending.writes[key]
        return self._storage.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._require_transaction().writes[key] = bytes(value)

    def emit(self, identifier: str, data: bytes) -> None:
        self._require_transaction().events.append((identifier, bytes(data)))

    def events(self) -> List[LoggedEvent]:
        return list(self._events)

    def keys(self) -> List[bytes]:
        """Return committed storage keys in sorted order."""

        return sorted(self._storage)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._pending is not None:
            raise StateError("transaction already open")
        overlay = _Overlay()
        self._pending = overlay
        try:
            yield
        finally:
            self._pending = None
        # Only reached when the block completed without raising.
        self._storage.update(overlay.writes)
        for identifier, data in overlay.events:
            self._events.append(LoggedEvent(len(self._events) + 1, identifier, data))

    def _require_transaction(self) -> _Overlay:
        if self._pending is None:
            raise StateError("state writes require an open transaction")
        return self._pending


class SqliteState:
    """Durable state stored in a SQLite (or SQLCipher) database."""

    SCHEMA = (
        "CREATE TABLE IF NOT EXISTS storage (key BLOB PRIMARY KEY, value BLOB NOT NULL)",
        "CREATE TABLE IF NOT EXISTS events ("
        "seq INTEGER PRIMARY KEY AUTOINCREMENT, identifier TEXT NOT NULL, data BLOB NOT NULL)",
    )

    def __init__(self, connection: Any) -> None:
        self._conn = connection
        self._in_transaction = False
        self._pending_events: List[Tuple[str, bytes]] = []
        with self._conn:
            for statement in self.SCHEMA:
                self._conn.execute(statement)

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        *,
        key: Optional[str] = None,
        pragmas: Optional[Dict[str, str]] = None,
    ) -> "SqliteState":
        """Open (creating if needed) the state database at ``path``.

        Args:
          path: Database file, or ``":memory:"``.
          key: SQLCipher passphrase; when given the database is encrypted.
          pragmas: Extra PRAGMA directives applied after connecting.

        Raises:
          SqlCipherUnavailable: If ``key`` is set but SQLCipher is missing.
        """

        target = str(path)
        if target != ":memory:":
            Path(target).parent.mkdir(parents=True, exist_ok=True)
        if key is not None:
            connection = open_encrypted_database(target, key=key, pragmas=pragmas)
        else:
            connection = sqlite3.connect(target)
            for pragma, value in (pragmas or {}).items():
                connection.execute(f"PRAGMA {pragma} = {value}")
        return cls(connection)

    def get(self, key: bytes) -> Optional[bytes]:
        row = self._conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
        return None if row is None else bytes(row[0])

    def set(self, key: bytes, value: bytes) -> None:
        self._require_transaction()
        self._conn.execute(
            "INSERT OR REPLACE INTO storage (key, value) VALUES (?, ?)",
            (key, bytes(value)),
        )

    def emit(self, identifier: str, data: bytes) -> None:
        self._require_transaction()
        self._pending_events.append((identifier, bytes(data)))

    def events(self) -> List[LoggedEvent]:
        rows = self._conn.execute("SELECT seq, identifier, data FROM events ORDER BY seq").fetchall()
        return [LoggedEvent(int(seq), identifier, bytes(data)) for seq, identifier, data in rows]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            raise StateError("transaction already open")
        self._in_transaction = True
        self._pending_events = []
        try:
            with self._conn:
                yield
                # Events are inserted last so readers never see them before commit.
                self._conn.executemany(
                    "INSERT INTO events (identifier, data) VALUES (?, ?)",
                    self._pending_events,
                )
        finally:
            self._in_transaction = False
            self._pending_events = []

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqliteState":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _require_transaction(self) -> None:
        if not self._in_transaction:
            raise StateError("state writes require an open transaction")
