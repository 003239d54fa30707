"""
Module: tests/unit/test_sqlcipher.py

What:
    Validate the SQLCipher convenience wrapper and its use by the SQLite
    ledger state when an encryption key is configured.

Why:
    Without these tests an encrypted deployment could silently fall back to a
    plaintext database, or skip the ``PRAGMA key`` statement.

How:
    Simulate the driver with monkeypatching to assert executed SQL, and check
    the helper raises when the bindings are absent.

Invariants & Safety Rules:
    - ``PRAGMA key`` must be issued on every connection before queries run.
    - Additional pragmas provided by the caller execute exactly once.
    - Driver absence must raise ``SqlCipherUnavailable``.
"""

import pytest

from emailbox.ledger import state as state_module
from emailbox.ledger.state import SqliteState
from emailbox.utils.sqlcipher import SqlCipherUnavailable, open_encrypted_database


def test_open_encrypted_database_executes_pragmas(monkeypatch):
    executed = []

    class FakeConnection:
        """Connection stub capturing executed statements."""

        def execute(self, sql, params=None):
            executed.append((sql, params))
            return None

    class FakeDriver:
        def connect(self, path):
            executed.append(("connect", path))
            return FakeConnection()

    module = __import__("emailbox.utils.sqlcipher", fromlist=["sqlcipher"])
    monkeypatch.setattr(module, "sqlcipher", FakeDriver(), raising=False)

    conn = open_encrypted_database("/tmp/test.db", key="secret", pragmas={"cipher_memory_security": "ON"})
    assert executed[0] == ("connect", "/tmp/test.db")
    assert ("PRAGMA key = ?", ("secret",)) in executed
    assert ("PRAGMA cipher_memory_security = ON", None) in executed
    assert isinstance(conn, FakeConnection)


def test_open_encrypted_database_requires_driver(monkeypatch):
    module = __import__("emailbox.utils.sqlcipher", fromlist=["sqlcipher"])
    monkeypatch.setattr(module, "sqlcipher", None, raising=False)
    with pytest.raises(SqlCipherUnavailable):
        open_encrypted_database("/tmp/test.db", key="secret")


def test_sqlite_state_uses_sqlcipher_when_keyed(monkeypatch, tmp_path):
    """A configured key routes the state through the encrypted opener."""

    import sqlite3

    calls = []

    def fake_open(path, *, key, pragmas=None):
        calls.append((path, key, pragmas))
        return sqlite3.connect(":memory:")

    monkeypatch.setattr(state_module, "open_encrypted_database", fake_open)
    state = SqliteState.open(tmp_path / "state.db", key="k", pragmas={"kdf_iter": "64000"})
    try:
        assert calls == [(str(tmp_path / "state.db"), "k", {"kdf_iter": "64000"})]
        with state.transaction():
            state.set(b"owner", b"x" * 32)
        assert state.get(b"owner") == b"x" * 32
    finally:
        state.close()


def test_sqlite_state_with_key_fails_without_driver(monkeypatch, tmp_path):
    module = __import__("emailbox.utils.sqlcipher", fromlist=["sqlcipher"])
    monkeypatch.setattr(module, "sqlcipher", None, raising=False)
    with pytest.raises(SqlCipherUnavailable):
        SqliteState.open(tmp_path / "state.db", key="k")
