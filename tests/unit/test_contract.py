"""
Module: tests/unit/test_contract.py

What:
    Exercise the contract surface end to end: deployment, sending, the
    all-or-nothing behaviour of rejected sends, event publication, and the
    structured logs each call leaves behind.

How:
    Use the ``box`` fixture (deployed by ``OWNER`` over a fresh in-memory
    state) and observe lists, events, and the captured JSON log stream.
"""

import json

import pytest

from accounts import BLOCK_TIMESTAMP, OWNER, USER2, USER3, call
from emailbox.codec import decode_many
from emailbox.contract import EmailBox
from emailbox.core.errors import AlreadyDeployed, ContentTooLarge, NotDeployed, PreviewSizeOutOfRange
from emailbox.core.store import ListKind
from emailbox.ledger.state import MemoryState

HELLO = b"Hello, World!"


def _log_entries(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_send_hello_world(box):
    record = box.send_email(call(OWNER), USER2, HELLO, HELLO, HELLO)

    assert record.preview == HELLO
    assert record.subject == HELLO
    assert record.ipfs_hash == HELLO
    assert record.timestamp == BLOCK_TIMESTAMP
    assert (record.sender, record.recipient) == (OWNER, USER2)
    assert box.store.len(USER2, ListKind.INBOX) == 1
    assert box.store.len(OWNER, ListKind.SENT) == 1
    assert decode_many(box.get_inbox(call(USER2), 10, 0)) == [record]


def test_each_send_grows_both_lists_by_one(box):
    for n in range(1, 4):
        box.send_email(call(USER3), USER2, b"s", b"c" * n, b"r")
        assert box.store.len(USER3, ListKind.SENT) == n
        assert box.store.len(USER2, ListKind.INBOX) == n
        sent = box.store.iter(USER3, ListKind.SENT)[n - 1]
        received = box.store.iter(USER2, ListKind.INBOX)[n - 1]
        assert sent == received


def test_content_at_limit_succeeds_and_one_more_byte_fails(box):
    box.set_max_content_size(call(OWNER), 1000)
    box.send_email(call(USER2), USER3, b"s", b"a" * 1000, b"r")

    with pytest.raises(ContentTooLarge):
        box.send_email(call(USER2), USER3, b"s", b"a" * 1001, b"r")

    assert box.store.len(USER2, ListKind.SENT) == 1
    assert box.store.len(USER3, ListKind.INBOX) == 1
    assert len(box.events()) == 1


def test_limit_changes_do_not_rewrite_stored_records(box):
    first = box.send_email(call(USER2), USER3, b"s", b"b" * 300, b"r")
    box.set_max_preview_size(call(OWNER), 250)
    second = box.send_email(call(USER2), USER3, b"s", b"b" * 300, b"r")

    stored = list(box.store.iter(USER3, ListKind.INBOX))
    assert [len(r.preview) for r in stored] == [100, 250]
    assert stored == [first, second]


def test_successful_send_publishes_one_event(box):
    record = box.send_email(call(OWNER), USER2, b"s", b"c", b"r")
    events = box.events()
    assert len(events) == 1
    assert events[0].identifier == "email_sent"
    assert events[0].summary == record


def test_deploy_twice_is_rejected(box, state):
    with pytest.raises(AlreadyDeployed):
        EmailBox.deploy(state, USER2)
    assert box.owner == OWNER


def test_deploy_with_custom_limits():
    box = EmailBox.deploy(MemoryState(), OWNER, max_preview_size=60, max_content_size=600)
    assert (box.get_max_preview_size(), box.get_max_content_size()) == (60, 600)


def test_deploy_with_invalid_limits_leaves_state_empty():
    state = MemoryState()
    with pytest.raises(PreviewSizeOutOfRange):
        EmailBox.deploy(state, OWNER, max_preview_size=10)
    assert state.keys() == []
    assert not EmailBox(state).deployed


def test_endpoints_require_deployment():
    box = EmailBox(MemoryState())
    with pytest.raises(NotDeployed):
        box.get_max_preview_size()
    with pytest.raises(NotDeployed):
        box.send_email(call(OWNER), USER2, b"s", b"c", b"r")
    with pytest.raises(NotDeployed):
        box.get_inbox(call(USER2), 1, 0)
    with pytest.raises(NotDeployed):
        box.owner


def test_logs_record_calls_without_message_text(box, log_stream):
    box.send_email(call(OWNER), USER2, b"secret subject", b"secret body", b"r")
    with pytest.raises(ContentTooLarge):
        box.send_email(call(OWNER), USER2, b"secret subject", b"x" * 5242881, b"r")

    text = log_stream.getvalue()
    assert "secret" not in text
    messages = [entry["msg"] for entry in _log_entries(log_stream)]
    assert messages == ["deployed", "call_committed", "email_sent", "call_rejected"]
    rejected = _log_entries(log_stream)[-1]
    assert rejected["lvl"] == "WARN"
    assert rejected["endpoint"] == "sendEmail"
    assert rejected["error"] == "ContentTooLarge"
    assert rejected["caller"] == OWNER.hex()
