"""Per-address inbox and sent lists.

What:
  Keep two independent append-only lists per address: ``inbox`` for received
  messages and ``sent`` for messages the address originated.

How:
  Each list is a :class:`~emailbox.ledger.mappers.VecMapper` whose base key
  is the list kind followed by the raw address bytes (``b"inbox" + address``).
  Records are stored through :mod:`emailbox.codec`.

Invariants & Safety:
  - :meth:`MailStore.append` writes the sender's and the recipient's copy in
    the caller's transaction; the two land together or not at all.
  - Order is guaranteed within one list only (insertion order).
"""
from __future__ import annotations

import enum

from ..codec import decode_summary, encode_summary
from ..ledger.mappers import VecMapper
from ..ledger.state import StateBackend
from .address import Address
from .records import EmailSummary


class ListKind(str, enum.Enum):
    INBOX = "inbox"
    SENT = "sent"


def _decode(data: bytes) -> EmailSummary:
    summary, _ = decode_summary(data)
    return summary


class MailStore:
    """Identity-keyed inbox and sent collections."""

    def __init__(self, state: StateBackend) -> None:
        self._state = state

    def _list(self, identity: Address, kind: ListKind) -> VecMapper[EmailSummary]:
        base_key = ListKind(kind).value.encode("ascii") + identity.raw
        return VecMapper(self._state, base_key, encode_summary, _decode)

    def append(self, record: EmailSummary) -> None:
        """Store ``record`` in the recipient's inbox and the sender's sent list."""

        self._list(record.recipient, ListKind.INBOX).push(record)
        self._list(record.sender, ListKind.SENT).push(record)

    def len(self, identity: Address, kind: ListKind) -> int:
        return len(self._list(identity, kind))

    def iter(self, identity: Address, kind: ListKind) -> VecMapper[EmailSummary]:
        """Return a read-only, lazily loaded view of one list.

        The view supports ``len()``, indexing and slicing, and can be iterated
        any number of times.
        """

        return self._list(identity, kind)
