"""Paginated, serialized views over an address's own inbox."""
from __future__ import annotations

from typing import Iterable, List, Tuple

from ..codec import encode_many
from .address import Address
from .limits import require_u32
from .records import EmailSummary
from .store import ListKind, MailStore


def page_bounds(total: int, limit: int, offset: int) -> Tuple[int, int]:
    """Clamp ``[offset, offset + limit)`` to ``[0, total]``.

    ``offset + limit`` is computed on Python ints, so it saturates at
    ``total`` instead of wrapping when both arguments are near ``2**32``.
    """

    start = min(offset, total)
    end = min(offset + limit, total)
    return start, max(start, end)


class PaginationView:
    """Read access to inbox pages.

    Only inbox pages exist; there is no equivalent for the sent list.
    """

    def __init__(self, store: MailStore) -> None:
        self._store = store

    def paginate(self, identity: Address, limit: int, offset: int) -> List[EmailSummary]:
        require_u32("limit", limit)
        require_u32("offset", offset)
        inbox = self._store.iter(identity, ListKind.INBOX)
        start, end = page_bounds(len(inbox), limit, offset)
        if start >= end:
            return []
        return inbox[start:end]

    @staticmethod
    def serialize(records: Iterable[EmailSummary]) -> bytes:
        return encode_many(records)
