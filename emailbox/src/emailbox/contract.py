"""emailbox contract surface.

What:
  Expose the endpoints of the message box: ``sendEmail``,
  ``setMaxPreviewSize``, ``setMaxContentSize``, ``getMaxPreviewSize``,
  ``getMaxContentSize`` and ``getInbox``, plus deployment.

Why:
  Sending touches three places (recipient inbox, sender sent list, event log)
  and must be all-or-nothing. Routing every mutating endpoint through one
  transaction wrapper keeps that guarantee in a single place.

How:
  :class:`EmailBox` composes :class:`SizeLimitPolicy`, :class:`RecordFactory`,
  :class:`MailStore`, :class:`PaginationView` and :class:`EventLog` over one
  ledger state backend. Mutating endpoints run inside
  ``state.transaction()``; a raised :class:`EmailBoxError` propagates to the
  caller after the backend discarded the call's writes. Each call is logged
  as structured JSON with a transaction id; subjects and bodies never reach
  the log.

Interfaces:
  :class:`EmailBox`, :data:`OWNER_KEY`.

Invariants & Safety:
  - The owner is captured once at deploy and never changes.
  - Views never write to state.
  - ``getInbox`` only ever reads the caller's own inbox.
"""
from __future__ import annotations

from typing import Callable, List, Optional, TypeVar

from .core.address import Address
from .core.errors import AlreadyDeployed, EmailBoxError, NotDeployed
from .core.events import EmailSent, EventLog
from .core.limits import DEFAULT_MAX_CONTENT_SIZE, DEFAULT_MAX_PREVIEW_SIZE, SizeLimitPolicy
from .core.pagination import PaginationView
from .core.records import EmailSummary, RecordFactory
from .core.store import MailStore
from .ledger.context import CallContext
from .ledger.mappers import SingleValueMapper
from .ledger.state import StateBackend
from .utils.ids import new_tx_id
from .utils.logging import JsonLogger, get_logger

OWNER_KEY = b"owner"

T = TypeVar("T")


def _encode_address(address: Address) -> bytes:
    return address.raw


class EmailBox:
    """Message box contract bound to one ledger state."""

    def __init__(self, state: StateBackend, *, logger: Optional[JsonLogger] = None) -> None:
        self._state = state
        self._logger = logger or get_logger("emailbox.contract")
        self._owner: SingleValueMapper[Address] = SingleValueMapper(
            state, OWNER_KEY, _encode_address, Address
        )
        self.limits = SizeLimitPolicy(state, self._owner)
        self.factory = RecordFactory(self.limits)
        self.store = MailStore(state)
        self.view = PaginationView(self.store)
        self.event_log = EventLog(state)

    @classmethod
    def deploy(
        cls,
        state: StateBackend,
        owner: Address,
        *,
        max_preview_size: int = DEFAULT_MAX_PREVIEW_SIZE,
        max_content_size: int = DEFAULT_MAX_CONTENT_SIZE,
        logger: Optional[JsonLogger] = None,
    ) -> "EmailBox":
        """Initialise ``state`` with ``owner`` and the initial limits.

        Raises:
          AlreadyDeployed: If ``state`` already has an owner.
          PreviewSizeOutOfRange / ContentSizeOutOfRange: For invalid limits.
        """

        box = cls(state, logger=logger)
        with state.transaction():
            if not box._owner.is_empty():
                raise AlreadyDeployed()
            box._owner.set(owner)
            box.limits.initialize(max_preview_size, max_content_size)
        box._logger.info(
            "deployed",
            owner=owner.hex(),
            max_preview_size=max_preview_size,
            max_content_size=max_content_size,
        )
        return box

    @property
    def deployed(self) -> bool:
        return not self._owner.is_empty()

    @property
    def owner(self) -> Address:
        owner = self._owner.get()
        if owner is None:
            raise NotDeployed()
        return owner

    def send_email(
        self,
        ctx: CallContext,
        to: Address,
        subject: bytes,
        full_content: bytes,
        ipfs_hash: bytes,
    ) -> EmailSummary:
        """Store a message for both parties and publish ``email_sent``.

        Raises:
          ContentTooLarge: If ``full_content`` exceeds the content limit.
        """

        def _send() -> EmailSummary:
            summary = self.factory.build(
                ctx.caller, to, subject, full_content, ipfs_hash, ctx.timestamp
            )
            self.store.append(summary)
            self.event_log.publish(summary)
            return summary

        summary = self._execute(
            "sendEmail",
            ctx,
            _send,
            recipient=to.hex(),
            content_len=len(full_content),
        )
        self._logger.info(
            "email_sent",
            sender=summary.sender.hex(),
            recipient=summary.recipient.hex(),
            preview_len=len(summary.preview),
            timestamp=summary.timestamp,
        )
        return summary

    def set_max_preview_size(self, ctx: CallContext, size: int) -> None:
        self._execute(
            "setMaxPreviewSize",
            ctx,
            lambda: self.limits.set_max_preview_size(ctx.caller, size),
            size=size,
        )
        self._logger.info("limit_updated", limit="max_preview_size", size=size)

    def set_max_content_size(self, ctx: CallContext, size: int) -> None:
        self._execute(
            "setMaxContentSize",
            ctx,
            lambda: self.limits.set_max_content_size(ctx.caller, size),
            size=size,
        )
        self._logger.info("limit_updated", limit="max_content_size", size=size)

    def get_max_preview_size(self) -> int:
        self._require_deployed()
        return self.limits.get_max_preview_size()

    def get_max_content_size(self) -> int:
        self._require_deployed()
        return self.limits.get_max_content_size()

    def get_inbox(self, ctx: CallContext, limit: int, offset: int) -> bytes:
        """Return the serialized ``[offset, offset + limit)`` page of the caller's inbox."""

        self._require_deployed()
        records = self.view.paginate(ctx.caller, limit, offset)
        return self.view.serialize(records)

    def events(self) -> List[EmailSent]:
        return list(self.event_log.events())

    def _execute(self, endpoint: str, ctx: CallContext, call: Callable[[], T], **fields: object) -> T:
        tx_id = new_tx_id()
        self._require_deployed()
        try:
            with self._state.transaction():
                result = call()
        except EmailBoxError as exc:
            self._logger.warning(
                "call_rejected",
                tx=tx_id,
                endpoint=endpoint,
                caller=ctx.caller.hex(),
                error=type(exc).__name__,
                reason=str(exc),
                **fields,
            )
            raise
        self._logger.info("call_committed", tx=tx_id, endpoint=endpoint, caller=ctx.caller.hex())
        return result

    def _require_deployed(self) -> None:
        if self._owner.is_empty():
            raise NotDeployed()
