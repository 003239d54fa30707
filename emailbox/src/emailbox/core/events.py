"""Domain events published by the contract.

What:
  Publish one ``email_sent`` event per successful send into the ledger's
  ordered event log and replay the log for consumers.

How:
  :class:`EventLog` encodes the record carried by :class:`EmailSent` with
  :mod:`emailbox.codec` and hands it to the state backend, which only exposes
  it once the surrounding transaction commits.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from ..codec import decode_summary, encode_summary
from ..ledger.state import StateBackend
from .records import EmailSummary

EMAIL_SENT = "email_sent"


@dataclass(frozen=True)
class EmailSent:
    """A message was stored for both parties."""

    seq: int
    summary: EmailSummary

    identifier = EMAIL_SENT


class EventLog:
    def __init__(self, state: StateBackend) -> None:
        self._state = state

    def publish(self, summary: EmailSummary) -> None:
        self._state.emit(EMAIL_SENT, encode_summary(summary))

    def events(self) -> Iterator[EmailSent]:
        """Yield committed ``email_sent`` events in publication order."""

        for logged in self._state.events():
            if logged.identifier != EMAIL_SENT:
                continue
            summary, _ = decode_summary(logged.data)
            yield EmailSent(seq=logged.seq, summary=summary)
