"""Message summary records and the factory that derives them.

What:
  :class:`EmailSummary` is the immutable record stored for every message: the
  two parties, the subject, a bounded preview of the body, the block
  timestamp, and a reference to the full body stored elsewhere (typically an
  IPFS hash). :class:`RecordFactory` turns a full message body into such a
  record under the limits currently in force.

How:
  The factory reads both limits from :class:`SizeLimitPolicy`, rejects bodies
  over the content limit with :class:`ContentTooLarge`, and keeps the first
  ``min(max_preview_size, len(body))`` bytes as preview. Truncation is a raw
  byte slice: a multi-byte UTF-8 character may be cut in half.

Invariants & Safety:
  - ``len(record.preview) == min(max_preview_size, len(full_content))`` for the
    limits read at build time.
  - Building a record persists nothing; storing it is the caller's job.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from .address import Address
from .errors import ContentTooLarge

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .limits import SizeLimitPolicy


@dataclass(frozen=True)
class EmailSummary:
    """Stored summary of one message.

    Attributes:
      sender: Address the message came from.
      recipient: Address the message was sent to.
      subject: Subject bytes, unbounded.
      preview: Leading bytes of the full body.
      timestamp: Block timestamp of the send call.
      ipfs_hash: Opaque reference to the full body.
    """

    sender: Address
    recipient: Address
    subject: bytes
    preview: bytes
    timestamp: int
    ipfs_hash: bytes

    def to_dict(self) -> Dict[str, Any]:
        """Render the record for JSON output; byte fields are decoded leniently."""

        return {
            "from": self.sender.hex(),
            "to": self.recipient.hex(),
            "subject": self.subject.decode("utf-8", errors="replace"),
            "preview": self.preview.decode("utf-8", errors="replace"),
            "timestamp": self.timestamp,
            "ipfs_hash": self.ipfs_hash.decode("utf-8", errors="replace"),
        }


class RecordFactory:
    """Validate message bodies and derive bounded records."""

    def __init__(self, policy: "SizeLimitPolicy") -> None:
        self._policy = policy

    def build(
        self,
        sender: Address,
        recipient: Address,
        subject: bytes,
        full_content: bytes,
        ipfs_hash: bytes,
        timestamp: int,
    ) -> EmailSummary:
        """Return the record for a message or raise :class:`ContentTooLarge`."""

        for field_name, value in (
            ("subject", subject),
            ("full_content", full_content),
            ("ipfs_hash", ipfs_hash),
        ):
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise TypeError(f"{field_name} must be bytes, got {type(value).__name__}")
        content = bytes(full_content)
        content_len = len(content)
        if content_len > self._policy.get_max_content_size():
            raise ContentTooLarge()
        preview_len = min(self._policy.get_max_preview_size(), content_len)
        return EmailSummary(
            sender=sender,
            recipient=recipient,
            subject=bytes(subject),
            preview=content[:preview_len],
            timestamp=timestamp,
            ipfs_hash=bytes(ipfs_hash),
        )
