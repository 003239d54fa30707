"""Binary encoding of message records.

What:
  Encode :class:`~emailbox.core.records.EmailSummary` values into a
  deterministic byte layout and decode them back. ``getInbox`` returns the
  concatenation of encoded records; clients split it with :func:`decode_many`.

How:
  Fields are written in declaration order, all integers big-endian:

  ============  ==============================
  from, to      32 raw address bytes each
  subject       u32 length + bytes
  preview       u32 length + bytes
  timestamp     u64
  ipfs_hash     u32 length + bytes
  ============  ==============================

  Every variable-length field carries its own length, so consecutive records
  need no separator.

Interfaces:
  :func:`encode_summary`, :func:`decode_summary`, :func:`encode_many`,
  :func:`decode_many`, :class:`CodecError`.
"""
from __future__ import annotations

import struct
from typing import Iterable, List, Tuple

from .core.address import ADDRESS_LENGTH, Address
from .core.records import EmailSummary

_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")


class CodecError(ValueError):
    """Raised when bytes do not decode into whole records."""


def _encode_buffer(value: bytes) -> bytes:
    if len(value) > 0xFFFFFFFF:
        raise CodecError("buffer too long to encode")
    return _U32.pack(len(value)) + value


def _take(data: bytes, offset: int, size: int, what: str) -> Tuple[bytes, int]:
    end = offset + size
    if end > len(data):
        raise CodecError(f"truncated input while reading {what} at offset {offset}")
    return data[offset:end], end


def _decode_buffer(data: bytes, offset: int, what: str) -> Tuple[bytes, int]:
    raw_len, offset = _take(data, offset, _U32.size, f"{what} length")
    return _take(data, offset, _U32.unpack(raw_len)[0], what)


def encode_summary(summary: EmailSummary) -> bytes:
    return b"".join(
        (
            summary.sender.raw,
            summary.recipient.raw,
            _encode_buffer(summary.subject),
            _encode_buffer(summary.preview),
            _U64.pack(summary.timestamp),
            _encode_buffer(summary.ipfs_hash),
        )
    )


def decode_summary(data: bytes, offset: int = 0) -> Tuple[EmailSummary, int]:
    """Decode one record starting at ``offset``.

    Returns:
      The record and the offset just past it.
    """

    sender, offset = _take(data, offset, ADDRESS_LENGTH, "from")
    recipient, offset = _take(data, offset, ADDRESS_LENGTH, "to")
    subject, offset = _decode_buffer(data, offset, "subject")
    preview, offset = _decode_buffer(data, offset, "preview")
    raw_ts, offset = _take(data, offset, _U64.size, "timestamp")
    ipfs_hash, offset = _decode_buffer(data, offset, "ipfs_hash")
    summary = EmailSummary(
        sender=Address(sender),
        recipient=Address(recipient),
        subject=subject,
        preview=preview,
        timestamp=_U64.unpack(raw_ts)[0],
        ipfs_hash=ipfs_hash,
    )
    return summary, offset


def encode_many(summaries: Iterable[EmailSummary]) -> bytes:
    return b"".join(encode_summary(summary) for summary in summaries)


def decode_many(data: bytes) -> List[EmailSummary]:
    """Split a concatenation of encoded records; an empty input yields ``[]``."""

    data = bytes(data)
    records: List[EmailSummary] = []
    offset = 0
    while offset < len(data):
        summary, offset = decode_summary(data, offset)
        records.append(summary)
    return records
