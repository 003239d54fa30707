"""Errors raised by emailbox contract endpoints.

What:
  Define the failure kinds a contract call can end with. Every error aborts
  the whole call; the surrounding transaction discards any partial writes.

How:
  All errors derive from :class:`EmailBoxError` and carry the user-facing
  message the contract reports to callers.

Interfaces:
  :class:`EmailBoxError`, :class:`ContentTooLarge`,
  :class:`PreviewSizeOutOfRange`, :class:`ContentSizeOutOfRange`,
  :class:`Unauthorized`, :class:`ArgumentOutOfRange`, :class:`NotDeployed`,
  :class:`AlreadyDeployed`.
"""
from __future__ import annotations


class EmailBoxError(Exception):
    """Base error for rejected contract calls."""

    default_message = "emailbox call rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ContentTooLarge(EmailBoxError):
    """The message body exceeds the current content size limit."""

    default_message = "Message too large!"


class PreviewSizeOutOfRange(EmailBoxError):
    """An administrator supplied a preview limit outside the valid range."""

    default_message = "Preview size must be between 50 bytes and 500 KB"


class ContentSizeOutOfRange(EmailBoxError):
    """An administrator supplied a content limit outside the valid range."""

    default_message = "Content size must be between 1 byte and 5MB"


class Unauthorized(EmailBoxError):
    """A non-administrator called an owner-only endpoint."""

    default_message = "Endpoint can only be called by owner"


class ArgumentOutOfRange(EmailBoxError, ValueError):
    """A numeric argument does not fit the unsigned width the endpoint takes."""

    default_message = "argument out of range"


class NotDeployed(EmailBoxError):
    """The ledger state has not been initialised by a deploy call."""

    default_message = "contract not deployed"


class AlreadyDeployed(EmailBoxError):
    """A deploy call targeted state that already holds a contract."""

    default_message = "contract already deployed"
