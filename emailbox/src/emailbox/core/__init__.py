"""Core message store logic.

What:
  Group the size limit policy, record factory, per-address mail store,
  inbox pagination and event log behind a single namespace.

How:
  Attributes resolve lazily through :func:`__getattr__` so that importing a
  single submodule (for example :mod:`emailbox.core.address` from the ledger)
  does not pull in the rest of the package.

Interfaces:
  - Address, EmailSummary, RecordFactory
  - SizeLimitPolicy and the limit constants
  - MailStore, ListKind, PaginationView, EventLog, EmailSent
  - the error types of :mod:`emailbox.core.errors`
"""
from __future__ import annotations

from typing import Any

_EXPORTS = {
    "address": {"Address", "ADDRESS_LENGTH"},
    "errors": {
        "EmailBoxError",
        "ContentTooLarge",
        "PreviewSizeOutOfRange",
        "ContentSizeOutOfRange",
        "Unauthorized",
        "ArgumentOutOfRange",
        "NotDeployed",
        "AlreadyDeployed",
    },
    "limits": {
        "SizeLimitPolicy",
        "PREVIEW_SIZE_RANGE",
        "CONTENT_SIZE_RANGE",
        "DEFAULT_MAX_PREVIEW_SIZE",
        "DEFAULT_MAX_CONTENT_SIZE",
    },
    "records": {"EmailSummary", "RecordFactory"},
    "store": {"MailStore", "ListKind"},
    "pagination": {"PaginationView", "page_bounds"},
    "events": {"EventLog", "EmailSent"},
}

__all__ = sorted(name for names in _EXPORTS.values() for name in names)


def __getattr__(name: str) -> Any:
    """Resolve public names from their submodule on first access."""

    for module_name, names in _EXPORTS.items():
        if name in names:
            from importlib import import_module

            module = import_module(f"{__name__}.{module_name}")
            return getattr(module, name)
    raise AttributeError(name)
