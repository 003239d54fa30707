"""Helper routines shared by the emailbox CLI commands.

What:
  Open the configured ledger state, attach the contract to it, and turn CLI
  arguments into the byte payloads the contract expects.

How:
  :func:`contract_session` opens :class:`SqliteState` from the runtime
  configuration (encrypted when a key file is configured), yields an
  :class:`EmailBox` whose JSON logs go to ``stderr``, and closes the database
  afterwards. :func:`resolve_content` and :func:`resolve_reference` normalise
  message inputs.

Interfaces:
  ``open_state``, ``build_logger``, ``contract_session``,
  ``resolve_content``, ``resolve_reference``.
"""
from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config.loader import read_encryption_key
from .config.schema import RuntimeConfig
from .contract import EmailBox
from .ledger.state import SqliteState
from .utils.ids import checksum
from .utils.logging import JsonLogger, get_logger


def open_state(runtime: RuntimeConfig) -> SqliteState:
    """Open the state database named by ``runtime.state``."""

    return SqliteState.open(
        Path(runtime.state.path).expanduser(),
        key=read_encryption_key(runtime),
        pragmas=runtime.state.pragmas or None,
    )


def build_logger(runtime: RuntimeConfig) -> JsonLogger:
    """Return the contract logger; CLI output owns ``stdout`` so logs use ``stderr``."""

    return get_logger(runtime.logging.component, stream=sys.stderr)


@contextmanager
def contract_session(runtime: RuntimeConfig) -> Iterator[EmailBox]:
    """Yield a contract bound to the configured state and close it afterwards."""

    state = open_state(runtime)
    try:
        yield EmailBox(state, logger=build_logger(runtime))
    finally:
        state.close()


def resolve_content(content: Optional[str], content_file: Optional[Path]) -> bytes:
    """Return the message body from exactly one of ``content`` / ``content_file``.

    Raises:
      ValueError: If both or neither are supplied, or the file is unreadable.
    """

    if (content is None) == (content_file is None):
        raise ValueError("provide exactly one of --content or --content-file")
    if content_file is not None:
        try:
            return Path(content_file).read_bytes()
        except OSError as exc:
            raise ValueError(f"cannot read {content_file}: {exc}") from exc
    return content.encode("utf-8")


def resolve_reference(reference: Optional[str], content: bytes) -> bytes:
    """Use ``reference`` when given, otherwise the ``sha256:`` checksum of ``content``."""

    if reference:
        return reference.encode("utf-8")
    return checksum(content).encode("ascii")
