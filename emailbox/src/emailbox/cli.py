"""emailbox command-line interface.

What:
  Provide a Typer-based entry point for operating an emailbox deployment:
  ``deploy``, ``send``, ``inbox``, ``limits``, ``set-preview-size``,
  ``set-content-size`` and ``events``.

How:
  Every command loads the runtime configuration (``--config`` or the usual
  discovery chain), opens the state database through
  :func:`emailbox._wiring.contract_session`, and calls one contract endpoint.
  Command results go to ``stdout`` as JSON; contract logs go to ``stderr``.

Interfaces:
  ``app`` (Typer application) and ``main``.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - Rejected calls print a single ``error: ...`` line on ``stderr``.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from ._wiring import build_logger, contract_session, open_state, resolve_content, resolve_reference
from .codec import decode_many
from .config.loader import ConfigLoadError, load_runtime_config
from .config.schema import RuntimeConfig
from .contract import EmailBox
from .core.address import Address
from .core.errors import EmailBoxError
from .ledger.context import CallContext
from .utils.sqlcipher import SqlCipherUnavailable


app = typer.Typer(help="emailbox contract operator tool")

LOGGER = logging.getLogger("emailbox.cli")


def _runtime(ctx: typer.Context) -> RuntimeConfig:
    try:
        return load_runtime_config(ctx.obj)
    except ConfigLoadError as exc:
        LOGGER.error("runtime_load_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _run(ctx: typer.Context, action: Callable[[EmailBox], Any]) -> Any:
    """Execute ``action`` against the configured contract, mapping failures to exit 1."""

    runtime = _runtime(ctx)
    try:
        with contract_session(runtime) as box:
            return action(box)
    except (EmailBoxError, ConfigLoadError, SqlCipherUnavailable, ValueError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _address(value: str) -> Address:
    try:
        return Address.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _context(caller: str, timestamp: Optional[int] = None) -> CallContext:
    try:
        return CallContext.at(_address(caller), timestamp)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, sort_keys=True))


@app.callback()
def main_options(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Path to emailbox.yaml"),
) -> None:
    """Operate an emailbox deployment."""

    ctx.obj = config


@app.command("deploy")
def deploy(
    ctx: typer.Context,
    admin: Optional[str] = typer.Option(None, help="Owner address or name; defaults to the configured admin"),
) -> None:
    """Initialise the state database with an owner and the configured limits."""

    runtime = _runtime(ctx)
    owner = _address(admin) if admin else runtime.admin_address()
    try:
        state = open_state(runtime)
    except (ConfigLoadError, SqlCipherUnavailable) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    try:
        EmailBox.deploy(
            state,
            owner,
            max_preview_size=runtime.limits.max_preview_size,
            max_content_size=runtime.limits.max_content_size,
            logger=build_logger(runtime),
        )
    except EmailBoxError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        state.close()
    _echo_json({"owner": owner.hex(), **runtime.limits.model_dump()})


@app.command("send")
def send(
    ctx: typer.Context,
    sender: str = typer.Argument(..., help="Sending address or name"),
    recipient: str = typer.Argument(..., help="Receiving address or name"),
    subject: str = typer.Option(..., help="Message subject"),
    content: Optional[str] = typer.Option(None, help="Message body as text"),
    content_file: Optional[Path] = typer.Option(None, help="Read the message body from a file"),
    ref: Optional[str] = typer.Option(None, help="Content reference; defaults to the body checksum"),
    timestamp: Optional[int] = typer.Option(None, help="Block timestamp; defaults to now"),
) -> None:
    """Send a message and print the stored record."""

    call = _context(sender, timestamp)
    to = _address(recipient)

    def _send(box: EmailBox) -> Any:
        body = resolve_content(content, content_file)
        return box.send_email(call, to, subject.encode("utf-8"), body, resolve_reference(ref, body))

    summary = _run(ctx, _send)
    _echo_json(summary.to_dict())


@app.command("inbox")
def inbox(
    ctx: typer.Context,
    caller: str = typer.Argument(..., help="Address whose inbox to read"),
    limit: int = typer.Option(10, help="Maximum number of records"),
    offset: int = typer.Option(0, help="Records to skip"),
    raw: bool = typer.Option(False, "--raw", help="Print the serialized page as hex"),
) -> None:
    """Print one page of the caller's inbox."""

    call = _context(caller)
    page = _run(ctx, lambda box: box.get_inbox(call, limit, offset))
    if raw:
        typer.echo(page.hex())
        return
    for record in decode_many(page):
        _echo_json(record.to_dict())


@app.command("limits")
def limits(ctx: typer.Context) -> None:
    """Print the current size limits."""

    values = _run(
        ctx,
        lambda box: {
            "max_preview_size": box.get_max_preview_size(),
            "max_content_size": box.get_max_content_size(),
        },
    )
    _echo_json(values)


@app.command("set-preview-size")
def set_preview_size(
    ctx: typer.Context,
    caller: str = typer.Argument(..., help="Calling address; must be the owner"),
    size: int = typer.Argument(..., help="New maximum preview size in bytes"),
) -> None:
    """Change the maximum preview size."""

    call = _context(caller)
    _run(ctx, lambda box: box.set_max_preview_size(call, size))
    _echo_json({"max_preview_size": size})


@app.command("set-content-size")
def set_content_size(
    ctx: typer.Context,
    caller: str = typer.Argument(..., help="Calling address; must be the owner"),
    size: int = typer.Argument(..., help="New maximum content size in bytes"),
) -> None:
    """Change the maximum content size."""

    call = _context(caller)
    _run(ctx, lambda box: box.set_max_content_size(call, size))
    _echo_json({"max_content_size": size})


@app.command("events")
def events(ctx: typer.Context) -> None:
    """Print the committed event log."""

    for event in _run(ctx, lambda box: box.events()):
        _echo_json({"seq": event.seq, "event": event.identifier, **event.summary.to_dict()})


def main() -> None:
    """Execute the Typer application entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
