"""Structured JSON logging for the emailbox contract and its tooling.

What:
  Offer a small facade over Python streams so every emailbox component can
  emit JSON log lines with consistent fields and automatic removal of message
  payloads.

Why:
  Contract calls carry subjects and message bodies. Operators need to grep the
  sequence of sends and limit changes without those bytes ending up in shared
  log storage.

How:
  :class:`JsonLogger` holds a target stream and a component tag. ``extra``
  dictionaries are scrubbed by a recursive redaction helper before being
  serialised with ``json.dump``. Byte values are rendered as hex so the
  payload stays valid JSON.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`.

Invariants & Safety:
  - Every entry includes an ISO8601 timestamp, severity, and component name.
  - Keys in :data:`SENSITIVE_KEYS` are replaced with ``[redacted]`` even inside
    nested dictionaries.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"subject", "preview", "content", "body"})


@dataclass
class JsonLogger:
    """Structured JSON logger with automatic redaction.

    What:
      Emits single-line JSON entries that include timestamps, severity, a
      component tag, and optional supplemental fields.

    How:
      Stores the destination stream and component label, then exposes
      :meth:`log`, :meth:`info`, :meth:`warning` and :meth:`error` which merge
      a canonical payload with redacted extras.
    """

    stream: Any = field(default_factory=lambda: sys.stdout)
    component: str = "emailbox"

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit a structured JSON log entry.

        Args:
          level: Human-readable severity (e.g., ``"info"`` or ``"error"``).
          message: Core log message.
          extra: Optional context dictionary that will be redacted recursively.
        """

        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        json.dump(payload, self.stream, separators=(",", ":"), default=_json_default)
        self.stream.write("\n")
        self.stream.flush()

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with sensitive keys masked.

        What:
          Produces a copy of ``data`` where :data:`SENSITIVE_KEYS` are replaced
          with the ``[redacted]`` sentinel.

        How:
          Walks the dictionary, applying the sentinel to known keys and
          recursing into nested dictionaries so the structure is preserved.

        Args:
          data: Arbitrary metadata to sanitise.

        Returns:
          A copy of ``data`` with sensitive values masked.
        """

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            else:
                result[key] = value
        return result


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return str(value)


def get_logger(component: str, *, stream: Any = None) -> JsonLogger:
    """Construct a :class:`JsonLogger` for the requested component.

    Args:
      component: Logical subsystem name to include in log payloads.
      stream: Optional destination; defaults to ``stdout``.

    Returns:
      Configured :class:`JsonLogger` instance.
    """

    if stream is None:
        return JsonLogger(component=component)
    return JsonLogger(stream=stream, component=component)
