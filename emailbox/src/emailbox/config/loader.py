"""Strict loader for the emailbox runtime configuration.

What:
  Locate, parse, validate, and cache ``emailbox.yaml``.

Why:
  The CLI and embedding applications all need the same admin address, state
  location and initial limits. Validating once at load time means the contract
  is never deployed with limits outside their allowed ranges.

How:
  Resolve candidate file locations from an explicit argument, the
  ``EMAILBOX_CONFIG_PATH`` environment variable, and well-known defaults.
  Parse the first existing file with PyYAML ``safe_load`` and validate it with
  :class:`~emailbox.config.schema.RuntimeConfig`.

Interfaces:
  - :func:`load_runtime_config` / :func:`get_runtime_config` /
    :func:`reset_runtime_config`: manage discovery and caching.
  - :func:`parse_runtime_config`: validate an in-memory YAML document.
  - :func:`read_encryption_key`: load the optional SQLCipher passphrase.

Invariants:
  - Every returned configuration passed strict pydantic validation.
  - The cache honours explicit reload requests and requested paths.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

import yaml
from pydantic import ValidationError as _PydanticValidationError

from .schema import RuntimeConfig


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures."""


class RuntimeConfigError(ConfigLoadError):
    """Error raised when ``emailbox.yaml`` cannot be loaded or validated."""


_CONFIG_ENV = "EMAILBOX_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("emailbox.yaml"),
    Path("/etc/emailbox/config.yaml"),
)
_RUNTIME_CACHE: Optional[Tuple[Path, RuntimeConfig]] = None


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield configuration file locations in priority order.

    The explicit argument wins over ``EMAILBOX_CONFIG_PATH``, which wins over
    the defaults. Duplicates are skipped while preserving that order.
    """

    seen: set[Path] = set()
    env_path = os.environ.get(_CONFIG_ENV)
    ordered = [path, Path(env_path) if env_path else None, *_DEFAULT_LOCATIONS]
    for entry in ordered:
        if entry is None:
            continue
        candidate = entry.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def parse_runtime_config(text: str, source: str = "<string>") -> RuntimeConfig:
    """Parse and validate configuration YAML.

    Args:
      text: Raw configuration contents.
      source: Label used in error messages.

    Raises:
      RuntimeConfigError: If the YAML is malformed, is not a mapping, or fails
        schema validation.
    """

    try:
        payload: Any = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise RuntimeConfigError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RuntimeConfigError(f"{source} must contain a mapping at the top-level")
    try:
        return RuntimeConfig.model_validate(payload)
    except _PydanticValidationError as exc:
        raise RuntimeConfigError(f"Invalid configuration in {source}: {exc}") from exc


def _load_runtime_from_path(path: Path) -> RuntimeConfig:
    try:
        text = path.read_text()
    except FileNotFoundError as exc:
        raise RuntimeConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise RuntimeConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    return parse_runtime_config(text, str(path))


def load_runtime_config(
    path: Optional[Path | str] = None,
    *,
    reload: bool = False,
) -> RuntimeConfig:
    """Resolve, parse, and cache the runtime configuration.

    Args:
      path: Optional explicit location of ``emailbox.yaml``.
      reload: When ``True`` forces a fresh load bypassing the cache.

    Returns:
      The validated runtime configuration.

    Raises:
      RuntimeConfigError: If no suitable configuration file can be located or
        validated.
    """

    global _RUNTIME_CACHE

    requested_path = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _RUNTIME_CACHE is not None:
        cached_path, cached_config = _RUNTIME_CACHE
        if requested_path is None or cached_path == requested_path:
            return cached_config

    searched: list[str] = []
    for candidate in _candidate_paths(requested_path):
        if not candidate.exists():
            searched.append(str(candidate))
            continue
        config = _load_runtime_from_path(candidate)
        _RUNTIME_CACHE = (candidate, config)
        return config

    raise RuntimeConfigError(
        f"Unable to locate emailbox.yaml (searched: {', '.join(searched) or '<none>'})"
    )


def get_runtime_config() -> RuntimeConfig:
    """Return the cached runtime configuration, loading it on demand."""

    return load_runtime_config()


def reset_runtime_config() -> None:
    """Clear the runtime configuration cache."""

    global _RUNTIME_CACHE
    _RUNTIME_CACHE = None


def read_encryption_key(config: RuntimeConfig) -> Optional[str]:
    """Return the SQLCipher passphrase named by ``state.encryption_key_path``.

    Raises:
      RuntimeConfigError: If the key file is configured but unreadable or
        empty.
    """

    key_path = config.state.encryption_key_path
    if key_path is None:
        return None
    try:
        key = Path(key_path).expanduser().read_text().strip()
    except OSError as exc:
        raise RuntimeConfigError(f"Unable to read encryption key {key_path}: {exc}") from exc
    if not key:
        raise RuntimeConfigError(f"Encryption key file {key_path} is empty")
    return key
