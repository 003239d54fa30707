"""emailbox configuration package.

Interfaces:
  - get_runtime_config / load_runtime_config / reset_runtime_config: resolve
    ``emailbox.yaml`` and expose a cached runtime configuration object.
  - parse_runtime_config: validate an in-memory document.
  - read_encryption_key: load the optional SQLCipher passphrase.
  - RuntimeConfig / SizeLimits / StateConfig: pydantic models.
  - ConfigLoadError / RuntimeConfigError / ValidationError: error types.
"""

from .loader import (
    ConfigLoadError,
    RuntimeConfigError,
    get_runtime_config,
    load_runtime_config,
    parse_runtime_config,
    read_encryption_key,
    reset_runtime_config,
)
from .schema import RuntimeConfig, SizeLimits, StateConfig, ValidationError

__all__ = [
    "get_runtime_config",
    "load_runtime_config",
    "reset_runtime_config",
    "parse_runtime_config",
    "read_encryption_key",
    "RuntimeConfig",
    "SizeLimits",
    "StateConfig",
    "ConfigLoadError",
    "RuntimeConfigError",
    "ValidationError",
]
