"""Pydantic models describing the emailbox runtime configuration."""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.address import Address
from ..core.limits import (
    CONTENT_SIZE_RANGE,
    DEFAULT_MAX_CONTENT_SIZE,
    DEFAULT_MAX_PREVIEW_SIZE,
    PREVIEW_SIZE_RANGE,
)


class ValidationError(ValueError):
    """Raised when configuration data does not satisfy the schema."""


class SizeLimits(BaseModel):
    """Initial limits written when the contract is deployed."""

    model_config = ConfigDict(extra="forbid")

    max_preview_size: int = Field(
        default=DEFAULT_MAX_PREVIEW_SIZE,
        ge=PREVIEW_SIZE_RANGE[0],
        le=PREVIEW_SIZE_RANGE[1],
    )
    max_content_size: int = Field(
        default=DEFAULT_MAX_CONTENT_SIZE,
        ge=CONTENT_SIZE_RANGE[0],
        le=CONTENT_SIZE_RANGE[1],
    )


class StateConfig(BaseModel):
    """Where the ledger state lives on disk."""

    model_config = ConfigDict(extra="forbid")

    path: str = "emailbox-state.db"
    encryption_key_path: Optional[str] = None
    pragmas: Dict[str, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    """Structured logging settings."""

    model_config = ConfigDict(extra="forbid")

    component: str = "emailbox"


class RuntimeConfig(BaseModel):
    """Root configuration loaded from ``emailbox.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    admin: str
    state: StateConfig = Field(default_factory=StateConfig)
    limits: SizeLimits = Field(default_factory=SizeLimits)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value != 1:
            raise ValidationError("only configuration version 1 is supported")
        return value

    @field_validator("admin")
    @classmethod
    def _check_admin(cls, value: str) -> str:
        try:
            Address.parse(value)
        except ValueError as exc:
            raise ValidationError(f"admin is not a valid address: {exc}") from exc
        return value

    def admin_address(self) -> Address:
        return Address.parse(self.admin)
