"""Administrator-controlled size limits for previews and message bodies.

What:
  Own the two configuration scalars (maximum preview size and maximum content
  size), validate updates against fixed ranges, and restrict updates to the
  contract owner.

How:
  Both values live in single-value storage slots (``maxPreviewSize`` and
  ``maxContentSize``). Setters check the caller against the owner slot first,
  then the range, then write. Reads are free for everyone.

Interfaces:
  :class:`SizeLimitPolicy`, :data:`PREVIEW_SIZE_RANGE`,
  :data:`CONTENT_SIZE_RANGE`, :data:`DEFAULT_MAX_PREVIEW_SIZE`,
  :data:`DEFAULT_MAX_CONTENT_SIZE`, :func:`require_u32`.

Invariants & Safety:
  - A non-owner always gets :class:`Unauthorized`, whatever the value.
  - A rejected update leaves the stored limit untouched.
  - Limit changes never touch records that are already stored.
"""
from __future__ import annotations

from typing import Tuple, Type

from ..ledger.mappers import U32_MAX, SingleValueMapper, decode_u32, encode_u32
from ..ledger.state import StateBackend
from .address import Address
from .errors import (
    ArgumentOutOfRange,
    ContentSizeOutOfRange,
    EmailBoxError,
    PreviewSizeOutOfRange,
    Unauthorized,
)

PREVIEW_SIZE_RANGE: Tuple[int, int] = (50, 500 * 1024)
CONTENT_SIZE_RANGE: Tuple[int, int] = (1, 5 * 1024 * 1024)

DEFAULT_MAX_PREVIEW_SIZE = 100
DEFAULT_MAX_CONTENT_SIZE = 5 * 1024 * 1024

MAX_PREVIEW_SIZE_KEY = b"maxPreviewSize"
MAX_CONTENT_SIZE_KEY = b"maxContentSize"


def require_u32(name: str, value: int) -> int:
    """Return ``value`` if it is an int within ``[0, 2**32 - 1]``."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentOutOfRange(f"{name} must be an integer")
    if not 0 <= value <= U32_MAX:
        raise ArgumentOutOfRange(f"{name} out of u32 range: {value}")
    return value


def _require_range(size: int, bounds: Tuple[int, int], error: Type[EmailBoxError]) -> int:
    low, high = bounds
    if isinstance(size, bool) or not isinstance(size, int) or not low <= size <= high:
        raise error()
    return size


class SizeLimitPolicy:
    """Guarded access to the preview and content size limits."""

    def __init__(self, state: StateBackend, owner: SingleValueMapper[Address]) -> None:
        self._owner = owner
        self._max_preview = SingleValueMapper(state, MAX_PREVIEW_SIZE_KEY, encode_u32, decode_u32)
        self._max_content = SingleValueMapper(state, MAX_CONTENT_SIZE_KEY, encode_u32, decode_u32)

    def initialize(
        self,
        max_preview_size: int = DEFAULT_MAX_PREVIEW_SIZE,
        max_content_size: int = DEFAULT_MAX_CONTENT_SIZE,
    ) -> None:
        """Write the initial limits; runs once, inside the deploy transaction."""

        self._max_preview.set(_require_range(max_preview_size, PREVIEW_SIZE_RANGE, PreviewSizeOutOfRange))
        self._max_content.set(_require_range(max_content_size, CONTENT_SIZE_RANGE, ContentSizeOutOfRange))

    def get_max_preview_size(self) -> int:
        return self._max_preview.get(0)

    def get_max_content_size(self) -> int:
        return self._max_content.get(0)

    def set_max_preview_size(self, caller: Address, size: int) -> None:
        self._require_owner(caller)
        self._max_preview.set(_require_range(size, PREVIEW_SIZE_RANGE, PreviewSizeOutOfRange))

    def set_max_content_size(self, caller: Address, size: int) -> None:
        self._require_owner(caller)
        self._max_content.set(_require_range(size, CONTENT_SIZE_RANGE, ContentSizeOutOfRange))

    def _require_owner(self, caller: Address) -> None:
        owner = self._owner.get()
        if owner is None or caller != owner:
            raise Unauthorized()
