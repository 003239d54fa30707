"""Typed views over the raw key/value ledger storage.

What:
  Provide :class:`SingleValueMapper` for scalar slots and :class:`VecMapper`
  for append-only, index-addressable lists stored under a base key.

How:
  A list stored under ``base`` keeps its length at ``base + b".len"`` and each
  element at ``base + b".item" + <u32 index>``, with indices starting at 1.
  Pushing writes one item key and the length key, so appends never copy the
  list. Lengths and indices are big-endian u32.

Interfaces:
  :class:`SingleValueMapper`, :class:`VecMapper`, :func:`encode_u32`,
  :func:`decode_u32`.
"""
from __future__ import annotations

import struct
from collections.abc import Sequence
from typing import Callable, Generic, List, Optional, TypeVar, Union, overload

from .state import StateBackend

T = TypeVar("T")

LEN_SUFFIX = b".len"
ITEM_SUFFIX = b".item"
U32_MAX = 0xFFFFFFFF

_U32 = struct.Struct(">I")


def encode_u32(value: int) -> bytes:
    return _U32.pack(value)


def decode_u32(data: bytes) -> int:
    return _U32.unpack(data)[0]


class SingleValueMapper(Generic[T]):
    """One stored value under a fixed key."""

    def __init__(
        self,
        state: StateBackend,
        key: bytes,
        encode: Callable[[T], bytes],
        decode: Callable[[bytes], T],
    ) -> None:
        self._state = state
        self._key = key
        self._encode = encode
        self._decode = decode

    @property
    def key(self) -> bytes:
        return self._key

    def is_empty(self) -> bool:
        return self._state.get(self._key) is None

    def get(self, default: Optional[T] = None) -> Optional[T]:
        raw = self._state.get(self._key)
        if raw is None:
            return default
        return self._decode(raw)

    def set(self, value: T) -> None:
        self._state.set(self._key, self._encode(value))


class VecMapper(Sequence, Generic[T]):
    """Append-only list persisted item by item.

    The mapper is a read-through :class:`~collections.abc.Sequence`: ``len``,
    indexing, slicing and iteration read the ledger on demand, so iterating
    twice walks the stored list twice and sees appends made in between.
    """

    def __init__(
        self,
        state: StateBackend,
        base_key: bytes,
        encode: Callable[[T], bytes],
        decode: Callable[[bytes], T],
    ) -> None:
        self._state = state
        self._base_key = base_key
        self._encode = encode
        self._decode = decode

    def _len_key(self) -> bytes:
        return self._base_key + LEN_SUFFIX

    def _item_key(self, position: int) -> bytes:
        return self._base_key + ITEM_SUFFIX + encode_u32(position)

    def __len__(self) -> int:
        raw = self._state.get(self._len_key())
        return 0 if raw is None else decode_u32(raw)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[T, List[T]]:
        length = len(self)
        if isinstance(index, slice):
            return [self._read(position) for position in range(*index.indices(length))]
        if index < 0:
            index += length
        if not 0 <= index < length:
            raise IndexError("list index out of range")
        return self._read(index)

    def _read(self, index: int) -> T:
        raw = self._state.get(self._item_key(index + 1))
        if raw is None:
            raise LookupError(f"missing item {index} under {self._base_key!r}")
        return self._decode(raw)

    def push(self, item: T) -> int:
        """Append ``item`` and return the new length."""

        length = len(self)
        if length >= U32_MAX:
            raise OverflowError("list is full")
        position = length + 1
        self._state.set(self._item_key(position), self._encode(item))
        self._state.set(self._len_key(), encode_u32(position))
        return position
