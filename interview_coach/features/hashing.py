from __future__ import annotations

from typing import Iterable, TypeVar

T = TypeVar("T")

_INT32_MASK = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def stable_hash(text: str) -> int:
    """31-multiplier rolling hash wrapped to signed 32-bit range, returned as abs()."""
    value = 0
    for char in text:
        value = _to_int32(value * 31 + ord(char))
    return abs(value)


def file_identity_hash(filename: str, size: int) -> int:
    return stable_hash(f"{filename}{int(size)}")


def rank_by_hash(items: Iterable[T], key: str) -> list[T]:
    """Order items by the hash of ``key:item``; stable for identical inputs."""
    indexed = list(enumerate(items))
    indexed.sort(key=lambda pair: (stable_hash(f"{key}:{pair[1]}"), pair[0]))
    return [item for _, item in indexed]
