"""Byte-order helpers and other small utilities."""

from __future__ import annotations

import os

_DEFAULT_TMPDIR = "/tmp"


def parse_little_endian(data: bytes | bytearray | memoryview) -> int:
    """Interpret ``data`` as an unsigned little-endian integer."""
    return int.from_bytes(bytes(data), "little")


def parse_big_endian(data: bytes | bytearray | memoryview) -> int:
    """Interpret ``data`` as an unsigned big-endian integer."""
    return int.from_bytes(bytes(data), "big")


def _truncate(size: int, value: int) -> int:
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    return value & ((1 << (8 * size)) - 1)


def encode_little_endian(size: int, value: int) -> bytes:
    """Encode the lowest ``size`` bytes of ``value`` in little-endian order."""
    return _truncate(size, value).to_bytes(size, "little")


def encode_big_endian(size: int, value: int) -> bytes:
    """Encode the lowest ``size`` bytes of ``value`` in big-endian order."""
    return _truncate(size, value).to_bytes(size, "big")


def midpoint(lo: int, hi: int) -> int:
    """Midpoint of ``lo`` and ``hi``, rounded towards ``lo``."""
    return lo + (hi - lo) // 2


def tmpdir() -> str:
    """Directory for temporary files, taken from ``SL_TMP_DIR`` if set."""
    return os.environ.get("SL_TMP_DIR", _DEFAULT_TMPDIR)


def is_zero(data: bytes | bytearray | memoryview) -> bool:
    """True if every byte in ``data`` is zero."""
    return not any(bytes(data))


def count_nonzero(size: int, data: bytes | bytearray | memoryview) -> int:
    """Count the items of ``size`` bytes in ``data`` that are not all zero.

    A trailing partial item is ignored.
    """
    if size <= 0:
        raise ValueError(f"item size must be positive, got {size}")
    view = memoryview(bytes(data))
    count = len(view) // size
    return sum(
        1
        for start in range(0, count * size, size)
        if any(view[start : start + size])
    )