"""Operations on byte spans: slicing views, searching, hex parsing."""

from __future__ import annotations

import string
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview, str]


def _view(data: BytesLike) -> memoryview:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return memoryview(data).cast("B")


def is_hexadecimal_str(data: BytesLike) -> bool:
    """True if ``data`` is ``0x`` followed by at least one character."""
    view = _view(data)
    return len(view) > 2 and bytes(view[:2]) == b"0x"


def _hex_prefix_value(pair: bytes) -> int:
    value = 0
    for ch in pair.decode("latin-1"):
        if ch not in string.hexdigits:
            break
        value = value * 16 + int(ch, 16)
    return value


def parse_hex(data: BytesLike) -> bytes:
    """Bytes from a ``0x`` hex string; an odd last digit forms its own byte."""
    if not is_hexadecimal_str(data):
        raise ValueError("not a hexadecimal string")
    digits = bytes(_view(data)[2:])
    return bytes(
        _hex_prefix_value(digits[i : i + 2]) for i in range(0, len(digits), 2)
    )


def slice_span(data: BytesLike, begin: int, end: int | None = None) -> memoryview:
    """View of ``data[begin:end]`` with ``end`` capped at the data size."""
    if begin < 0 or (end is not None and end < 0):
        raise ValueError("slice bounds must be non-negative")
    view = _view(data)
    stop = len(view) if end is None else min(end, len(view))
    if begin >= stop:
        return view[0:0]
    return view[begin:stop]


def find(data: BytesLike, pattern: BytesLike) -> memoryview | None:
    """View from the first occurrence of ``pattern`` to the end of ``data``."""
    view = _view(data)
    needle = bytes(_view(pattern))
    if not view or not needle:
        return None
    index = bytes(view).find(needle)
    if index < 0:
        return None
    return view[index:]


def compare(lhs: BytesLike, rhs: BytesLike) -> int:
    """Compare the common prefix of two spans; empty spans sort first.

    Returns -1, 0 or 1.
    """
    a = bytes(_view(lhs))
    b = bytes(_view(rhs))
    if a and b:
        n = min(len(a), len(b))
        x, y = a[:n], b[:n]
        return (x > y) - (x < y)
    return int(not b) - int(not a)