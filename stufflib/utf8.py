"""Validation and decoding of well-formed UTF-8 byte sequences."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

ERROR_WIDTH = 0

_CONTINUATION = (0x80, 0xBF)
_LEAD_MASKS = {1: 0x7F, 2: 0x1F, 3: 0x0F, 4: 0x07}


def codepoint_width(value: int) -> int:
    """Number of UTF-8 bytes needed for ``value``; 0 if out of range."""
    if value < 0x80:
        return 1
    if value < 0x800:
        return 2
    if value < 0x10000:
        return 3
    if value < 0x110000:
        return 4
    return ERROR_WIDTH


def _lead_byte(byte: int) -> tuple[int, tuple[int, int]] | None:
    """Sequence width and allowed second-byte range for a lead byte."""
    if byte <= 0x7F:
        return 1, _CONTINUATION
    if 0xC2 <= byte <= 0xDF:
        return 2, _CONTINUATION
    if byte == 0xE0:
        return 3, (0xA0, 0xBF)
    if byte == 0xED:
        return 3, (0x80, 0x9F)
    if 0xE1 <= byte <= 0xEF:
        return 3, _CONTINUATION
    if byte == 0xF0:
        return 4, (0x90, 0xBF)
    if byte == 0xF4:
        return 4, (0x80, 0x8F)
    if 0xF1 <= byte <= 0xF3:
        return 4, _CONTINUATION
    return None


def codepoint_width_from_utf8(data: BytesLike) -> int:
    """Width of the well-formed sequence at the start of ``data``; 0 if ill-formed."""
    head = bytes(data[:4])
    if not head:
        return ERROR_WIDTH
    lead = _lead_byte(head[0])
    if lead is None:
        return ERROR_WIDTH
    width, (lo, hi) = lead
    if len(head) < width:
        return ERROR_WIDTH
    if width > 1 and not lo <= head[1] <= hi:
        return ERROR_WIDTH
    lo, hi = _CONTINUATION
    if any(not lo <= b <= hi for b in head[2:width]):
        return ERROR_WIDTH
    return width


def codepoint_from_utf8(data: BytesLike) -> int:
    """Decode one code point from a sequence of exactly its width."""
    raw = bytes(data)
    mask = _LEAD_MASKS.get(len(raw))
    if mask is None:
        raise ValueError(f"invalid UTF-8 sequence width {len(raw)}")
    value = raw[0] & mask
    for byte in raw[1:]:
        value = (value << 6) | (byte & 0x3F)
    return value


def is_valid_utf8(data: BytesLike) -> bool:
    """True if ``data`` is entirely well-formed UTF-8."""
    raw = bytes(data)
    pos = 0
    while pos < len(raw):
        width = codepoint_width_from_utf8(raw[pos : pos + 4])
        if width == ERROR_WIDTH:
            return False
        pos += width
    return True


def iter_codepoints(data: BytesLike) -> Iterator[tuple[int, int | None]]:
    """Yield ``(byte_offset, codepoint)`` pairs.

    An ill-formed byte yields ``None`` as its code point and is skipped alone.
    """
    raw = bytes(data)
    pos = 0
    while pos < len(raw):
        width = codepoint_width_from_utf8(raw[pos : pos + 4])
        if width == ERROR_WIDTH:
            yield pos, None
            pos += 1
        else:
            yield pos, codepoint_from_utf8(raw[pos : pos + width])
            pos += width


def length(data: BytesLike) -> int:
    """Number of code points in ``data``; 0 if it is not valid UTF-8."""
    if not is_valid_utf8(data):
        return 0
    return sum(1 for _ in iter_codepoints(data))