"""CRC-32 and Adler-32 checksums."""

from __future__ import annotations

import zlib

_MASK32 = 0xFFFFFFFF


def crc32(data: bytes | bytearray | memoryview, init: int = _MASK32) -> int:
    """Update the raw CRC-32 register ``init`` with ``data``.

    No pre- or post-inversion is applied, so calls can be chained.
    """
    return zlib.crc32(bytes(data), (init ^ _MASK32) & _MASK32) ^ _MASK32


def crc32_bytes(data: bytes | bytearray | memoryview) -> int:
    """Standard CRC-32 of ``data``."""
    return crc32(data, _MASK32) ^ _MASK32


def crc32_str(text: str) -> int:
    """Standard CRC-32 of the UTF-8 bytes of ``text``."""
    return crc32_bytes(text.encode("utf-8"))


def adler32(data: bytes | bytearray | memoryview) -> int:
    """Adler-32 checksum of ``data``."""
    return zlib.adler32(bytes(data))