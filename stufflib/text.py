"""Immutable strings stored as validated UTF-8 bytes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Union

from stufflib import utf8

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Utf8String:
    """A string of well-formed UTF-8 bytes with a cached code point count."""

    data: bytes = b""
    _length: int = field(init=False, repr=False, compare=False, default=0)

    def __post_init__(self) -> None:
        raw = bytes(self.data)
        if not utf8.is_valid_utf8(raw):
            raise ValueError("UTF-8 decode error, cannot initialize string")
        object.__setattr__(self, "data", raw)
        object.__setattr__(self, "_length", utf8.length(raw))

    @classmethod
    def from_utf8(cls, data: BytesLike) -> Utf8String:
        """Build a string from UTF-8 bytes, raising ValueError if ill-formed."""
        return cls(bytes(data))

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return self.data.decode("utf-8")

    def __bytes__(self) -> bytes:
        return self.data

    def __add__(self, other: Utf8String) -> Utf8String:
        return self.concat(other)

    def is_ascii(self) -> bool:
        """True if every byte is below 0x80."""
        return all(byte < 0x80 for byte in self.data)

    def concat(self, other: Utf8String) -> Utf8String:
        """A new string holding this string followed by ``other``."""
        return Utf8String(self.data + other.data)

    def slice(self, begin: int, end: int) -> Utf8String:
        """Code points ``begin`` up to ``end``, clamped to the string."""
        if begin < 0 or end < 0:
            raise ValueError("slice bounds must be non-negative")
        offsets = [offset for offset, _ in utf8.iter_codepoints(self.data)]
        offsets.append(len(self.data))
        count = len(offsets) - 1
        first = min(begin, count)
        last = max(first, min(end, count))
        return Utf8String(self.data[offsets[first] : offsets[last]])

    def write(self, stream: BinaryIO) -> None:
        """Write the UTF-8 bytes to a binary stream."""
        written = stream.write(self.data)
        if written is not None and written != len(self.data):
            raise OSError(f"wrote {written} of {len(self.data)} bytes")