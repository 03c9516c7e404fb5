"""Canonical Huffman codes built from code lengths."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence


class HuffmanTree:
    """Canonical Huffman code: maps ``(code, code_len)`` to a symbol.

    Symbol ``i`` has code length ``code_lengths[i]``; length 0 means unused.
    """

    def __init__(self, code_lengths: Sequence[int]) -> None:
        lengths = list(code_lengths)
        if any(length < 0 for length in lengths):
            raise ValueError("code lengths must be non-negative")
        self.max_code_len: int = max(lengths, default=0)
        self._symbols: dict[tuple[int, int], int] = {}
        if not self.max_code_len:
            return

        counts = Counter(length for length in lengths if length)
        next_code: dict[int, int] = {}
        code = 0
        for bits in range(1, self.max_code_len + 1):
            code = (code + counts.get(bits - 1, 0)) << 1
            next_code[bits] = code

        for symbol, length in enumerate(lengths):
            if length:
                self._symbols[(length, next_code[length])] = symbol
                next_code[length] += 1

    def contains(self, code: int, code_len: int) -> bool:
        """True if ``code`` of ``code_len`` bits encodes a symbol."""
        return code_len > 0 and (code_len, code) in self._symbols

    def get(self, code: int, code_len: int) -> int:
        """Symbol encoded by ``code`` of ``code_len`` bits."""
        try:
            return self._symbols[(code_len, code)]
        except KeyError:
            raise KeyError(f"no symbol for code {code:b} of length {code_len}") from None