"""Minimal command-line argument inspection."""

from __future__ import annotations

import string
import sys
from collections.abc import Sequence

_ULLONG_MAX = (1 << 64) - 1
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _strtoull(text: str, base: int) -> int:
    """Parse an unsigned integer prefix of ``text`` like C ``strtoull``."""
    s = text.lstrip(" \t\n\v\f\r")
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]
    if base in (0, 16) and s[:2].lower() == "0x" and s[2:3] and s[2] in string.hexdigits:
        s = s[2:]
        base = 16
    elif base == 0:
        base = 8 if s.startswith("0") else 10
    if not 2 <= base <= 36:
        raise ValueError(f"invalid base {base}")
    value = 0
    for ch in s:
        digit = _DIGITS.find(ch.lower()) if ch.isascii() else -1
        if digit < 0 or digit >= base:
            break
        value = value * base + digit
    if value > _ULLONG_MAX:
        return _ULLONG_MAX
    if negative:
        value = -value & _ULLONG_MAX
    return value


class Args:
    """Argument vector whose first element is the program name."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        self.argv: tuple[str, ...] = tuple(sys.argv if argv is None else argv)

    def contains_help_flag(self) -> bool:
        """True if ``-h`` or ``--help`` appears after the program name."""
        return any(arg in ("-h", "--help") for arg in self.argv[1:])

    def is_flag(self, i: int) -> bool:
        """True if argument ``i`` exists and starts with ``-``."""
        return i < len(self.argv) and self.argv[i].startswith("-")

    def _positionals(self) -> list[str]:
        return [arg for arg in self.argv[1:] if not arg.startswith("-")]

    def count_positional(self) -> int:
        """Number of arguments that are not flags."""
        return len(self._positionals())

    def count_optional(self) -> int:
        """Number of flag arguments."""
        return len(self.argv) - self.count_positional() - 1

    def get_positional(self, pos: int) -> str | None:
        """The ``pos``-th non-flag argument, or None."""
        positionals = self._positionals()
        return positionals[pos] if 0 <= pos < len(positionals) else None

    def find_optional(self, arg: str) -> str | None:
        """First flag argument that starts with ``arg``, or None."""
        if not arg:
            return None
        return next(
            (opt for opt in self.argv[1:] if opt.startswith("-") and opt.startswith(arg)),
            None,
        )

    def parse_flag(self, arg: str) -> bool:
        """True if a flag starting with ``arg`` is present."""
        return self.find_optional(arg) is not None

    def parse_int(self, arg: str, base: int = 10) -> int:
        """Unsigned value after ``=`` in the flag ``arg``; 0 if absent."""
        opt = self.find_optional(arg)
        if opt is None or "=" not in opt:
            return 0
        return _strtoull(opt.split("=", 1)[1], base)