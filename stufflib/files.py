"""File helpers: reading whole files and parsing whitespace-separated integers."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from functools import partial
from typing import Union

from stufflib.text import Utf8String
from stufflib.utf8 import is_valid_utf8

PathLike = Union[str, "os.PathLike[str]"]

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DEFAULT_CHUNK_SIZE = 8192


def format_path(path: str, name: str, suffix: str) -> str:
    """Join ``path``, ``name`` and ``suffix`` as ``path/namesuffix``."""
    if not path or not name:
        raise ValueError("path and name must be non-empty")
    return f"{path}/{name}{suffix}"


def parse_int64(stream: Iterable[str], count: int) -> list[int]:
    """Parse up to ``count`` whitespace-separated 64-bit integers from a text stream.

    Fewer values are returned if the stream ends first.
    """
    values: list[int] = []
    if count <= 0:
        return values
    for line in stream:
        for token in line.split():
            if not _INTEGER.fullmatch(token):
                raise ValueError(
                    f"failed parsing int64 at index {len(values)}: {token!r}"
                )
            value = int(token)
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise ValueError(f"value {token} at index {len(values)} overflows int64")
            values.append(value)
            if len(values) == count:
                return values
    return values


def read_file(path: PathLike, chunk_size: int = _DEFAULT_CHUNK_SIZE) -> bytes:
    """Read the whole file at ``path`` in chunks of ``chunk_size`` bytes."""
    if chunk_size <= 0:
        raise ValueError(f"chunk size must be positive, got {chunk_size}")
    with open(path, "rb") as f:
        return b"".join(iter(partial(f.read, chunk_size), b""))


def read_file_utf8(path: PathLike) -> Utf8String:
    """Read the file at ``path`` as a UTF-8 string."""
    data = read_file(path)
    if not is_valid_utf8(data):
        raise ValueError(f"cannot decode '{os.fspath(path)}' as UTF-8")
    return Utf8String.from_utf8(data)


def read_int64(path: PathLike, count: int) -> list[int]:
    """Read exactly ``count`` integers from the text file at ``path``."""
    with open(path, encoding="ascii") as f:
        values = parse_int64(f, count)
    if len(values) != count:
        raise ValueError(
            f"expected {count} integers in '{os.fspath(path)}', found {len(values)}"
        )
    return values