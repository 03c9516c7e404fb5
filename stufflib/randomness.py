"""Random fills and Fisher-Yates shuffles."""

from __future__ import annotations

import random as _random
from collections.abc import MutableSequence
from typing import Any


def _source(rng: Any) -> Any:
    return _random if rng is None else rng


def fill_double(n: int, scale: float = 1.0, rng: Any = None) -> list[float]:
    """``n`` uniform values in ``[-scale / 2, scale / 2]``."""
    source = _source(rng)
    return [scale * (source.random() - 0.5) for _ in range(n)]


def set_zero(
    values: MutableSequence[float], probability: float, rng: Any = None
) -> None:
    """Set each value to zero with the given probability, in place."""
    source = _source(rng)
    p = max(0.0, min(1.0, probability))
    values[:] = [0.0 if source.random() < p else v for v in values]


def rand_int(a: int, b: int, rng: Any = None) -> int:
    """Random integer ``i`` with ``a <= i < b``; ``a`` if the range is empty."""
    if a >= b:
        return a
    return _source(rng).randrange(a, b)


def shuffle(items: MutableSequence[Any], rng: Any = None) -> None:
    """Fisher-Yates shuffle of ``items`` in place."""
    n = len(items)
    for i in range(n - 1):
        j = rand_int(i, n, rng)
        items[i], items[j] = items[j], items[i]


def shuffle_together(
    items1: MutableSequence[Any], items2: MutableSequence[Any], rng: Any = None
) -> None:
    """Shuffle two equally long sequences with the same permutation."""
    n = len(items1)
    if n != len(items2):
        raise ValueError(f"sequences differ in length: {n} != {len(items2)}")
    for i in range(n - 1):
        j = rand_int(i, n, rng)
        items1[i], items1[j] = items1[j], items1[i]
        items2[i], items2[j] = items2[j], items2[i]