"""Numeric helpers: primes, powers of two and small vector arithmetic."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence

_DIFF_STEP = 0.0001


def diff(f: Callable[[float], float], x: float) -> float:
    """Forward-difference derivative of ``f`` at ``x``."""
    return (f(x + _DIFF_STEP) - f(x)) / _DIFF_STEP


def almost_equal(lhs: float, rhs: float, eps: float) -> bool:
    """True if ``lhs`` and ``rhs`` differ by less than ``eps``."""
    return abs(lhs - rhs) < eps


def clamp(lo: float, mid: float, hi: float) -> float:
    """Clamp ``mid`` into ``[lo, hi]``."""
    return min(hi, max(lo, mid))


def next_power_of_two(x: int) -> int:
    """Smallest power of two strictly greater than ``x``."""
    result = 1
    while result <= x:
        result *= 2
    return result


def is_prime(x: int) -> bool:
    """Trial division, trying divisors ``d`` while ``d * d < x``."""
    d = 2
    while d * d < x:
        if x % d == 0:
            return False
        d += 1
    return True


def next_prime(x: int) -> int:
    """First value above ``x`` accepted by :func:`is_prime`."""
    p = x + 1
    while not is_prime(p):
        p += 1
    return p


def factorize(n: int) -> list[int]:
    """Prime factors of ``n`` in non-decreasing order; empty for 0 and 1."""
    factors: list[int] = []
    if n < 2:
        return factors
    k = next_prime(1)
    while k <= n:
        if n % k == 0:
            factors.append(k)
            n //= k
        else:
            k = next_prime(k)
    return factors


def scalar_vmul(a: float, v: Iterable[float]) -> list[float]:
    """Multiply every element of ``v`` by ``a``."""
    return [a * x for x in v]


def vadd(lhs: Iterable[float], rhs: Iterable[float]) -> list[float]:
    """Element-wise sum of two equally long vectors."""
    return [x + y for x, y in zip(lhs, rhs, strict=True)]


def vsub(lhs: Iterable[float], rhs: Iterable[float]) -> list[float]:
    """Element-wise difference of two equally long vectors."""
    return [x - y for x, y in zip(lhs, rhs, strict=True)]


def norm2(v: Iterable[float]) -> float:
    """Euclidean norm of ``v``."""
    return math.sqrt(sum(x * x for x in v))


def dot(v1: Iterable[float], v2: Iterable[float]) -> float:
    """Dot product of two equally long vectors."""
    return sum(x * y for x, y in zip(v1, v2, strict=True))


def matmul(m: Iterable[Sequence[float]], v: Sequence[float]) -> list[float]:
    """Product of the row-major matrix ``m`` and the vector ``v``."""
    return [dot(row, v) for row in m]


def is_finite(values: Iterable[float]) -> bool:
    """True if no value is infinite or NaN."""
    return all(math.isfinite(x) for x in values)