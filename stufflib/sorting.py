"""Insertion sort, merge sort and quicksort driven by three-way comparisons."""

from __future__ import annotations

from collections.abc import Callable, MutableSequence
from typing import Any, TypeVar

from stufflib.misc import midpoint

T = TypeVar("T")
Compare = Callable[[Any, Any], int]

_INSERTSORT_THRESHOLD = 24


def compare_double(lhs: float, rhs: float) -> int:
    """Three-way comparison of two numbers: -1, 0 or 1."""
    return (lhs > rhs) - (lhs < rhs)


def compare_str(lhs: str, rhs: str) -> int:
    """Three-way comparison of two strings by code point: -1, 0 or 1."""
    return (lhs > rhs) - (lhs < rhs)


def _require_items(items: MutableSequence[Any]) -> None:
    if not items:
        raise ValueError("cannot sort an empty sequence")


def _insertsort_range(
    items: MutableSequence[Any], lo: int, hi: int, compare: Compare
) -> None:
    """Insertion sort of ``items[lo:hi]`` in place."""
    for rhs in range(lo + 1, hi):
        value = items[rhs]
        pos = rhs
        while pos > lo and compare(items[pos - 1], value) > 0:
            items[pos] = items[pos - 1]
            pos -= 1
        items[pos] = value


def insertsort(items: MutableSequence[T], compare: Compare) -> MutableSequence[T]:
    """Sort ``items`` in place by insertion and return it."""
    _require_items(items)
    _insertsort_range(items, 0, len(items), compare)
    return items


def _merge(
    src: list[Any], dst: list[Any], begin: int, mid: int, end: int, compare: Compare
) -> None:
    lhs, rhs, out = begin, mid, begin
    while lhs < mid and rhs < end:
        if compare(src[lhs], src[rhs]) < 0:
            dst[out] = src[lhs]
            lhs += 1
        else:
            dst[out] = src[rhs]
            rhs += 1
        out += 1
    dst[out:end] = src[lhs:mid] + src[rhs:end]


def _mergesort(
    src: list[Any], dst: list[Any], begin: int, end: int, compare: Compare
) -> None:
    """Sort ``src[begin:end]`` into ``dst[begin:end]``, swapping roles per level."""
    if end - begin <= 1:
        return
    mid = midpoint(begin, end)
    _mergesort(dst, src, begin, mid, compare)
    _mergesort(dst, src, mid, end, compare)
    _merge(src, dst, begin, mid, end, compare)


def mergesort(items: MutableSequence[T], compare: Compare) -> MutableSequence[T]:
    """Sort ``items`` in place by top-down merge sort and return it."""
    _require_items(items)
    src = list(items)
    result = list(items)
    _mergesort(src, result, 0, len(result), compare)
    items[:] = result
    return items


def _hoare_partition(
    items: MutableSequence[Any], lo: int, hi: int, compare: Compare
) -> int:
    pivot = items[midpoint(lo, hi)]
    lhs = lo - 1
    rhs = hi + 1
    while True:
        lhs += 1
        while compare(items[lhs], pivot) < 0:
            lhs += 1
        rhs -= 1
        while compare(items[rhs], pivot) > 0:
            rhs -= 1
        if lhs >= rhs:
            return rhs
        items[lhs], items[rhs] = items[rhs], items[lhs]


def _quicksort(
    items: MutableSequence[Any], lo: int, hi: int, compare: Compare
) -> None:
    """Sort the inclusive range ``items[lo..hi]``."""
    while lo < hi:
        if hi - lo < _INSERTSORT_THRESHOLD:
            _insertsort_range(items, lo, hi + 1, compare)
            return
        pivot = _hoare_partition(items, lo, hi, compare)
        # Recurse on the smaller part to keep the stack shallow.
        if pivot - lo < hi - pivot:
            _quicksort(items, lo, pivot, compare)
            lo = pivot + 1
        else:
            _quicksort(items, pivot + 1, hi, compare)
            hi = pivot


def quicksort(items: MutableSequence[T], compare: Compare) -> MutableSequence[T]:
    """Sort ``items`` in place by quicksort with Hoare partitioning."""
    _require_items(items)
    _quicksort(items, 0, len(items) - 1, compare)
    return items


def insertsort_double(items: MutableSequence[float]) -> MutableSequence[float]:
    """Insertion sort of numbers."""
    return insertsort(items, compare_double)


def mergesort_double(items: MutableSequence[float]) -> MutableSequence[float]:
    """Merge sort of numbers."""
    return mergesort(items, compare_double)


def quicksort_double(items: MutableSequence[float]) -> MutableSequence[float]:
    """Quicksort of numbers."""
    return quicksort(items, compare_double)


def insertsort_str(items: MutableSequence[str]) -> MutableSequence[str]:
    """Insertion sort of strings."""
    return insertsort(items, compare_str)


def mergesort_str(items: MutableSequence[str]) -> MutableSequence[str]:
    """Merge sort of strings."""
    return mergesort(items, compare_str)


def quicksort_str(items: MutableSequence[str]) -> MutableSequence[str]:
    """Quicksort of strings."""
    return quicksort(items, compare_str)