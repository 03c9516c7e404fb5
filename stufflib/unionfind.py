"""Disjoint-set forest."""

from __future__ import annotations


class UnionFind:
    """Disjoint sets over the indices ``0 .. count - 1``."""

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self._parents: list[int | None] = [None] * count

    def __len__(self) -> int:
        return len(self._parents)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._parents):
            raise IndexError(f"index {index} out of range")

    def find_root(self, index: int) -> int:
        """Root of the set that holds ``index``."""
        self._check(index)
        parent = self._parents[index]
        while parent is not None:
            index = parent
            parent = self._parents[index]
        return index

    def union(self, lhs: int, rhs: int) -> None:
        """Merge the set of ``rhs`` into the set of ``lhs``.

        Every node on the path from ``rhs`` to its root is pointed at the
        root of ``lhs``.
        """
        root = self.find_root(lhs)
        self._check(rhs)
        node: int | None = rhs
        while node is not None:
            following = self._parents[node]
            if node != root:
                self._parents[node] = root
            node = following