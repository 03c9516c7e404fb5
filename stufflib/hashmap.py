"""Open-addressing hash map with byte-string keys and quadratic probing."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from stufflib.hashing import crc32_bytes
from stufflib.numeric import next_power_of_two

MAX_LOAD_FACTOR = 0.5

KeyLike = Union[bytes, bytearray, memoryview, str]


def _key_bytes(key: KeyLike) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)


@dataclass
class Slot:
    """An occupied position in the map."""

    key: bytes
    hash: int
    value: Any


class HashMap:
    """Hash map keyed by bytes, hashed with CRC-32.

    The table doubles to the next power of two whenever the load factor
    exceeds :data:`MAX_LOAD_FACTOR`.
    """

    def __init__(self, capacity: int = 16) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._slots: list[Slot | None] = [None] * capacity
        self._size = 0

    @property
    def capacity(self) -> int:
        """Number of slots in the table."""
        return len(self._slots)

    def __len__(self) -> int:
        return self._size

    def find_slot(self, key: KeyLike, hash_value: int) -> int:
        """Index of the slot holding ``key`` or of the empty slot it would use."""
        raw = _key_bytes(key)
        capacity = len(self._slots)
        index = hash_value
        # The probe offsets are tetrahedral numbers, periodic modulo 6 * capacity.
        for probe in range(6 * capacity):
            index = (index + (probe + probe * probe) // 2) % capacity
            slot = self._slots[index]
            if slot is None or slot.key == raw:
                return index
        raise RuntimeError("hash map has no reachable free slot")

    def _index(self, key: KeyLike) -> int:
        raw = _key_bytes(key)
        return self.find_slot(raw, crc32_bytes(raw))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (bytes, bytearray, memoryview, str)):
            return False
        return self._slots[self._index(key)] is not None

    def __getitem__(self, key: KeyLike) -> Any:
        slot = self._slots[self._index(key)]
        if slot is None:
            raise KeyError(key)
        return slot.value

    def __setitem__(self, key: KeyLike, value: Any) -> None:
        self.insert(key, value)

    def __iter__(self) -> Iterator[bytes]:
        return (slot.key for slot in self._slots if slot is not None)

    def items(self) -> Iterator[tuple[bytes, Any]]:
        """Key-value pairs in slot order."""
        return ((slot.key, slot.value) for slot in self._slots if slot is not None)

    def insert(self, key: KeyLike, value: Any) -> None:
        """Insert or replace the value for ``key``, growing the table if needed."""
        raw = _key_bytes(key)
        hash_value = crc32_bytes(raw)
        index = self.find_slot(raw, hash_value)
        if self._slots[index] is None:
            self._size += 1
        self._slots[index] = Slot(raw, hash_value, value)
        if self.load_factor() > MAX_LOAD_FACTOR:
            self.resize(next_power_of_two(self.capacity))

    def resize(self, new_capacity: int) -> None:
        """Rehash every entry into a table of ``new_capacity`` slots."""
        if new_capacity <= 0:
            raise ValueError(f"capacity must be positive, got {new_capacity}")
        if new_capacity < self._size:
            raise ValueError(
                f"capacity {new_capacity} cannot hold {self._size} entries"
            )
        old_slots = self._slots
        self._slots = [None] * new_capacity
        for slot in old_slots:
            if slot is not None:
                self._slots[self.find_slot(slot.key, slot.hash)] = slot

    def load_factor(self) -> float:
        """Ratio of entries to slots."""
        return self._size / len(self._slots)