"""Writing dense and sparse record data files."""

from __future__ import annotations

import struct
from typing import Any, BinaryIO

from stufflib.misc import is_zero
from stufflib.record import Record, RecordError

_OFFSET = struct.Struct("<q")


class RecordWriter:
    """Appends items to a record data file.

    The sparse layout stores each non-zero item as a 64-bit offset from the
    previous stored item followed by the item bytes; offsets carry across
    calls to :meth:`write`.
    """

    def __init__(self, record: Record) -> None:
        self.record = record
        self.n_written = 0
        self.sparse_offset = 0
        self._file: BinaryIO | None = None

    def open(self) -> None:
        """Validate the record and create its data file."""
        self.record.validate()
        self._file = open(self.record.data_path(), "wb")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> RecordWriter:
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def write(self, data: Any) -> None:
        """Append the whole items contained in the bytes-like ``data``."""
        if self._file is None:
            raise RecordError("record writer is not open")
        raw = bytes(memoryview(data).cast("B"))
        item_size = self.record.item_size()
        if item_size == 0:
            raise RecordError(f"unknown data type '{self.record.type}'")
        end = len(raw) // item_size * item_size

        if self.record.layout == "sparse":
            offset = self.sparse_offset
            out = bytearray()
            for start in range(0, end, item_size):
                value = raw[start : start + item_size]
                if not is_zero(value):
                    out += _OFFSET.pack(offset)
                    out += value
                    self.n_written += 1
                    offset = 0
                offset += 1
            self._file.write(out)
            self.sparse_offset = offset
        elif self.record.layout == "dense":
            self._file.write(raw[:end])
            self.n_written += end // item_size
        else:
            raise RecordError(f"unknown data layout {self.record.layout}")


def write_all(record: Record, data: Any) -> int:
    """Write ``data`` as the record's data file; returns the items stored."""
    with RecordWriter(record) as writer:
        writer.write(data)
        return writer.n_written