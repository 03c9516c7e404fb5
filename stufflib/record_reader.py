"""Reading dense and sparse record data files."""

from __future__ import annotations

import struct
from typing import Any, BinaryIO

from stufflib.record import Record, RecordError

_OFFSET = struct.Struct("<q")


class RecordReader:
    """Reads record data into caller-provided buffers, batch by batch.

    For the sparse layout each call fills one buffer-sized batch of items,
    zeroing the rest, so successive buffers concatenate to the dense data.
    """

    def __init__(self, record: Record) -> None:
        self.record = record
        self.n_read = 0
        self.index = 0
        self.sparse_offset = 0
        self.has_sparse_offset = False
        self._file: BinaryIO | None = None
        self._eof = False

    def open(self) -> None:
        """Open the record data file for reading."""
        self._file = open(self.record.data_path(), "rb")
        self._eof = False

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> RecordReader:
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _disk_size(self) -> int:
        offset_size = _OFFSET.size if self.record.is_sparse else 0
        return (offset_size + self.record.item_size()) * self.record.size

    def is_done(self) -> bool:
        """True once all stored items have been consumed or the file ended."""
        if self._file is None or self._eof:
            return True
        return self._file.tell() >= self._disk_size()

    def _read_bytes(self, count: int) -> bytes:
        assert self._file is not None
        data = self._file.read(count)
        if len(data) < count:
            self._eof = True
        return data

    def read(self, buffer: Any) -> None:
        """Fill the writable ``buffer`` with the next batch of items."""
        if self._file is None:
            raise RecordError("record reader is not open")
        view = memoryview(buffer).cast("B")
        item_size = self.record.item_size()
        if item_size == 0:
            raise RecordError(f"unknown data type '{self.record.type}'")
        length = len(view) // item_size
        if length == 0:
            raise RecordError("buffer is smaller than one item")
        if self.record.layout == "sparse":
            self._read_sparse(view, item_size, length)
        elif self.record.layout == "dense":
            self._read_dense(view, item_size, length)
        else:
            raise RecordError(f"unknown data layout {self.record.layout}")

    def _read_sparse(self, view: memoryview, item_size: int, length: int) -> None:
        view[:] = bytes(len(view))
        if self.sparse_offset > length:
            self.index += length
            self.sparse_offset -= length
            return

        while not self.is_done():
            if not self.has_sparse_offset:
                raw = self._read_bytes(_OFFSET.size)
                offset = _OFFSET.unpack(raw)[0] if len(raw) == _OFFSET.size else -1
                if offset < 0:
                    raise RecordError(
                        f"failed reading sparse index offset at index {self.index} "
                        f"with n_read {self.n_read}"
                    )
                self.sparse_offset = offset
                self.has_sparse_offset = True

            target = self.index + self.sparse_offset
            batch_offset = self.index % length
            if target // length > self.index // length:
                skip = length - batch_offset
                self.sparse_offset -= skip
                self.index += skip
                return

            value = self._read_bytes(item_size)
            if len(value) != item_size:
                raise RecordError(
                    f"failed reading sparse data at index {self.index} "
                    f"with n_read {self.n_read}"
                )
            buf_idx = target % length
            view[buf_idx * item_size : (buf_idx + 1) * item_size] = value
            self.n_read += 1
            self.index = target
            self.sparse_offset = 0
            self.has_sparse_offset = False

    def _read_dense(self, view: memoryview, item_size: int, length: int) -> None:
        data = self._read_bytes(length * item_size)
        count = len(data) // item_size
        view[: count * item_size] = data[: count * item_size]
        self.n_read += count
        self.index += count
        if count != length:
            raise RecordError(f"failed reading dense data: got {count} of {length} items")


def read_all(record: Record, size: int) -> bytes:
    """Read the whole record into ``size`` bytes and check nothing is left."""
    buffer = bytearray(size)
    with RecordReader(record) as reader:
        reader.read(buffer)
        if not reader.is_done():
            raise RecordError("failed reading record data: data left over")
    return bytes(buffer)