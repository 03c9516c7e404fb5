import struct

import pytest

from stufflib.record import Record, RecordError
from stufflib.record_reader import RecordReader, read_all
from stufflib.record_writer import write_all

_VALUES = [0.0, 1.5, 0.0, 0.0, -2.0, 0.0, 3.25]


def _floats(values):
    return struct.pack(f"<{len(values)}f", *values)


def _record(tmp_path, layout, size, type_name="float32", dims=None):
    return Record(
        name="data",
        path=str(tmp_path),
        type=type_name,
        layout=layout,
        size=size,
        dims=dims or (len(_VALUES),),
    )


def _sparse_record(tmp_path):
    record = _record(tmp_path, "sparse", sum(1 for v in _VALUES if v))
    write_all(record, _floats(_VALUES))
    return record


def test_dense_round_trip(tmp_path):
    record = _record(tmp_path, "dense", len(_VALUES))
    data = _floats(_VALUES)
    write_all(record, data)
    assert read_all(record, len(data)) == data


def test_int16_round_trip(tmp_path):
    values = [-3, 0, 7, 32767, -32768]
    data = struct.pack("<5h", *values)
    record = _record(tmp_path, "sparse", 4, type_name="int16", dims=(5,))
    write_all(record, data)
    assert struct.unpack("<5h", read_all(record, len(data))) == tuple(values)


def test_sparse_round_trip(tmp_path):
    record = _sparse_record(tmp_path)
    data = _floats(_VALUES)
    assert read_all(record, len(data)) == data


@pytest.mark.parametrize("batch", [1, 2, 3, 7])
def test_sparse_batches_concatenate(tmp_path, batch):
    record = _sparse_record(tmp_path)
    collected = bytearray()
    with RecordReader(record) as reader:
        for _ in range(100):
            if reader.is_done():
                break
            buffer = bytearray(4 * batch)
            reader.read(buffer)
            collected += buffer
        assert reader.is_done()
        assert reader.n_read == record.size
    data = _floats(_VALUES)
    assert len(collected) >= len(data)
    assert bytes(collected[: len(data)]) == data
    assert not any(collected[len(data) :])


def test_dense_batches(tmp_path):
    values = [float(v) for v in range(6)]
    record = _record(tmp_path, "dense", len(values), dims=(6,))
    write_all(record, _floats(values))
    chunks = []
    with RecordReader(record) as reader:
        for _ in range(3):
            buffer = bytearray(8)
            reader.read(buffer)
            chunks.append(bytes(buffer))
        assert reader.is_done()
        assert reader.n_read == len(values)
    assert b"".join(chunks) == _floats(values)


def test_dense_short_file(tmp_path):
    record = _record(tmp_path, "dense", len(_VALUES))
    write_all(record, _floats(_VALUES[:3]))
    with pytest.raises(RecordError):
        read_all(record, 4 * len(_VALUES))


def test_dense_left_over_data(tmp_path):
    record = _record(tmp_path, "dense", len(_VALUES))
    write_all(record, _floats(_VALUES))
    with pytest.raises(RecordError):
        read_all(record, 8)


def test_negative_sparse_offset(tmp_path):
    record = _record(tmp_path, "sparse", 1)
    with open(record.data_path(), "wb") as f:
        f.write(struct.pack("<q", -1) + _floats([1.0]))
    with pytest.raises(RecordError):
        read_all(record, 16)


def test_read_without_open(tmp_path):
    reader = RecordReader(_record(tmp_path, "dense", 1))
    assert reader.is_done()
    with pytest.raises(RecordError):
        reader.read(bytearray(4))


def test_open_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        RecordReader(_record(tmp_path, "dense", 1)).open()