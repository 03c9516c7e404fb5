"""Record metadata: data type, layout and dimensions of a stored array."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Union

from stufflib.files import format_path

PathLike = Union[str, "os.PathLike[str]"]

DATA_SUFFIX = ".sl_record_data"
META_SUFFIX = ".sl_record_meta"
LAYOUTS = ("sparse", "dense")
MAX_DIMS = 8

_ITEM_SIZES = {
    "float32": 4,
    "int8": 1,
    "int16": 2,
    "int32": 4,
    "int64": 8,
    "uint8": 1,
    "uint16": 2,
    "uint32": 4,
    "uint64": 8,
}


class RecordError(ValueError):
    """Raised for invalid record metadata or unreadable record data."""


@dataclass
class Record:
    """Description of an array stored as ``path/name`` data and metadata files.

    For the dense layout ``size`` is the number of items; for the sparse
    layout it is the number of stored non-zero items.
    """

    name: str
    path: str
    type: str = "float32"
    layout: str = "dense"
    size: int = 0
    dims: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        self.path = os.fspath(self.path)
        self.dims = tuple(self.dims)

    @property
    def n_dims(self) -> int:
        return len(self.dims)

    @property
    def is_sparse(self) -> bool:
        return self.layout == "sparse"

    def item_size(self) -> int:
        """Bytes per item of the data type; 0 for an unknown type."""
        return _ITEM_SIZES.get(self.type, 0)

    def validate(self) -> None:
        """Raise RecordError if the metadata is inconsistent."""
        if self.n_dims <= 0:
            raise RecordError("n_dims must be positive")
        if self.n_dims > MAX_DIMS:
            raise RecordError(f"at most {MAX_DIMS} dimensions are supported")
        if self.layout not in LAYOUTS:
            raise RecordError(f"unknown data layout '{self.layout}'")
        if self.layout == "dense" and not self.size:
            raise RecordError("dense data layout must have a size")
        if self.item_size() == 0:
            raise RecordError(f"unknown data type '{self.type}'")

    def _file_path(self, suffix: str) -> str:
        try:
            return format_path(self.path, self.name, suffix)
        except ValueError as exc:
            raise RecordError(f"cannot format record path: {exc}") from exc

    def data_path(self) -> str:
        """Path of the data file."""
        return self._file_path(DATA_SUFFIX)

    def meta_path(self) -> str:
        """Path of the metadata file."""
        return self._file_path(META_SUFFIX)

    def write_metadata(self) -> None:
        """Validate and write the metadata file."""
        self.validate()
        lines = [
            f"name: {self.name}",
            f"type: {self.type}",
            f"layout: {self.layout}",
            f"size: {self.size}",
            f"dims: {self.n_dims}",
        ]
        lines += [f"dim{d}: {size}" for d, size in enumerate(self.dims)]
        with open(self.meta_path(), "w", encoding="utf-8") as f:
            f.write("".join(line + "\n" for line in lines))


def _field(tokens: list[str], pos: int, label: str, source: str) -> str:
    if pos + 1 >= len(tokens) or tokens[pos] != label:
        raise RecordError(f"failed reading '{label[:-1]}' from {source}")
    return tokens[pos + 1]


def _int(text: str, what: str, source: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise RecordError(f"invalid {what} '{text}' in {source}") from None


def read_metadata(path: PathLike, name: str) -> Record:
    """Read and validate the metadata of record ``name`` in directory ``path``."""
    meta_path = Record(name=name, path=os.fspath(path)).meta_path()
    with open(meta_path, encoding="utf-8") as f:
        tokens = f.read().split()

    record_name = _field(tokens, 0, "name:", meta_path)
    record_type = _field(tokens, 2, "type:", meta_path)
    layout = _field(tokens, 4, "layout:", meta_path)
    size = _int(_field(tokens, 6, "size:", meta_path), "size", meta_path)
    n_dims = _int(_field(tokens, 8, "dims:", meta_path), "dims", meta_path)
    if n_dims == 0:
        raise RecordError(f"failed reading {meta_path}: no dimensions")

    dims = []
    for d in range(max(n_dims, 0)):
        pos = 10 + 2 * d
        label = tokens[pos] if pos < len(tokens) else ""
        if not (label.startswith("dim") and label.endswith(":") and label[3:-1].isdigit()):
            raise RecordError(f"failed reading dimension {d} from {meta_path}")
        dims.append(_int(_field(tokens, pos, label, meta_path), f"dimension {d}", meta_path))

    record = Record(
        name=record_name,
        path=os.fspath(path),
        type=record_type,
        layout=layout,
        size=size,
        dims=tuple(dims),
    )
    record.validate()
    return record