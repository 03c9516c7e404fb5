"""Reading and writing 8-bit RGB/RGBA PNG images."""

from __future__ import annotations

import json
import os
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO, Union

from stufflib.deflate import DeflateError, deflate_uncompressed, inflate
from stufflib.hashing import crc32_bytes
from stufflib.misc import encode_big_endian, parse_big_endian

PathLike = Union[str, "os.PathLike[str]"]
BytesLike = Union[bytes, bytearray, memoryview]

SIGNATURE = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])
MAX_CHUNK_SIZE = 1 << 31
_IHDR_SIZE = 13


class PngError(ValueError):
    """Raised for unreadable, corrupted or unsupported PNG data."""


class ChunkType(IntEnum):
    """Known PNG chunk types, in the order used when reporting frequencies."""

    IHDR = 1
    PLTE = 2
    IDAT = 3
    IEND = 4
    bKGD = 5
    cHRM = 6
    dSIG = 7
    eXIf = 8
    gAMA = 9
    hIST = 10
    iCCP = 11
    iTXt = 12
    pHYs = 13
    sBIT = 14
    sPLT = 15
    sRGB = 16
    sTER = 17
    tEXt = 18
    tIME = 19
    tRNS = 20
    zTXt = 21

    @property
    def tag(self) -> bytes:
        """The four-byte chunk type as written in a file."""
        return self.name.encode("ascii")


class ColorType(IntEnum):
    """PNG color types."""

    GRAYSCALE = 0
    RGB = 2
    INDEXED = 3
    GRAYSCALE_ALPHA = 4
    RGBA = 6

    @property
    def label(self) -> str:
        return _COLOR_LABELS[self]

    @property
    def bytes_per_pixel(self) -> int:
        """Bytes per pixel at 8 bits per sample; 0 for indexed images."""
        return _BYTES_PER_PIXEL[self]


_COLOR_LABELS = {
    ColorType.GRAYSCALE: "grayscale",
    ColorType.RGB: "rgb",
    ColorType.INDEXED: "indexed",
    ColorType.GRAYSCALE_ALPHA: "grayscale with alpha",
    ColorType.RGBA: "rgba",
}

_BYTES_PER_PIXEL = {
    ColorType.GRAYSCALE: 1,
    ColorType.RGB: 3,
    ColorType.INDEXED: 0,
    ColorType.GRAYSCALE_ALPHA: 2,
    ColorType.RGBA: 4,
}


class FilterType(IntEnum):
    """Per-scanline filter types."""

    NONE = 0
    SUB = 1
    UP = 2
    AVG = 3
    PAETH = 4

    @property
    def label(self) -> str:
        return _FILTER_LABELS[self]

    @classmethod
    def parse(cls, value: int) -> FilterType:
        """Filter type for a scanline byte; unknown values mean no filter."""
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


_FILTER_LABELS = {
    FilterType.NONE: "None",
    FilterType.SUB: "Sub",
    FilterType.UP: "Up",
    FilterType.AVG: "Average",
    FilterType.PAETH: "Paeth",
}


@dataclass(frozen=True)
class PngHeader:
    """Contents of an IHDR chunk."""

    width: int
    height: int
    bit_depth: int = 8
    color_type: ColorType = ColorType.RGB
    compression: int = 0
    filter: int = 0
    interlace: int = 0

    @property
    def bytes_per_pixel(self) -> int:
        return self.color_type.bytes_per_pixel


@dataclass(frozen=True)
class Chunk:
    """A chunk read from a PNG file."""

    type: ChunkType
    data: bytes
    crc32: int

    def compute_crc32(self) -> int:
        """CRC-32 over the chunk type and data."""
        return crc32_bytes(self.type.tag + self.data)


@dataclass
class PngImage:
    """Decoded image with a one-pixel zero border around the pixel data.

    ``data`` holds ``(height + 2) * (width + 2)`` pixels in row-major order;
    ``filter`` holds the filter byte of each scanline.
    """

    header: PngHeader
    data: bytearray = field(default_factory=bytearray)
    filter: bytes = b""

    @classmethod
    def rgb(cls, width: int, height: int) -> PngImage:
        """A black 8-bit RGB image."""
        if width < 0 or height < 0:
            raise ValueError("image dimensions must be non-negative")
        header = PngHeader(width=width, height=height)
        return cls(
            header=header,
            data=bytearray((width + 2) * (height + 2) * 3),
            filter=bytes(height),
        )

    def _offset(self, row: int, col: int) -> int:
        width = self.header.width
        if not (0 <= row < self.header.height + 2 and 0 <= col < width + 2):
            raise IndexError(f"pixel ({row}, {col}) out of range")
        return (row * (width + 2) + col) * self.header.bytes_per_pixel

    def get_pixel(self, row: int, col: int) -> bytes:
        """Pixel at padded coordinates ``(row, col)``."""
        pos = self._offset(row, col)
        return bytes(self.data[pos : pos + self.header.bytes_per_pixel])

    def set_pixel(self, row: int, col: int, value: BytesLike) -> None:
        """Overwrite the pixel at padded coordinates ``(row, col)``."""
        bpp = self.header.bytes_per_pixel
        raw = bytes(value)
        if len(raw) < bpp:
            raise ValueError(f"pixel value needs {bpp} bytes, got {len(raw)}")
        pos = self._offset(row, col)
        self.data[pos : pos + bpp] = raw[:bpp]

    def copy(self) -> PngImage:
        """An independent copy of this image."""
        return PngImage(self.header, bytearray(self.data), bytes(self.filter))


def find_chunk_type(type_id: BytesLike | str) -> ChunkType | None:
    """Chunk type for a four-character identifier, or None if unknown."""
    raw = type_id.encode("latin-1") if isinstance(type_id, str) else bytes(type_id)
    raw = raw[:4]
    return next((t for t in ChunkType if t.tag == raw), None)


def has_signature(buf: BytesLike) -> bool:
    """True if ``buf`` starts with the PNG file signature."""
    return bytes(buf[:8]) == SIGNATURE


def is_supported(header: PngHeader) -> bool:
    """True for non-interlaced 8-bit RGB or RGBA images."""
    return (
        header.compression == 0
        and header.filter == 0
        and header.interlace == 0
        and header.color_type in (ColorType.RGB, ColorType.RGBA)
        and header.bit_depth == 8
    )


def parse_header(chunk: Chunk) -> PngHeader:
    """Parse an IHDR chunk."""
    if chunk.type is not ChunkType.IHDR:
        raise PngError(f"cannot parse {chunk.type.name} chunk as IHDR")
    data = chunk.data
    if len(data) < _IHDR_SIZE:
        raise PngError(f"IHDR chunk too short ({len(data)} bytes)")
    try:
        color_type = ColorType(data[9])
    except ValueError:
        raise PngError(f"unknown color type {data[9]}") from None
    return PngHeader(
        width=parse_big_endian(data[0:4]),
        height=parse_big_endian(data[4:8]),
        bit_depth=data[8],
        color_type=color_type,
        compression=data[10],
        filter=data[11],
        interlace=data[12],
    )


def _read_exact(stream: BinaryIO, count: int, what: str) -> bytes:
    data = stream.read(count)
    if len(data) != count:
        raise PngError(f"failed reading PNG chunk {what}")
    return data


def _read_next_chunk(stream: BinaryIO) -> Chunk:
    size = parse_big_endian(_read_exact(stream, 4, "length"))
    if size > MAX_CHUNK_SIZE:
        raise PngError(f"PNG chunk length too large ({size})")
    type_id = _read_exact(stream, 4, "type")
    chunk_type = find_chunk_type(type_id)
    if chunk_type is None:
        raise PngError(f"unknown chunk {type_id!r}")
    data = _read_exact(stream, size, "data")
    crc = parse_big_endian(_read_exact(stream, 4, "crc32"))
    return Chunk(chunk_type, data, crc)


def read_chunks(path: PathLike, count: int | None = None) -> list[Chunk]:
    """Read up to ``count`` chunks, stopping after IEND.

    Raises PngError for a missing signature, unknown chunk or CRC mismatch.
    """
    chunks: list[Chunk] = []
    with open(path, "rb") as f:
        if not has_signature(f.read(len(SIGNATURE))):
            raise PngError(f"{os.fspath(path)} is not a PNG image")
        while (count is None or len(chunks) < count) and (
            not chunks or chunks[-1].type is not ChunkType.IEND
        ):
            chunk = _read_next_chunk(f)
            if chunk.crc32 != chunk.compute_crc32():
                raise PngError(f"mismatching crc32 in {chunk.type.name} chunk")
            chunks.append(chunk)
    return chunks


def read_header(path: PathLike) -> PngHeader:
    """Read only the IHDR chunk of a PNG file."""
    chunks = read_chunks(path, 1)
    if len(chunks) != 1:
        raise PngError(f"failed reading IHDR chunk from {os.fspath(path)}")
    return parse_header(chunks[0])


def data_size(header: PngHeader) -> int:
    """Size of the decompressed scanlines including their filter bytes."""
    return header.height + header.bytes_per_pixel * header.width * header.height


def idat_max_size(header: PngHeader) -> int:
    """Upper bound on the size of a stored-block IDAT stream for ``header``."""
    return 6 + 2 * data_size(header) + 4


def pack_image_data(image: PngImage) -> bytes:
    """Unpadded scanlines, each prefixed by filter type None."""
    header = image.header
    bpp = header.bytes_per_pixel
    stride = (header.width + 2) * bpp
    out = bytearray()
    for row in range(1, header.height + 1):
        begin = row * stride + bpp
        out.append(FilterType.NONE)
        out += image.data[begin : begin + header.width * bpp]
    return bytes(out)


def unpack_and_pad(header: PngHeader, raw: BytesLike) -> PngImage:
    """Split decoded scanlines into filter bytes and padded, still filtered pixels."""
    data = bytes(raw)
    bpp = header.bytes_per_pixel
    width, height = header.width, header.height
    row_size = bpp * width + 1
    if len(data) < row_size * height:
        raise PngError(f"expected {row_size * height} bytes of image data, got {len(data)}")
    stride = (width + 2) * bpp
    padded = bytearray(stride * (height + 2))
    filters = bytearray()
    for row in range(height):
        line = data[row * row_size : (row + 1) * row_size]
        filters.append(line[0])
        begin = (row + 1) * stride + bpp
        padded[begin : begin + width * bpp] = line[1:]
    return PngImage(header, padded, bytes(filters))


def unapply_filter(image: PngImage) -> None:
    """Reverse the scanline filters of a padded image in place."""
    header = image.header
    bpp = header.bytes_per_pixel
    stride = (header.width + 2) * bpp
    d = image.data
    for row in range(1, header.height + 1):
        kind = FilterType.parse(image.filter[row - 1])
        if kind is FilterType.NONE:
            continue
        base = row * stride
        for i in range(base + bpp, base + (header.width + 1) * bpp):
            a = d[i - bpp]
            b = d[i - stride]
            if kind is FilterType.SUB:
                pred = a
            elif kind is FilterType.UP:
                pred = b
            elif kind is FilterType.AVG:
                pred = (a + b) // 2
            else:
                c = d[i - stride - bpp]
                p = a + b - c
                pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
                if pa <= pb and pa <= pc:
                    pred = a
                elif pb <= pc:
                    pred = b
                else:
                    pred = c
            d[i] = (d[i] + pred) & 0xFF


def read_image(path: PathLike) -> PngImage:
    """Read and decode a supported PNG file."""
    chunks = read_chunks(path)
    header = parse_header(chunks[0])
    if not is_supported(header):
        raise PngError(
            f"unsupported PNG features in {os.fspath(path)}: image must be "
            "8-bit/color RGB/A, non-interlaced, compression=0, filter=0; "
            f"header is {dump_header(header)}"
        )
    idat = b"".join(c.data for c in chunks[1:] if c.type is ChunkType.IDAT)
    expected = data_size(header)
    try:
        raw = inflate(idat, max_size=expected)
    except DeflateError as exc:
        raise PngError(f"failed decoding IDAT stream: {exc}") from exc
    if len(raw) != expected:
        raise PngError(f"failed decoding IDAT stream: {len(raw)} != {expected} bytes")
    image = unpack_and_pad(header, raw)
    unapply_filter(image)
    return image


def write_chunk(stream: BinaryIO, chunk_type: BytesLike | str, data: BytesLike) -> None:
    """Write one chunk: length, type, data and CRC-32."""
    tag = chunk_type.encode("ascii") if isinstance(chunk_type, str) else bytes(chunk_type)
    if len(tag) != 4:
        raise ValueError(f"chunk type must be 4 bytes, got {tag!r}")
    payload = bytes(data)
    if len(payload) > MAX_CHUNK_SIZE:
        raise PngError(f"will not write too large {tag!r} chunk of size {len(payload)}")
    body = tag + payload
    stream.write(encode_big_endian(4, len(payload)))
    stream.write(body)
    stream.write(encode_big_endian(4, crc32_bytes(body)))


def write_header_chunk(stream: BinaryIO, header: PngHeader) -> None:
    """Write the PNG signature followed by the IHDR chunk."""
    stream.write(SIGNATURE)
    ihdr = (
        encode_big_endian(4, header.width)
        + encode_big_endian(4, header.height)
        + bytes(
            v & 0xFF
            for v in (
                header.bit_depth,
                header.color_type,
                header.compression,
                header.filter,
                header.interlace,
            )
        )
    )
    write_chunk(stream, "IHDR", ihdr)


def write_image(image: PngImage, path: PathLike) -> None:
    """Write ``image`` as a PNG file with a single stored-block IDAT chunk."""
    idat = deflate_uncompressed(pack_image_data(image))
    with open(path, "wb") as f:
        write_header_chunk(f, image.header)
        write_chunk(f, "IDAT", idat)
        write_chunk(f, "IEND", b"")


def _dumps(obj: object) -> str:
    return json.dumps(obj, separators=(",", ":"))


def dump_header(header: PngHeader) -> str:
    """Header fields as a compact JSON object."""
    return _dumps(
        {
            "width": header.width,
            "height": header.height,
            "bit depth": header.bit_depth,
            "color type": header.color_type.label,
            "compression": header.compression,
            "filter": header.filter,
            "interlace": header.interlace,
        }
    )


def dump_img_data_info(image: PngImage) -> str:
    """Data length and scanline filter frequencies as a compact JSON object."""
    freq = Counter(FilterType.parse(f) for f in image.filter)
    filters = {t.label: freq[t] for t in FilterType if freq[t]}
    return _dumps({"length": len(image.data), "filters": filters})


def dump_chunk_type_freq(chunks: Iterable[Chunk]) -> str:
    """Chunk type frequencies as a compact JSON object."""
    freq = Counter(c.type for c in chunks)
    return _dumps({t.name: freq[t] for t in ChunkType if freq[t]})