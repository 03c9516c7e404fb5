import io
import struct
import zlib

import pytest

from stufflib.deflate import deflate_uncompressed
from stufflib.png import (
    SIGNATURE,
    Chunk,
    ChunkType,
    ColorType,
    PngError,
    PngHeader,
    PngImage,
    data_size,
    dump_chunk_type_freq,
    dump_header,
    dump_img_data_info,
    find_chunk_type,
    has_signature,
    idat_max_size,
    is_supported,
    pack_image_data,
    parse_header,
    read_chunks,
    read_header,
    read_image,
    unapply_filter,
    unpack_and_pad,
    write_chunk,
    write_image,
)


def _chunk(tag, data):
    return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", zlib.crc32(tag + data))


def _png_bytes(width, height, raw, color=2, interlace=0, extra=b""):
    ihdr = struct.pack(">IIBBBBB", width, height, 8, color, 0, 0, interlace)
    return (
        SIGNATURE
        + _chunk(b"IHDR", ihdr)
        + extra
        + _chunk(b"IDAT", zlib.compress(raw))
        + _chunk(b"IEND", b"")
    )


def _sample_image():
    image = PngImage.rgb(3, 2)
    for row in range(1, 3):
        for col in range(1, 4):
            image.set_pixel(row, col, bytes([row * 40, col * 50, row + col]))
    return image


def test_signature():
    assert has_signature(b"\x89PNG\r\n\x1a\n")
    assert not has_signature(b"\x89PNG\r\n\x1a\x00")


def test_find_chunk_type():
    assert find_chunk_type("IHDR") is ChunkType.IHDR
    assert find_chunk_type(b"tEXt") is ChunkType.tEXt
    assert find_chunk_type("abcd") is None


def test_is_supported():
    assert is_supported(PngHeader(1, 1, color_type=ColorType.RGBA))
    assert not is_supported(PngHeader(1, 1, color_type=ColorType.GRAYSCALE))
    assert not is_supported(PngHeader(1, 1, bit_depth=16))
    assert not is_supported(PngHeader(1, 1, interlace=1))


def test_write_read_round_trip(tmp_path):
    image = _sample_image()
    path = tmp_path / "img.png"
    write_image(image, path)
    loaded = read_image(path)
    assert loaded.header == image.header
    assert loaded.data == image.data
    assert loaded.get_pixel(2, 3) == image.get_pixel(2, 3)


def test_written_chunks(tmp_path):
    path = tmp_path / "img.png"
    write_image(_sample_image(), path)
    assert path.read_bytes()[:8] == SIGNATURE
    chunks = read_chunks(path)
    assert [c.type for c in chunks] == [ChunkType.IHDR, ChunkType.IDAT, ChunkType.IEND]
    assert dump_chunk_type_freq(chunks) == '{"IHDR":1,"IDAT":1,"IEND":1}'
    assert len(read_chunks(path, 1)) == 1


def test_read_header(tmp_path):
    path = tmp_path / "img.png"
    write_image(_sample_image(), path)
    header = read_header(path)
    assert (header.width, header.height, header.color_type) == (3, 2, ColorType.RGB)


def test_crc_mismatch(tmp_path):
    path = tmp_path / "img.png"
    write_image(_sample_image(), path)
    data = bytearray(path.read_bytes())
    data[-1] ^= 0xFF
    path.write_bytes(bytes(data))
    with pytest.raises(PngError):
        read_chunks(path)


def test_not_png(tmp_path):
    path = tmp_path / "x.png"
    path.write_bytes(b"not an image at all")
    with pytest.raises(PngError):
        read_image(path)


def test_unknown_chunk(tmp_path):
    path = tmp_path / "x.png"
    raw = bytes([0, 1, 2, 3])
    path.write_bytes(_png_bytes(1, 1, raw, extra=_chunk(b"abCD", b"xy")))
    with pytest.raises(PngError):
        read_chunks(path)


def test_unsupported_image(tmp_path):
    path = tmp_path / "x.png"
    path.write_bytes(_png_bytes(1, 1, bytes([0, 1, 2, 3]), interlace=1))
    with pytest.raises(PngError):
        read_image(path)


def test_parse_header_rejects_other_chunk():
    with pytest.raises(PngError):
        parse_header(Chunk(ChunkType.IEND, b"", 0))


def test_sub_and_up_filters(tmp_path):
    raw = bytes([1, 7, 8, 9, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0])
    path = tmp_path / "f.png"
    path.write_bytes(_png_bytes(2, 2, raw))
    image = read_image(path)
    for row, col in [(1, 1), (1, 2), (2, 1), (2, 2)]:
        assert image.get_pixel(row, col) == bytes([7, 8, 9])
    assert dump_img_data_info(image) == (
        '{"length":%d,"filters":{"Sub":1,"Up":1}}' % len(image.data)
    )


def test_paeth_filter(tmp_path):
    raw = bytes([0, 1, 2, 3, 4, 5, 6, 4, 0, 0, 0, 0, 0, 0])
    path = tmp_path / "p.png"
    path.write_bytes(_png_bytes(2, 2, raw))
    image = read_image(path)
    assert image.get_pixel(2, 1) == bytes([1, 2, 3])
    assert image.get_pixel(2, 2) == bytes([4, 5, 6])


def test_avg_filter_on_first_pixel(tmp_path):
    header = PngHeader(1, 1)
    image = unpack_and_pad(header, bytes([3, 10, 20, 30]))
    unapply_filter(image)
    assert image.get_pixel(1, 1) == bytes([10, 20, 30])


def test_pack_unpack_round_trip():
    image = _sample_image()
    packed = pack_image_data(image)
    assert len(packed) == data_size(image.header)
    restored = unpack_and_pad(image.header, packed)
    assert restored.data == image.data
    assert restored.filter == bytes(image.header.height)


def test_idat_max_size_bound():
    image = _sample_image()
    stream = deflate_uncompressed(pack_image_data(image))
    assert len(stream) <= idat_max_size(image.header)


def test_write_iend_chunk():
    buf = io.BytesIO()
    write_chunk(buf, "IEND", b"")
    assert buf.getvalue() == b"\x00\x00\x00\x00IEND\xaeB`\x82"


def test_chunk_crc():
    chunk = Chunk(ChunkType.IDAT, b"abc", 0)
    assert chunk.compute_crc32() == zlib.crc32(b"IDATabc")


def test_pixels_and_copy():
    image = PngImage.rgb(2, 2)
    image.set_pixel(1, 2, b"\x01\x02\x03")
    copy = image.copy()
    image.set_pixel(1, 2, b"\x09\x09\x09")
    assert copy.get_pixel(1, 2) == b"\x01\x02\x03"
    assert image.get_pixel(1, 2) == b"\x09\x09\x09"
    with pytest.raises(IndexError):
        image.get_pixel(4, 0)


def test_dump_header():
    header = PngHeader(3, 2)
    assert dump_header(header) == (
        '{"width":3,"height":2,"bit depth":8,"color type":"rgb",'
        '"compression":0,"filter":0,"interlace":0}'
    )


def test_dump_img_data_info_unfiltered():
    image = PngImage.rgb(2, 2)
    assert dump_img_data_info(image) == (
        '{"length":%d,"filters":{"None":2}}' % len(image.data)
    )