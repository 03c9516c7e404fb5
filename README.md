# stufflib

A collection of small, self-contained utilities written in plain Python with
no runtime dependencies. They are easy to read and meant to be used as
building blocks.

## Modules

- `stufflib.misc`: little- and big-endian integer encoding and parsing,
  `midpoint`, `is_zero`, `count_nonzero` and `tmpdir` (which reads
  `SL_TMP_DIR`, falling back to `/tmp`)
- `stufflib.numeric`: primes (`is_prime`, `next_prime`, `factorize`),
  `next_power_of_two`, `clamp`, `almost_equal`, a forward-difference `diff`
  and small list-based vector helpers (`vadd`, `vsub`, `dot`, `norm2`,
  `matmul`, ...)
- `stufflib.hashing`: CRC-32 (`crc32`, `crc32_bytes`, `crc32_str`) and
  `adler32`
- `stufflib.unionfind`: `UnionFind`, a disjoint-set structure
- `stufflib.randomness`: Fisher–Yates `shuffle` and `shuffle_together`,
  `rand_int`, `fill_double` and `set_zero`; each takes an optional `rng`
  such as a `random.Random`
- `stufflib.args`: `Args`, a minimal inspector of an argument vector
  (positional arguments, flags, `--name=value` integers)
- `stufflib.spans`: byte helpers: `parse_hex`, `slice_span`, `find`,
  `compare`
- `stufflib.sorting`: `insertsort`, `mergesort` and `quicksort` driven by a
  three-way comparator, plus ready-made variants for numbers and strings
- `stufflib.utf8`: UTF-8 validation, code point widths and iteration
- `stufflib.text`: `Utf8String`, an immutable string of validated UTF-8
  bytes sliced by code point
- `stufflib.files`: `read_file`, `read_file_utf8`, `read_int64` and
  `parse_int64`
- `stufflib.hashmap`: `HashMap`, an open-addressing hash map keyed by bytes
  (or strings, stored as UTF-8) with quadratic probing
- `stufflib.huffman`: `HuffmanTree`, a canonical Huffman code built from code
  lengths
- `stufflib.deflate`: `inflate`, a zlib/DEFLATE decoder for stored, fixed and
  dynamic blocks, and `deflate_uncompressed`, a stored-block encoder
- `stufflib.png`: reading and writing PNG images via `PngImage`,
  `read_image`, `write_image`, `read_chunks` and JSON summaries
  (`dump_header`, `dump_img_data_info`, `dump_chunk_type_freq`)
- `stufflib.img`: `segment_rgb`, region-merging colour segmentation
- `stufflib.record`, `stufflib.record_reader` and `stufflib.record_writer`:
  `Record` metadata files plus dense and sparse binary data files, with
  `RecordReader`/`read_all` and `RecordWriter`/`write_all`

## Installation

```
pip install .
```

## Examples

Checksums:

```python
from stufflib.hashing import adler32, crc32_bytes

crc32_bytes(b"hello")
adler32(b"hello")
```

Union-find:

```python
from stufflib.unionfind import UnionFind

uf = UnionFind(10)
uf.union(0, 1)
uf.find_root(1)  # 0
```

Sorting with a comparator:

```python
from stufflib.sorting import compare_str, mergesort

mergesort(["there", "hello", ""], compare_str)
```

Round-tripping data through DEFLATE stored blocks:

```python
from stufflib.deflate import deflate_uncompressed, inflate

packed = deflate_uncompressed(b"some bytes")
inflate(packed, 10)  # b"some bytes"; raises DeflateError past 10 bytes
```

Writing and reading a PNG image (pixel coordinates include a one-pixel
border, so the first real pixel is at row 1, column 1):

```python
from stufflib.png import PngImage, read_image, write_image

image = PngImage.rgb(4, 3)
image.set_pixel(1, 1, b"\xff\x00\x00")
write_image(image, "red_dot.png")
again = read_image("red_dot.png")
```

Writing and reading a sparse record:

```python
import array
from stufflib.record import Record
from stufflib.record_reader import read_all
from stufflib.record_writer import write_all

values = array.array("f", [0.0, 1.5, 0.0, 2.5])
record = Record(name="values", path=".", type="float32", layout="sparse",
                size=2, dims=(4,))
record.write_metadata()
write_all(record, values)
read_all(record, len(values) * 4)
```

## Limitations

- There is no command-line program; everything is a library call.
- `read_image` accepts only 8-bit, non-interlaced RGB or RGBA images;
  `write_image` stores pixel data uncompressed, without filters.
- `inflate` does not verify the Adler-32 trailer.
- There are no matrix, linear-algebra or machine-learning helpers beyond the
  small list-based vector functions in `stufflib.numeric`.

## Running the tests

```
pip install ".[test]"
pytest
```