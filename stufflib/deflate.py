"""Zlib-wrapped DEFLATE decoding and stored-block encoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cache
from typing import Union

from stufflib.hashing import adler32
from stufflib.huffman import HuffmanTree
from stufflib.misc import encode_big_endian, encode_little_endian, parse_little_endian

BLOCK_SIZE = 8192

BytesLike = Union[bytes, bytearray, memoryview]

_END_OF_BLOCK = 256
_MAX_LENGTH_SYMBOL = 286
_LENGTH_ORDER = (16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15)

Codes = tuple[tuple[int, ...], tuple[int, ...]]


class DeflateError(ValueError):
    """Raised for malformed or unsupported DEFLATE streams."""


def make_length_codes() -> Codes:
    """Base lengths and extra-bit counts for length symbols 257..285."""
    lengths = [3]
    extra = [0] * 29
    for i in range(1, 29):
        extra_bits = (max(1, (i - 1) // 4) - 1) % 6
        extra[i - 1] = extra_bits
        lengths.append(lengths[-1] + (1 << extra_bits))
    lengths[28] = 258
    return tuple(lengths), tuple(extra)


def make_distance_codes() -> Codes:
    """Base distances and extra-bit counts for distance symbols 0..29."""
    extra = [max(1, i // 2) - 1 for i in range(30)]
    distances = [1]
    for i in range(1, 30):
        distances.append(distances[-1] + (1 << extra[i - 1]))
    return tuple(distances), tuple(extra)


@cache
def fixed_literal_tree() -> HuffmanTree:
    """The fixed literal/length code of block type 1."""
    lengths = [8] * 144 + [9] * 112 + [7] * 24 + [8] * 8
    return HuffmanTree(lengths)


@cache
def fixed_distance_tree() -> HuffmanTree:
    """The fixed distance code of block type 1."""
    return HuffmanTree([5] * 32)


@dataclass
class _State:
    data: bytes
    max_size: int | None
    bit: int = 0
    out: bytearray = field(default_factory=bytearray)
    len_codes: Codes = field(default_factory=make_length_codes)
    dist_codes: Codes = field(default_factory=make_distance_codes)

    def next_bit(self) -> int:
        pos = self.bit >> 3
        if pos >= len(self.data):
            raise DeflateError("unexpected end of DEFLATE stream")
        value = (self.data[pos] >> (self.bit & 7)) & 1
        self.bit += 1
        return value

    def next_bits(self, count: int) -> int:
        value = 0
        for bit in range(count):
            value |= self.next_bit() << bit
        return value

    def reserve(self, count: int) -> None:
        if self.max_size is not None and len(self.out) + count > self.max_size:
            raise DeflateError(f"decoded data exceeds {self.max_size} bytes")

    def decode_symbol(self, tree: HuffmanTree) -> int:
        code = 0
        for code_len in range(1, tree.max_code_len + 1):
            code = (code << 1) | self.next_bit()
            if tree.contains(code, code_len):
                return tree.get(code, code_len)
        raise DeflateError("invalid Huffman code in DEFLATE stream")


def _inflate_block(
    literal_tree: HuffmanTree, distance_tree: HuffmanTree, state: _State
) -> None:
    lengths, length_extra = state.len_codes
    distances, distance_extra = state.dist_codes
    while True:
        symbol = state.decode_symbol(literal_tree)
        if symbol < _END_OF_BLOCK:
            state.reserve(1)
            state.out.append(symbol)
            continue
        if symbol == _END_OF_BLOCK:
            return
        if symbol >= _MAX_LENGTH_SYMBOL:
            raise DeflateError(f"invalid length symbol {symbol}")
        len_symbol = symbol - 257
        length = lengths[len_symbol] + state.next_bits(length_extra[len_symbol])

        dist_symbol = state.decode_symbol(distance_tree)
        if dist_symbol >= len(distances):
            raise DeflateError(f"invalid distance symbol {dist_symbol}")
        distance = distances[dist_symbol] + state.next_bits(distance_extra[dist_symbol])

        begin = len(state.out) - distance
        if begin < 0:
            raise DeflateError(f"back reference distance {distance} is too far")
        state.reserve(length)
        for i in range(begin, begin + length):
            state.out.append(state.out[i])


def _inflate_stored_block(state: _State) -> None:
    pos = (state.bit + 7) // 8
    data = state.data
    if pos + 4 > len(data):
        raise DeflateError("unexpected end of stored block header")
    block_len = parse_little_endian(data[pos : pos + 2])
    block_len_check = parse_little_endian(data[pos + 2 : pos + 4])
    pos += 4
    if (~block_len & 0xFFFF) != block_len_check:
        raise DeflateError("corrupted zlib block, ~LEN != NLEN")
    if block_len > len(data) - pos:
        raise DeflateError("corrupted zlib block, LEN too large")
    state.reserve(block_len)
    state.out += data[pos : pos + block_len]
    state.bit = (pos + block_len) * 8


def _inflate_dynamic_block(state: _State) -> None:
    num_lengths = 257 + state.next_bits(5)
    num_distances = 1 + state.next_bits(5)
    num_length_lengths = 4 + state.next_bits(4)

    length_lengths = [0] * (max(_LENGTH_ORDER) + 1)
    for symbol in _LENGTH_ORDER[:num_length_lengths]:
        length_lengths[symbol] = state.next_bits(3)
    length_tree = HuffmanTree(length_lengths)

    total = num_lengths + num_distances
    code_lengths: list[int] = []
    while len(code_lengths) < total:
        symbol = state.decode_symbol(length_tree)
        if symbol < 16:
            code_len, repeats = symbol, 1
        elif symbol == 16:
            if not code_lengths:
                raise DeflateError("repeat code without a previous length")
            code_len, repeats = code_lengths[-1], 3 + state.next_bits(2)
        elif symbol == 17:
            code_len, repeats = 0, 3 + state.next_bits(3)
        elif symbol == 18:
            code_len, repeats = 0, 11 + state.next_bits(7)
        else:
            raise DeflateError(f"unexpected symbol {symbol} in dynamic block")
        if len(code_lengths) + repeats > total:
            raise DeflateError("code length repeat overflows the code table")
        code_lengths.extend([code_len] * repeats)

    literal_tree = HuffmanTree(code_lengths[:num_lengths])
    distance_tree = HuffmanTree(code_lengths[num_lengths:])
    _inflate_block(literal_tree, distance_tree, state)


def inflate(src: BytesLike, max_size: int | None = None) -> bytes:
    """Decode a zlib stream; the Adler-32 trailer is not verified.

    Raises DeflateError for malformed input or if the output would exceed
    ``max_size`` bytes.
    """
    data = bytes(src)
    if len(data) < 3:
        raise DeflateError("DEFLATE stream is too short")
    if (data[0] * 256 + data[1]) % 31:
        raise DeflateError("DEFLATE stream is corrupted")
    cmethod = data[0] & 0x0F
    if cmethod != 8:
        raise DeflateError(f"unexpected compression method {cmethod} != 8")
    cinfo = (data[0] & 0xF0) >> 4
    if cinfo > 7:
        raise DeflateError(f"too large compression info {cinfo} > 7")
    if data[1] & 0x20:
        raise DeflateError("dictionaries are not supported")

    state = _State(data=data, max_size=max_size, bit=16)
    is_final_block = False
    while not is_final_block:
        is_final_block = bool(state.next_bit())
        block_type = state.next_bits(2)
        if block_type == 0:
            _inflate_stored_block(state)
        elif block_type == 1:
            _inflate_block(fixed_literal_tree(), fixed_distance_tree(), state)
        elif block_type == 2:
            _inflate_dynamic_block(state)
        else:
            raise DeflateError(f"invalid block type {block_type}")
    return bytes(state.out)


def deflate_uncompressed(data: BytesLike) -> bytes:
    """Encode ``data`` as a zlib stream of stored blocks of at most BLOCK_SIZE bytes."""
    src = bytes(data)
    cmf = (7 << 4) | 8
    out = bytearray([cmf, 31 - (cmf * 256) % 31])
    pos = 0
    while True:
        block = src[pos : pos + BLOCK_SIZE]
        is_final_block = pos + BLOCK_SIZE >= len(src)
        out.append(1 if is_final_block else 0)
        out += encode_little_endian(2, len(block))
        out += encode_little_endian(2, ~len(block))
        out += block
        pos += len(block)
        if is_final_block:
            break
    out += encode_big_endian(4, adler32(src))
    return bytes(out)