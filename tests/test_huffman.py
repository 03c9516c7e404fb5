import pytest

from stufflib.huffman import HuffmanTree

RFC_EXAMPLE_LENGTHS = [3, 3, 3, 3, 3, 2, 4, 4]


def _codes(tree):
    return {
        tree.get(code, code_len): (code, code_len)
        for code_len in range(1, tree.max_code_len + 1)
        for code in range(1 << code_len)
        if tree.contains(code, code_len)
    }


def _as_bits(code, code_len):
    return format(code, f"0{code_len}b")


def test_rfc_example_shortest_code():
    tree = HuffmanTree(RFC_EXAMPLE_LENGTHS)
    assert tree.get(0b00, 2) == 5


def test_every_symbol_has_its_length():
    tree = HuffmanTree(RFC_EXAMPLE_LENGTHS)
    codes = _codes(tree)
    assert sorted(codes) == list(range(len(RFC_EXAMPLE_LENGTHS)))
    assert all(codes[s][1] == RFC_EXAMPLE_LENGTHS[s] for s in codes)
    assert tree.max_code_len == max(RFC_EXAMPLE_LENGTHS)


def test_codes_are_prefix_free():
    tree = HuffmanTree([2, 1, 3, 3, 0, 4, 4])
    bits = [_as_bits(*c) for c in _codes(tree).values()]
    for a in bits:
        for b in bits:
            if a != b:
                assert not b.startswith(a)


def test_codes_are_canonical():
    lengths = [3, 3, 3, 3, 3, 2, 4, 4]
    codes = _codes(HuffmanTree(lengths))
    ordered = sorted(codes, key=lambda s: (lengths[s], s))
    as_bits = [_as_bits(*codes[s]) for s in ordered]
    assert as_bits == sorted(as_bits)


def test_complete_code_satisfies_kraft_equality():
    lengths = [2, 2, 3, 3, 3, 3]
    codes = _codes(HuffmanTree(lengths))
    assert sum(2.0 ** -length for _, length in codes.values()) == 1.0


def test_unused_symbols_are_absent():
    lengths = [0, 2, 0, 2, 2, 2]
    codes = _codes(HuffmanTree(lengths))
    assert sorted(codes) == [s for s, length in enumerate(lengths) if length]


def test_all_zero_lengths_give_empty_tree():
    tree = HuffmanTree([0, 0, 0])
    assert tree.max_code_len == 0
    assert not tree.contains(0, 1)


def test_zero_code_length_is_never_contained():
    tree = HuffmanTree(RFC_EXAMPLE_LENGTHS)
    assert not tree.contains(0, 0)


def test_get_missing_code_raises():
    tree = HuffmanTree([1, 1])
    with pytest.raises(KeyError):
        tree.get(0b11, 2)


def test_negative_length_raises():
    with pytest.raises(ValueError):
        HuffmanTree([1, -1])