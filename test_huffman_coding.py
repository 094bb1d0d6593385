import random
from fractions import Fraction
from itertools import product

import pytest
from loguru import logger

from huffman_coding import HuffmanTree, Node, build_encoding_table
from huffman_errors import EmptyInput, HuffmanError, InvalidTable


def _shape(node: Node):
    if node.is_leaf():
        return (node.value, node.val_freq)
    return (node.val_freq, _shape(node.left), _shape(node.right))


def _codes01(table: dict) -> dict:
    return {sym: codeword.to01() for sym, codeword in table.items()}


def _optimal_cost(freqs: list) -> int:
    """Brute force: cheapest length vector satisfying the Kraft inequality."""
    n = len(freqs)
    if n == 1:
        return freqs[0]
    best = None
    for lengths in product(range(1, n), repeat=n):
        if sum(Fraction(1, 2 ** l) for l in lengths) > 1:
            continue
        cost = sum(f * l for f, l in zip(freqs, lengths))
        if best is None or cost < best:
            best = cost
    return best


def test_char_frequency_counts_every_symbol():
    assert HuffmanTree.char_frequency("abracadabra") == {
        "a": 5, "b": 2, "r": 2, "c": 1, "d": 1
    }


def test_char_frequency_ignores_order():
    assert HuffmanTree.char_frequency("aabbbcc") == HuffmanTree.char_frequency("cbabcba")


def test_frequency_table_sorted_by_weight_then_symbol():
    assert HuffmanTree.frequency_table("aabbbcc") == [(2, "a"), (2, "c"), (3, "b")]


def test_frequency_table_empty():
    assert HuffmanTree.frequency_table("") == []


def test_concrete_table_for_aabbbcc():
    table = build_encoding_table("aabbbcc")
    assert _codes01(table) == {"b": "0", "a": "10", "c": "11"}
    total = sum(len(table[s]) for s in "aabbbcc")
    assert total == 11


def test_single_symbol_gets_one_bit():
    table = build_encoding_table("aaaa")
    assert _codes01(table) == {"a": "0"}


def test_single_symbol_tree_is_a_leaf():
    huffman_tree = HuffmanTree("zzz")
    root = huffman_tree.tree()
    assert root.is_leaf()
    assert huffman_tree.code_lengths() == [(1, "z")]


@pytest.mark.parametrize("text", ["", b"", []])
def test_empty_input_fails(text):
    with pytest.raises(EmptyInput):
        build_encoding_table(text)


def test_empty_input_is_a_value_error():
    with pytest.raises(ValueError):
        build_encoding_table("")
    assert issubclass(EmptyInput, HuffmanError)


def test_code_lengths_before_tree_fails():
    with pytest.raises(EmptyInput):
        HuffmanTree("abc").code_lengths()


def test_code_lengths_breadth_first():
    huffman_tree = HuffmanTree("aabbbcc")
    huffman_tree.tree()
    assert huffman_tree.code_lengths() == [(1, "b"), (2, "a"), (2, "c")]


def test_merge_order_left_is_first_minimum():
    huffman_tree = HuffmanTree("aabbbcc")
    root = huffman_tree.tree()
    assert root.val_freq == 7
    assert root.left.value == "b"
    assert root.right.left.value == "a"
    assert root.right.right.value == "c"


def test_leaf_wins_tie_against_merged_node():
    # a+b merge into weight 2, which ties with leaf c
    huffman_tree = HuffmanTree("abcc")
    root = huffman_tree.tree()
    assert root.left.value == "c"
    assert root.right.val_freq == 2


def test_build_from_freq_classic_distribution():
    freqs = {"a": 5, "b": 9, "c": 12, "d": 13, "e": 16, "f": 45}
    huffman_tree = HuffmanTree.build_from_freq(freqs)
    assert huffman_tree.lengths_table == [
        (1, "f"), (3, "c"), (3, "d"), (3, "e"), (4, "a"), (4, "b")
    ]
    assert _codes01(huffman_tree.res_codes) == {
        "f": "0", "c": "100", "d": "101", "e": "110", "a": "1110", "b": "1111"
    }
    assert huffman_tree.canon_codes["e"] == (0b110, 3)


def test_build_from_freq_rejects_negative_weight():
    with pytest.raises(ValueError):
        HuffmanTree.build_from_freq({"a": 3, "b": -1})


def test_build_from_freq_empty():
    with pytest.raises(EmptyInput):
        HuffmanTree.build_from_freq({})


def test_canonical_codes_are_consecutive_within_a_length():
    table = build_encoding_table("abracadabra alakazam")
    by_length = {}
    for codeword in table.values():
        by_length.setdefault(len(codeword), []).append(int(codeword.to01(), 2))
    for values in by_length.values():
        values.sort()
        assert values == list(range(values[0], values[0] + len(values)))


def test_canonical_overflow_is_reported():
    huffman_tree = HuffmanTree()
    huffman_tree.lengths_table = [(1, "a"), (1, "b"), (1, "c")]
    with pytest.raises(InvalidTable):
        huffman_tree.make_canonical()


@pytest.mark.parametrize(
    "text",
    [
        "abracadabra",
        "mississippi river",
        "aaaaabbbbcccdde",
        "abcdefgh",
        "a" * 7 + "b" * 7 + "c" * 7 + "d" * 7,
    ],
)
def test_prefix_free(text):
    codes = list(_codes01(build_encoding_table(text)).values())
    for i, first in enumerate(codes):
        for second in codes[i + 1:]:
            assert not first.startswith(second)
            assert not second.startswith(first)


def test_build_is_deterministic():
    text = "the quick brown fox jumps over the lazy dog"
    assert _codes01(build_encoding_table(text)) == _codes01(build_encoding_table(text))


@pytest.mark.parametrize(
    "freqs",
    [
        [1],
        [1, 1],
        [3, 1, 1],
        [1, 2, 3, 4],
        [5, 5, 5, 5, 5],
        [1, 1, 2, 3, 5],
        [10, 1, 1, 1, 1],
    ],
)
def test_code_is_minimal(freqs):
    symbols = "abcde"[: len(freqs)]
    text = "".join(s * f for s, f in zip(symbols, freqs))
    table = build_encoding_table(text)
    cost = sum(len(table[s]) * f for s, f in zip(symbols, freqs))
    assert cost == _optimal_cost(freqs)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_heap_builder_matches_linear_builder(seed):
    rng = random.Random(seed)
    text = "".join(rng.choice("abcdefghij") for _ in range(rng.randint(1, 300)))

    heap_tree = HuffmanTree(text)
    linear_tree = HuffmanTree(text)
    assert _shape(heap_tree.tree()) == _shape(linear_tree.tree_linear())


def test_extract_minimum_takes_first_of_equal_weights():
    nodes = [Node("x", 3, 0), Node("y", 1, 1), Node("z", 1, 2)]
    assert HuffmanTree.extract_minimum(nodes).value == "y"
    assert [n.value for n in nodes] == ["x", "z"]


def test_byte_symbols():
    table = build_encoding_table(b"aabbbcc")
    assert _codes01(table) == {ord("b"): "0", ord("a"): "10", ord("c"): "11"}


def test_verbose_logs_construction():
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        build_encoding_table("aabbbcc", verbose=True)
    finally:
        logger.remove(handler_id)
    assert any("Assigned 3 canonical codewords" in m for m in messages)
    assert any("3 symbols" in m for m in messages)


def test_verbose_logs_linear_build():
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        HuffmanTree("aabbbcc", verbose=True).tree_linear()
    finally:
        logger.remove(handler_id)
    assert any("linear scan: 3 symbols, total weight 7" in m for m in messages)
