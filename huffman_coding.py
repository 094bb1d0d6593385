"""
Huffman coding algorithm -
canonical prefix-free codes for a symbol sequence
"""

import heapq
from collections import defaultdict, deque

from bitarray import frozenbitarray
from bitarray.util import int2ba
from loguru import logger

from huffman_errors import EmptyInput, InvalidTable


class Node:
    """
    Class object for Node in Huffman's Tree
    """

    def __init__(self, value, val_freq: int, order: int = 0):
        """
        Function initializes the structure of a node.

        :param value: symbol held by a leaf, None for merged nodes
        :param val_freq: int, the frequency in our data for this value
        :param order: int, position at which the node joined the working queue
        """
        self.left = None
        self.right = None
        self.value = value
        self.val_freq = val_freq
        self.order = order

    def __lt__(self, val):
        return (self.val_freq, self.order) < (val.val_freq, val.order)

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


class HuffmanTree:
    """
    Class object for Huffman Tree - main structure used
    in Huffman coding algorithm. Object goes from symbol
    frequencies to canonical codewords.
    """

    def __init__(self, data=None, verbose: bool = False):
        """
        Function initializes the structure of Huffman Tree.

        :param data: sequence of symbols (str, bytes or list) to build codes for
        :param verbose: bool, log every stage of the construction
        """
        self.verbose = verbose
        self.root = None
        self.lengths_table = []
        self.canon_codes = {}
        self.res_codes = {}
        self.freq_table = []
        self.nodes = []
        if data:
            self.freq_table = self.frequency_table(data)
            self._make_leaves()

    @classmethod
    def build_from_freq(cls, freq_dict: dict, verbose: bool = False) -> "HuffmanTree":
        """
        Builds the tree from an external frequency dictionary,
        assigns canonical codes and returns the instance.

        :param freq_dict: dict, {symbol: frequency}
        :param verbose: bool, log every stage of the construction
        :return: HuffmanTree with filled res_codes
        """
        for val, val_freq in freq_dict.items():
            if val_freq < 0:
                raise ValueError(f"Negative frequency {val_freq} for symbol {val!r}")

        tree = cls(data=None, verbose=verbose)
        tree.freq_table = sorted((val_freq, val) for val, val_freq in freq_dict.items())
        tree._make_leaves()
        tree.tree()
        tree.code_lengths()
        tree.make_canonical()
        return tree

    def _make_leaves(self):
        self.nodes = [
            Node(val, val_freq, order)
            for order, (val_freq, val) in enumerate(self.freq_table)
        ]

    @staticmethod
    def char_frequency(data) -> dict:
        """
        Function builds dictionary with frequency
        of each symbol for given data.

        :param data: data to count symbol frequency for
        :return: dict, dictionary with symbol frequency
        """
        char_frequency_dict = defaultdict(int)
        for el in data:
            char_frequency_dict[el] += 1

        return dict(char_frequency_dict)

    @classmethod
    def frequency_table(cls, data) -> list:
        """
        Function builds the frequency table: (frequency, symbol)
        pairs sorted by frequency, ties by symbol.

        :param data: data to count symbol frequency for
        :return: list of (frequency, symbol) tuples
        """
        return sorted(
            (val_freq, val) for val, val_freq in cls.char_frequency(data).items()
        )

    def tree(self) -> Node:
        """
        Function builds Huffman Tree with a priority queue.
        Equal weights are taken in the order nodes joined the queue.
        """
        if not self.nodes:
            raise EmptyInput()

        nodes = self.nodes[:]
        heapq.heapify(nodes)
        order = len(nodes)
        while len(nodes) > 1:
            # left smallest node
            l = heapq.heappop(nodes)
            # right smallest node
            r = heapq.heappop(nodes)

            # creating new merged node from the smallest left and right
            new_merged_node = Node(None, l.val_freq + r.val_freq, order)
            new_merged_node.left, new_merged_node.right = l, r
            heapq.heappush(nodes, new_merged_node)
            order += 1

        self.root = nodes[0]
        if self.verbose:
            logger.debug(
                f"Huffman tree built: {len(self.nodes)} symbols, total weight {self.root.val_freq}"
            )
        return self.root

    def tree_linear(self) -> Node:
        """
        Reference builder: same merges as tree(), done with a plain
        list and a linear scan for the minimum.
        """
        if not self.nodes:
            raise EmptyInput()

        nodes = self.nodes[:]
        order = len(nodes)
        while len(nodes) > 1:
            l = self.extract_minimum(nodes)
            r = self.extract_minimum(nodes)
            new_merged_node = Node(None, l.val_freq + r.val_freq, order)
            new_merged_node.left, new_merged_node.right = l, r
            nodes.append(new_merged_node)
            order += 1

        self.root = nodes[0]
        if self.verbose:
            logger.debug(
                f"Huffman tree built by linear scan: {len(self.nodes)} symbols, "
                f"total weight {self.root.val_freq}"
            )
        return self.root

    @staticmethod
    def extract_minimum(nodes: list) -> Node:
        """
        Removes and returns the first node with the smallest frequency.

        :param nodes: list of nodes, changed in place
        :return: Node
        """
        min_idx = 0
        for i in range(1, len(nodes)):
            if nodes[i].val_freq < nodes[min_idx].val_freq:
                min_idx = i
        return nodes.pop(min_idx)

    def code_lengths(self) -> list:
        """
        Function walks the tree level by level and records
        the depth of every leaf as the code length of its symbol.

        :return: list of (length, symbol) tuples sorted by length, then symbol
        """
        if self.root is None:
            raise EmptyInput("Huffman tree is not built")

        lengths = []
        if self.root.is_leaf():
            # a lone symbol still needs one bit
            lengths.append((1, self.root.value))
        else:
            queue = deque([self.root])
            depth = 0
            while queue:
                for _ in range(len(queue)):
                    node = queue.popleft()
                    if node.is_leaf():
                        lengths.append((depth, node.value))
                    else:
                        queue.append(node.left)
                        queue.append(node.right)
                depth += 1

        lengths.sort()
        self.lengths_table = lengths
        if self.verbose:
            logger.debug(
                f"Code lengths range from {lengths[0][0]} to {lengths[-1][0]} bits"
            )
        return lengths

    def make_canonical(self) -> dict:
        """
        Turns the code length table into canonical codes:
        consecutive values within one length, shifted left
        when the length grows. Fills self.canon_codes with
        (code, length) pairs and self.res_codes with codewords.

        :return: dict, {symbol: frozenbitarray}
        """
        lengths = self.lengths_table or self.code_lengths()

        canon_codes = {}
        code = 0
        prev_len = lengths[0][0]

        for length, sym in lengths:
            # shift left if the length grew
            code <<= length - prev_len
            if code >> length:
                raise InvalidTable(
                    f"Code lengths overflow at symbol {sym!r} with length {length}"
                )
            canon_codes[sym] = (code, length)
            code += 1
            prev_len = length

        self.canon_codes = canon_codes
        self.res_codes = {
            sym: frozenbitarray(int2ba(code, length, endian="big"))
            for sym, (code, length) in canon_codes.items()
        }
        if self.verbose:
            logger.debug(f"Assigned {len(self.res_codes)} canonical codewords")
        return self.res_codes


def build_encoding_table(text, verbose: bool = False) -> dict:
    """
    Derives the canonical Huffman code for every symbol of text.

    :param text: non-empty sequence of symbols
    :param verbose: bool, log every stage of the construction
    :return: dict, {symbol: frozenbitarray}
    """
    huffman_tree = HuffmanTree(text, verbose=verbose)
    huffman_tree.tree()
    huffman_tree.code_lengths()
    return huffman_tree.make_canonical()
