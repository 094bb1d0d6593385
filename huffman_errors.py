"""
Errors raised by the canonical Huffman coder
"""


class HuffmanError(ValueError):
    """
    Base class for every failure of the Huffman coder.
    """


class EmptyInput(HuffmanError):
    """
    No symbols were given, so no code table can be derived.
    """

    def __init__(self, message="Cannot build Huffman codes from empty input"):
        super().__init__(message)


class UnknownSymbol(HuffmanError, KeyError):
    """
    Encoder met a symbol that has no codeword in the table.
    """

    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"Symbol {symbol!r} not found in encoding table")

    def __str__(self):
        # KeyError would wrap the message in quotes
        return self.args[0]


class TruncatedStream(HuffmanError, EOFError):
    """
    Bit input ended in the middle of a codeword.
    """

    def __init__(self, pending: str):
        self.pending = pending
        super().__init__(
            f"Bit stream ended with unmatched bits '{pending}'"
        )


class CorruptStream(HuffmanError):
    """
    Bit input cannot be decoded with the given table.
    """


class InvalidTable(HuffmanError):
    """
    Encoding table is empty, has duplicate codewords or is not prefix-free.
    """
