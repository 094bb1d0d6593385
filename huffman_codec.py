"""
Encoding and decoding of symbol sequences
with a canonical Huffman code table
"""

from bitarray import bitarray, frozenbitarray
from bitarray.util import ba2int, int2ba
from loguru import logger

from bit_reader import BitReader
from bit_writer import BitWriter
from huffman_errors import CorruptStream, InvalidTable, TruncatedStream, UnknownSymbol


def _as_codeword(symbol, codeword) -> frozenbitarray:
    """
    Normalizes a codeword given as bitarray, '0'/'1' string
    or a list/tuple of 0/1.
    """
    if isinstance(codeword, bitarray):
        codeword = codeword.to01()
    elif isinstance(codeword, (list, tuple)):
        if not all(bit in (0, 1) and not isinstance(bit, float) for bit in codeword):
            raise InvalidTable(f"Codeword for symbol {symbol!r} is not a bit string")
        codeword = "".join(str(int(bit)) for bit in codeword)
    if not isinstance(codeword, str):
        raise InvalidTable(f"Codeword for symbol {symbol!r} is not a bit string")
    try:
        codeword = frozenbitarray(codeword, endian="big")
    except ValueError as e:
        raise InvalidTable(f"Codeword for symbol {symbol!r} is not a bit string") from e
    if not codeword:
        raise InvalidTable(f"Empty codeword for symbol {symbol!r}")
    return codeword


def decoding_table(table: dict) -> dict:
    """
    Inverts an encoding table.
    Keys are (code_length, code_value) pairs.

    :param table: dict, {symbol: codeword}
    :return: dict, {(length, code): symbol}
    """
    decode_map = {}
    for symbol, codeword in table.items():
        codeword = _as_codeword(symbol, codeword)
        key = (len(codeword), ba2int(codeword))
        if key in decode_map:
            raise InvalidTable(
                f"Duplicate codeword '{codeword.to01()}' for symbols "
                f"{decode_map[key]!r} and {symbol!r}"
            )
        decode_map[key] = symbol
    return decode_map


def validate_table(table: dict) -> dict:
    """
    Checks that no codeword is a prefix of another one
    and returns the decoding table.

    :param table: dict, {symbol: codeword}
    :return: dict, {(length, code): symbol}
    """
    decode_map = decoding_table(table)

    # in sorted order a prefix lands right before one of its extensions
    codewords = sorted(
        int2ba(code, length, endian="big").to01() for length, code in decode_map
    )
    for shorter, longer in zip(codewords, codewords[1:]):
        if longer.startswith(shorter):
            raise InvalidTable(f"Codeword '{shorter}' is a prefix of '{longer}'")
    return decode_map


def encoded_length(text, table: dict) -> int:
    """
    Number of bits text takes with the given table.
    """
    total = 0
    for symbol in text:
        if symbol not in table:
            raise UnknownSymbol(symbol)
        total += len(table[symbol])
    return total


def encode(text, table: dict, verbose: bool = False) -> bitarray:
    """
    Replaces each symbol of text with its codeword.

    :param text: iterable of symbols
    :param table: dict, {symbol: codeword}; codewords as accepted by decode
    :param verbose: bool, log the size of the result
    :return: bitarray with the concatenated codewords
    """
    codewords = {}
    writer = BitWriter()
    count = 0
    for symbol in text:
        codeword = codewords.get(symbol)
        if codeword is None:
            if symbol not in table:
                raise UnknownSymbol(symbol)
            codeword = codewords[symbol] = _as_codeword(symbol, table[symbol])
        writer.write_code(codeword)
        count += 1

    if verbose:
        logger.debug(f"Encoded {count} symbols into {len(writer)} bits")
    return writer.get_bitarray()


def _collect(decoded_data: list, into):
    if into is list:
        return decoded_data
    if into is tuple:
        return tuple(decoded_data)
    if into is str:
        return "".join(decoded_data)
    if into is bytes:
        return bytes(decoded_data)
    raise ValueError(f"Unsupported output type {into!r}, expected list, tuple, str or bytes")


def decode(bits, table: dict, into=list, verbose: bool = False):
    """
    Reads bits one by one and emits a symbol as soon as
    the collected bits form a codeword.

    Raises InvalidTable if the table has an empty or duplicate codeword
    or is not prefix-free, TruncatedStream if the bits run out in the
    middle of a codeword, and CorruptStream if the bits are not binary
    or the collected bits grow past the longest codeword without a match.

    :param bits: bitarray, string of '0' and '1', or iterable of 0/1
    :param table: dict, {symbol: codeword}
    :param into: list, tuple, str or bytes; type of the returned sequence
    :param verbose: bool, log the size of the result
    :return: decoded symbols collected into `into`
    """
    decode_map = validate_table(table)
    max_code_len = max((length for length, _ in decode_map), default=0)
    reader = BitReader(bits)

    decoded_data = []
    code = 0
    code_len = 0
    while True:
        try:
            bit = reader.read_bit()
        except EOFError:
            break

        code = (code << 1) | bit
        code_len += 1

        if (code_len, code) in decode_map:
            decoded_data.append(decode_map[(code_len, code)])
            code = 0
            code_len = 0
        elif code_len >= max_code_len:
            # no codeword is longer, so no later bit can complete a match
            raise CorruptStream(
                f"No codeword matches bits at position {reader.pos - code_len}"
            )

    if code_len:
        raise TruncatedStream(int2ba(code, code_len, endian="big").to01())

    if verbose:
        logger.debug(f"Decoded {len(reader)} bits into {len(decoded_data)} symbols")
    return _collect(decoded_data, into)
