from bitarray import bitarray

from huffman_errors import CorruptStream


class BitReader:
    """
    Class for reading bits one by one from a Huffman-coded bit sequence.
    """

    def __init__(self, bits):
        """
        Initializes BitReader over the given bits.
        :param bits: bitarray, or a string of '0' and '1', or an iterable of 0/1
        """
        if isinstance(bits, bitarray):
            self.bits = bits
        elif isinstance(bits, int):
            raise TypeError("Bit sequence expected, got int")
        else:
            if not isinstance(bits, str):
                bits = list(bits)
            try:
                self.bits = bitarray(bits, endian="big")
            except (ValueError, TypeError) as e:
                raise CorruptStream(f"Not a bit sequence: {e}") from e
        self.pos = 0  # current position in the bit sequence

    def read_bit(self) -> int:
        """
        Reads one bit and returns it as 0 or 1.
        """
        if self.pos >= len(self.bits):
            raise EOFError("Bit sequence exhausted")
        val = self.bits[self.pos]
        self.pos += 1
        return val

    def __len__(self):
        return len(self.bits)
