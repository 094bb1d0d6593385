from bitarray import bitarray


class BitWriter:
    """
    Simple bit writer collecting Huffman codewords into a bitarray.
    """

    def __init__(self):
        self.bits = bitarray(endian="big")

    def write_code(self, codeword):
        """
        Appends a whole codeword, first bit first.
        """
        self.bits.extend(codeword)

    def get_bitarray(self) -> bitarray:
        """
        Returns the bits written so far.
        """
        return self.bits

    def __len__(self):
        return len(self.bits)
