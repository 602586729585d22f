import logging

from .config import MEMORY_SIZE, PROGRAM_START, FONT_START
from .errors import LoadOverflow, MemoryOutOfRange
from .fonts import fontset

logger = logging.getLogger(__name__)


class MemoryBank:
    """Flat byte-addressable memory with the font table preloaded.

    Out of range accesses raise ``MemoryOutOfRange`` instead of wrapping.
    """

    def __init__(self, size=MEMORY_SIZE):
        self.size = size
        self.data = bytearray(size)

        # Load fontset into memory
        self.data[FONT_START:FONT_START + len(fontset)] = bytes(fontset)

    def __len__(self):
        return self.size

    def check_range(self, address, length=1):
        if address < 0 or address + length > self.size:
            raise MemoryOutOfRange(address, length)

    def read(self, address):
        self.check_range(address)
        return self.data[address]

    def write(self, address, value):
        self.check_range(address)
        self.data[address] = value & 0xFF

    def read_block(self, address, length):
        self.check_range(address, length)
        return bytes(self.data[address:address + length])

    def write_block(self, address, values):
        values = bytes(values)
        self.check_range(address, len(values))
        self.data[address:address + len(values)] = values

    def read_word(self, address):
        # big-endian: first byte is the high byte
        self.check_range(address, 2)
        return (self.data[address] << 8) | self.data[address + 1]

    # ---- Load ROM ----
    def load_program(self, program, start=PROGRAM_START):
        program = bytes(program)
        capacity = self.size - start
        if len(program) > capacity:
            raise LoadOverflow(len(program), capacity)
        self.data[start:start + len(program)] = program
        logger.debug("Loaded %d bytes at 0x%03X", len(program), start)
