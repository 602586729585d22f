from .config import NUM_REGISTERS, PROGRAM_START


class ByteRegisters(list):
    """The V0-VF list. Every store, single or slice, is masked to 8 bits."""

    def __setitem__(self, x, value):
        if isinstance(x, slice):
            value = [v & 0xFF for v in value]
        else:
            value &= 0xFF
        super().__setitem__(x, value)


class RegisterFile:
    """V0-VF, the index register I and the program counter.

    Values are masked on write: V registers to 8 bits, I and PC to 16 bits.
    VF is an ordinary slot; instructions that use it as a flag write it last.
    """

    def __init__(self):
        self.V = ByteRegisters([0] * NUM_REGISTERS)  # 16 general-purpose registers
        self._index = 0               # I register (memory pointer)
        self._pc = PROGRAM_START      # program counter starts at 0x200

    def __getitem__(self, x):
        return self.V[x]

    def __setitem__(self, x, value):
        self.V[x] = value

    @property
    def index(self):
        return self._index

    @index.setter
    def index(self, value):
        self._index = value & 0xFFFF

    @property
    def pc(self):
        return self._pc

    @pc.setter
    def pc(self, value):
        self._pc = value & 0xFFFF
