"""Errors raised by the interpreter core.

Every error is local to one ``step()`` (or one ``load_program()``) call.
The caller decides whether to halt, log and continue, or report it.
"""


class Chip8Error(Exception):
    """Base class for all machine errors."""


class LoadOverflow(Chip8Error):
    def __init__(self, size, capacity):
        super().__init__(
            "Program is %d bytes but only %d bytes fit above 0x200" % (size, capacity))
        self.size = size
        self.capacity = capacity


class MemoryOutOfRange(Chip8Error):
    def __init__(self, address, length=1):
        if length > 1:
            msg = "Memory access 0x%04X..0x%04X is out of range" % (address, address + length - 1)
        else:
            msg = "Memory access 0x%04X is out of range" % address
        super().__init__(msg)
        self.address = address
        self.length = length


class StackOverflow(Chip8Error):
    def __init__(self, address):
        super().__init__("Stack overflow pushing return address 0x%03X" % address)
        self.address = address


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Stack underflow on 00EE")


class UnknownOpcode(Chip8Error):
    def __init__(self, opcode, address):
        super().__init__("Unknown opcode: %04X at 0x%03X" % (opcode, address))
        self.opcode = opcode
        self.address = address
