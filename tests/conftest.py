import random

import pytest

from chip8 import Interpreter


def program(*words):
    """Pack 16-bit opcode words into ROM bytes, high byte first."""
    out = bytearray()
    for w in words:
        out += bytes([(w >> 8) & 0xFF, w & 0xFF])
    return bytes(out)


@pytest.fixture
def chip8():
    return Interpreter(rng=random.Random(1234))


@pytest.fixture
def run():
    """Load opcode words at 0x200 and execute that many steps."""
    def _run(machine, *words, steps=None):
        machine.load_program(program(*words))
        for _ in range(len(words) if steps is None else steps):
            machine.step()
        return machine
    return _run
