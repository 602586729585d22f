# CHIP8 Virtual Machine:
# Input - 16 key states, pushed in by the front end and checked per cycle.
# Output - 64x32 display (pixels are either on or off) & sound buzzer.
# CPU - 35 instructions over 16 registers, I, PC and a 16 level stack.
# Memory - 4096 bytes which includes: the reserved area, fonts, and the loaded ROM.
#
# The core (everything but window/audio/cli) has no pyglet dependency.

from .cpu import Interpreter
from .display import FrameBuffer
from .errors import (
    Chip8Error,
    LoadOverflow,
    MemoryOutOfRange,
    StackOverflow,
    StackUnderflow,
    UnknownOpcode,
)
from .keypad import InputState
from .memory import MemoryBank
from .registers import RegisterFile
from .stack import CallStack
from .timers import TimerPair

__version__ = "1.0.0"

__all__ = [
    "Interpreter",
    "MemoryBank",
    "RegisterFile",
    "CallStack",
    "TimerPair",
    "FrameBuffer",
    "InputState",
    "Chip8Error",
    "LoadOverflow",
    "MemoryOutOfRange",
    "StackOverflow",
    "StackUnderflow",
    "UnknownOpcode",
]
