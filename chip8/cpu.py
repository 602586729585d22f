# CHIP-8 interpreter core
# CPU - Cowgod's CHIP-8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
#----------------------------------------------------------------------------------------------
# One step() fetches the two bytes at PC (high byte first), moves PC past them,
# then dispatches on the top nibble. Classes 0x0, 0x8, 0xE and 0xF dispatch a
# second time on their low bits. Nothing in here knows about windows, sound
# or keyboards: the front end pushes key states in, ticks the timers, and
# reads the framebuffer back out.
#----------------------------------------------------------------------------------------------

import logging
import random
from pathlib import Path

from .config import FONT_START, FONT_GLYPH_SIZE
from .display import FrameBuffer
from .errors import Chip8Error, MemoryOutOfRange, UnknownOpcode
from .keypad import InputState
from .memory import MemoryBank
from .registers import RegisterFile
from .stack import CallStack
from .timers import TimerPair

logger = logging.getLogger(__name__)


class Interpreter:
    """A complete CHIP-8 machine.

    ``rng`` is anything with ``getrandbits(k)`` (a seeded ``random.Random``
    makes CXNN reproducible). With ``strict`` set, an unknown opcode raises
    ``UnknownOpcode``; otherwise it is logged and skipped.

    The machine is not thread safe. ``step()``, the timer ticks and
    ``set_keys()`` must be called from one thread (or under one lock).
    """

    def __init__(self, rng=None, strict=False):
        # ---- CPU state ----
        self.memory = MemoryBank()
        self.registers = RegisterFile()
        self.V = self.registers.V
        self.stack = CallStack()
        self.timers = TimerPair()
        self.display = FrameBuffer()
        self.keypad = InputState()

        self.rng = rng if rng is not None else random.Random()
        self.strict = strict

        self.opcode = 0
        self.cycles = 0
        self.unknown_opcodes = 0
        self.should_draw = False
        self._key_register = None  # register FX0A is waiting to fill

        # Prepare opcode function map
        self.setup_funcmap()

    # ---- Convenience accessors ----
    @property
    def pc(self):
        return self.registers.pc

    @pc.setter
    def pc(self, value):
        self.registers.pc = value

    @property
    def I(self):
        return self.registers.index

    @I.setter
    def I(self, value):
        self.registers.index = value

    @property
    def delay_timer(self):
        return self.timers.delay

    @property
    def sound_timer(self):
        return self.timers.sound

    @property
    def sound_active(self):
        return self.timers.sound_active

    @property
    def waiting_for_key(self):
        return self._key_register is not None

    def framebuffer(self):
        return self.display.snapshot()

    # ---- Load ROM ----
    def load_program(self, program):
        self.memory.load_program(program)

    def load_rom(self, path):
        path = Path(path)
        logger.info("Loading ROM: %s", path)
        self.load_program(path.read_bytes())

    # ---- Input ----
    def set_keys(self, states):
        self.keypad.set_all(states)

    # ---- timers ----
    def tick_delay(self):
        self.timers.tick_delay()

    def tick_sound(self):
        self.timers.tick_sound()

    def tick_timers(self):
        self.timers.tick()

    # ---- Cycle ----
    def step(self):
        """Execute one instruction. Returns True when the screen changed.

        On error PC is put back on the faulting instruction and the error is
        re-raised; no other state has been touched at that point.
        """
        self.should_draw = False

        if self._key_register is not None:
            if self._poll_key():
                self.cycles += 1
            return self.should_draw

        pc = self.registers.pc
        self.opcode = opcode = self.memory.read_word(pc)
        self.registers.pc = pc + 2

        try:
            self.decode(opcode)(opcode)
        except Chip8Error:
            self.registers.pc = pc
            raise

        self.cycles += 1
        return self.should_draw

    def decode(self, opcode):
        prefix = opcode & 0xF000
        if prefix == 0x0000:
            handler = self.funcmap_0.get(opcode)
        elif prefix == 0x8000:
            handler = self.funcmap_8.get(opcode & 0xF)
        elif prefix == 0xE000:
            handler = self.funcmap_E.get(opcode & 0xFF)
        elif prefix == 0xF000:
            handler = self.funcmap_F.get(opcode & 0xFF)
        else:
            handler = self.funcmap.get(prefix)
        return handler or self._unknown

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            0x1000: self._1nnn,  # 1nnn - Jump to a specific memory address
            0x2000: self._2nnn,  # 2nnn - Call a function (subroutine) at a memory address
            0x3000: self._3xkk,  # 3xkk - Skip next instruction if a register equals a specific number
            0x4000: self._4xkk,  # 4xkk - Skip next instruction if a register does NOT equal a number
            0x5000: self._5xy0,  # 5xy0 - Skip next instruction if two registers are equal
            0x6000: self._6xkk,  # 6xkk - Set a register to a specific number
            0x7000: self._7xkk,  # 7xkk - Add a number to a register
            0x9000: self._9xy0,  # 9xy0 - Skip next instruction if two registers are NOT equal
            0xA000: self._Annn,  # Annn - Set a special memory pointer (I) to a specific address
            0xB000: self._Bnnn,  # Bnnn - Jump to an address plus the value of register V0
            0xC000: self._Cxkk,  # Cxkk - Set a register to a random number ANDed with a value
            0xD000: self._Dxyn,  # Dxyn - Draw a small image (sprite) on the screen at X,Y coordinates
        }
        self.funcmap_0 = {
            0x00E0: self._00E0,  # clear screen
            0x00EE: self._00EE,  # return from subroutine
        }
        self.funcmap_8 = {
            0x0: self._8xy0,
            0x1: self._8xy1,
            0x2: self._8xy2,
            0x3: self._8xy3,
            0x4: self._8xy4,
            0x5: self._8xy5,
            0x6: self._8xy6,
            0x7: self._8xy7,
            0xE: self._8xyE,
        }
        self.funcmap_E = {
            0x9E: self._Ex9E,
            0xA1: self._ExA1,
        }
        self.funcmap_F = {
            0x07: self._Fx07,
            0x0A: self._Fx0A,
            0x15: self._Fx15,
            0x18: self._Fx18,
            0x1E: self._Fx1E,
            0x29: self._Fx29,
            0x33: self._Fx33,
            0x55: self._Fx55,
            0x65: self._Fx65,
        }

    def _unknown(self, opcode):
        address = (self.registers.pc - 2) & 0xFFFF
        if self.strict:
            raise UnknownOpcode(opcode, address)
        self.unknown_opcodes += 1
        logger.warning("Unknown opcode: %04X at 0x%03X, skipped", opcode, address)

    def _skip(self):
        self.registers.pc += 2

    # ---- Opcode Handlers ----

    # 00E0 - CLS
    def _00E0(self, opcode):
        self.display.clear()
        self.should_draw = True
        logger.debug("Clear the display (all pixels turned off)")

    # 00EE - RET
    def _00EE(self, opcode):
        self.registers.pc = self.stack.pop()
        logger.debug("Return to 0x%03X", self.registers.pc)

    # 1nnn - Jump to address NNN
    def _1nnn(self, opcode):
        self.registers.pc = opcode & 0x0FFF
        logger.debug("Jump to address 0x%03X", opcode & 0x0FFF)

    # 2nnn - Call subroutine at NNN
    def _2nnn(self, opcode):
        self.stack.push(self.registers.pc)
        self.registers.pc = opcode & 0x0FFF
        logger.debug("Call subroutine at 0x%03X", opcode & 0x0FFF)

    # 3xkk - Skip next instruction if Vx == kk
    def _3xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        if self.V[x] == opcode & 0xFF:
            self._skip()
            logger.debug("Skip next instruction: V%X == %d", x, opcode & 0xFF)

    # 4xkk - Skip next instruction if Vx != kk
    def _4xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        if self.V[x] != opcode & 0xFF:
            self._skip()
            logger.debug("Skip next instruction: V%X != %d", x, opcode & 0xFF)

    # 5xy0 - Skip next instruction if Vx == Vy
    def _5xy0(self, opcode):
        if opcode & 0xF:
            return self._unknown(opcode)
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        if self.V[x] == self.V[y]:
            self._skip()
            logger.debug("Skip next instruction: V%X == V%X", x, y)

    # 6xkk - Set Vx = kk
    def _6xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        self.V[x] = opcode & 0xFF
        logger.debug("Set V%X = %d", x, self.V[x])

    # 7xkk - Add immediate, VF untouched
    def _7xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        self.V[x] = (self.V[x] + (opcode & 0xFF)) & 0xFF
        logger.debug("Add %d to V%X: %d", opcode & 0xFF, x, self.V[x])

    # 8xy0..8xyE - arithmetic and logic between two registers.
    # Where VF is a flag output, the flag is computed first and written last.
    def _8xy0(self, opcode):
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        self.V[x] = self.V[y]
        logger.debug("Copy V%X (%d) into V%X", y, self.V[y], x)

    def _8xy1(self, opcode):
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        self.V[x] |= self.V[y]
        logger.debug("V%X = V%X OR V%X -> %d", x, x, y, self.V[x])

    def _8xy2(self, opcode):
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        self.V[x] &= self.V[y]
        logger.debug("V%X = V%X AND V%X -> %d", x, x, y, self.V[x])

    def _8xy3(self, opcode):
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        self.V[x] ^= self.V[y]
        logger.debug("V%X = V%X XOR V%X -> %d", x, x, y, self.V[x])

    def _8xy4(self, opcode):
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        s = self.V[x] + self.V[y]
        carry = 1 if s > 0xFF else 0
        self.V[x] = s & 0xFF
        self.V[0xF] = carry
        logger.debug("Add V%X to V%X: result %d, carry=%d", y, x, s & 0xFF, carry)

    def _8xy5(self, opcode):
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        not_borrow = 1 if self.V[x] >= self.V[y] else 0
        self.V[x] = (self.V[x] - self.V[y]) & 0xFF
        self.V[0xF] = not_borrow
        logger.debug("Subtract V%X from V%X: NOT borrow=%d", y, x, not_borrow)

    def _8xy6(self, opcode):
        x = (opcode >> 8) & 0xF
        lsb = self.V[x] & 1
        self.V[x] >>= 1
        self.V[0xF] = lsb
        logger.debug("Shift V%X right by 1, least significant bit=%d", x, lsb)

    def _8xy7(self, opcode):
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        not_borrow = 1 if self.V[y] >= self.V[x] else 0
        self.V[x] = (self.V[y] - self.V[x]) & 0xFF
        self.V[0xF] = not_borrow
        logger.debug("Set V%X = V%X - V%X, NOT borrow=%d", x, y, x, not_borrow)

    def _8xyE(self, opcode):
        x = (opcode >> 8) & 0xF
        msb = (self.V[x] >> 7) & 1
        self.V[x] = (self.V[x] << 1) & 0xFF
        self.V[0xF] = msb
        logger.debug("Shift V%X left by 1, most significant bit=%d", x, msb)

    # 9xy0 - Skip next instruction if Vx != Vy
    def _9xy0(self, opcode):
        if opcode & 0xF:
            return self._unknown(opcode)
        x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
        if self.V[x] != self.V[y]:
            self._skip()
            logger.debug("Skip next instruction: V%X != V%X", x, y)

    # Annn - Set I = NNN
    def _Annn(self, opcode):
        self.registers.index = opcode & 0x0FFF
        logger.debug("Set I = %03X", opcode & 0x0FFF)

    # Bnnn - Jump to address NNN + V0
    def _Bnnn(self, opcode):
        self.registers.pc = (opcode & 0x0FFF) + self.V[0]
        logger.debug("Jump to address V0 + %03X = %03X", opcode & 0x0FFF, self.registers.pc)

    # Cxkk - RND Vx, byte
    def _Cxkk(self, opcode):
        x = (opcode >> 8) & 0xF
        self.V[x] = self.rng.getrandbits(8) & (opcode & 0xFF)
        logger.debug("Set V%X = random_byte & %d -> %d", x, opcode & 0xFF, self.V[x])

    # Dxyn - DRW Vx, Vy, nibble
    def _Dxyn(self, opcode):
        x = self.V[(opcode >> 8) & 0xF]
        y = self.V[(opcode >> 4) & 0xF]
        # read every row before touching the screen so a bad I leaves it intact
        rows = self.memory.read_block(self.registers.index, opcode & 0xF)
        collision = self.display.draw_sprite(x, y, rows)
        self.V[0xF] = 1 if collision else 0
        self.should_draw = True
        logger.debug("Drew sprite at (%d, %d), collision=%d", x, y, self.V[0xF])

    # Ex9E - SKP Vx
    def _Ex9E(self, opcode):
        if self.keypad.is_pressed(self.V[(opcode >> 8) & 0xF]):
            self._skip()

    # ExA1 - SKNP Vx
    def _ExA1(self, opcode):
        if not self.keypad.is_pressed(self.V[(opcode >> 8) & 0xF]):
            self._skip()

    # Fx07 - Vx = delay timer
    def _Fx07(self, opcode):
        self.V[(opcode >> 8) & 0xF] = self.timers.delay

    # Fx0A - LD Vx, K: wait for a key press
    def _Fx0A(self, opcode):
        x = (opcode >> 8) & 0xF
        self._key_register = x
        # PC stays on this instruction until a key shows up
        self.registers.pc -= 2
        logger.debug("Waiting for a key press into V%X", x)
        self._poll_key()

    def _poll_key(self):
        key = self.keypad.first_pressed()
        if key is None:
            return False
        self.V[self._key_register] = key
        logger.debug("Key %X pressed, stored in V%X", key, self._key_register)
        self._key_register = None
        self._skip()
        return True

    # Fx15 - delay timer = Vx
    def _Fx15(self, opcode):
        self.timers.set_delay(self.V[(opcode >> 8) & 0xF])

    # Fx18 - sound timer = Vx
    def _Fx18(self, opcode):
        self.timers.set_sound(self.V[(opcode >> 8) & 0xF])

    # Fx1E - I = I + Vx
    def _Fx1E(self, opcode):
        new_i = self.registers.index + self.V[(opcode >> 8) & 0xF]
        if new_i >= len(self.memory):
            raise MemoryOutOfRange(new_i)
        self.registers.index = new_i

    # Fx29 - I = location of the glyph for digit Vx
    def _Fx29(self, opcode):
        digit = self.V[(opcode >> 8) & 0xF] & 0xF
        self.registers.index = FONT_START + digit * FONT_GLYPH_SIZE

    # Fx33 - BCD of Vx at I, I+1, I+2
    def _Fx33(self, opcode):
        val = self.V[(opcode >> 8) & 0xF]
        self.memory.write_block(self.registers.index, (val // 100, (val // 10) % 10, val % 10))

    # Fx55 - store V0..Vx at I
    def _Fx55(self, opcode):
        x = (opcode >> 8) & 0xF
        self.memory.write_block(self.registers.index, self.V[:x + 1])

    # Fx65 - load V0..Vx from I
    def _Fx65(self, opcode):
        x = (opcode >> 8) & 0xF
        values = self.memory.read_block(self.registers.index, x + 1)
        self.V[:x + 1] = values
