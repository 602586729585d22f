import numpy as np
import pytest

from chip8 import (CallStack, FrameBuffer, InputState, LoadOverflow, MemoryBank,
                   MemoryOutOfRange, RegisterFile, StackOverflow, StackUnderflow,
                   TimerPair)
from chip8.config import FONT_START, MEMORY_SIZE, PROGRAM_START
from chip8.fonts import fontset


class TestMemoryBank:

    def test_font_preloaded_rest_zero(self):
        mem = MemoryBank()
        assert len(mem) == MEMORY_SIZE
        assert mem.read_block(FONT_START, 80) == bytes(fontset)
        assert mem.read_block(0, FONT_START) == bytes(FONT_START)
        assert mem.read_block(PROGRAM_START, 16) == bytes(16)

    def test_read_write_byte_masks(self):
        mem = MemoryBank()
        mem.write(0x300, 0x1AB)
        assert mem.read(0x300) == 0xAB

    def test_out_of_range(self):
        mem = MemoryBank()
        with pytest.raises(MemoryOutOfRange):
            mem.read(MEMORY_SIZE)
        with pytest.raises(MemoryOutOfRange):
            mem.write(MEMORY_SIZE, 1)
        with pytest.raises(MemoryOutOfRange):
            mem.read_block(MEMORY_SIZE - 2, 3)
        with pytest.raises(MemoryOutOfRange):
            mem.read(-1)

    def test_block_write_is_all_or_nothing(self):
        mem = MemoryBank()
        with pytest.raises(MemoryOutOfRange):
            mem.write_block(MEMORY_SIZE - 2, b"\x01\x02\x03")
        assert mem.read_block(MEMORY_SIZE - 2, 2) == b"\x00\x00"

    def test_read_word_big_endian(self):
        mem = MemoryBank()
        mem.write_block(0x200, b"\x12\x34")
        assert mem.read_word(0x200) == 0x1234

    def test_load_program(self):
        mem = MemoryBank()
        mem.load_program(b"\xAA\xBB\xCC")
        assert mem.read_block(PROGRAM_START, 3) == b"\xAA\xBB\xCC"

    def test_load_program_fills_exactly(self):
        mem = MemoryBank()
        mem.load_program(bytes([7]) * (MEMORY_SIZE - PROGRAM_START))
        assert mem.read(MEMORY_SIZE - 1) == 7

    def test_load_overflow_leaves_memory_untouched(self):
        mem = MemoryBank()
        before = bytes(mem.data)
        with pytest.raises(LoadOverflow) as info:
            mem.load_program(bytes([0xFF]) * (MEMORY_SIZE - PROGRAM_START + 1))
        assert info.value.capacity == MEMORY_SIZE - PROGRAM_START
        assert bytes(mem.data) == before


class TestRegisterFile:

    def test_initial_state(self):
        regs = RegisterFile()
        assert regs.V == [0] * 16
        assert regs.index == 0
        assert regs.pc == 0x200

    def test_wraparound(self):
        regs = RegisterFile()
        regs[3] = 256 + 5
        assert regs[3] == 5
        regs[4] = -1
        assert regs[4] == 0xFF
        regs.index = 0x1FFFF
        assert regs.index == 0xFFFF
        regs.pc = 0x10002
        assert regs.pc == 0x0002

    def test_v_list_masks_every_store(self):
        regs = RegisterFile()
        regs.V[2] = 0x1AB
        regs.V[5] += 0x100 + 7
        regs.V[0:2] = [256, -2]
        assert regs.V[:3] == [0x00, 0xFE, 0xAB]
        assert regs[5] == 7
        assert len(regs.V) == 16


class TestCallStack:

    def test_lifo(self):
        stack = CallStack()
        stack.push(0x202)
        stack.push(0x304)
        assert len(stack) == 2
        assert stack.peek() == 0x304
        assert stack.pop() == 0x304
        assert stack.pop() == 0x202

    def test_overflow(self):
        stack = CallStack()
        for i in range(16):
            stack.push(0x200 + 2 * i)
        assert stack.full
        with pytest.raises(StackOverflow):
            stack.push(0x400)
        assert len(stack) == 16

    def test_underflow(self):
        with pytest.raises(StackUnderflow):
            CallStack().pop()


class TestTimerPair:

    @pytest.mark.parametrize("start", [0, 1, 60, 255])
    def test_counts_down_to_zero_and_stays(self, start):
        timers = TimerPair()
        timers.set_delay(start)
        timers.set_sound(start)
        for _ in range(start):
            timers.tick()
        assert timers.delay == 0
        assert timers.sound == 0
        timers.tick()
        assert timers.delay == 0
        assert timers.sound == 0

    def test_independent(self):
        timers = TimerPair()
        timers.set_delay(5)
        timers.set_sound(2)
        timers.tick_delay()
        assert (timers.delay, timers.sound) == (4, 2)
        timers.tick_sound()
        timers.tick_sound()
        assert (timers.delay, timers.sound) == (4, 0)
        assert not timers.sound_active


class TestFrameBuffer:

    def test_draw_and_collision(self):
        fb = FrameBuffer()
        assert not fb.draw_sprite(0, 0, [0xF0])
        assert fb.lit() == 4
        assert fb.draw_sprite(2, 0, [0xC0])
        # pixel 2 and 3 were on and are now off
        assert fb.pixels[0, :4].tolist() == [True, True, False, False]

    def test_wraps_both_edges(self):
        fb = FrameBuffer()
        fb.draw_sprite(62, 31, [0xC0 | 0x20, 0x80])
        assert fb.pixels[31, 62] and fb.pixels[31, 63] and fb.pixels[31, 0]
        assert fb.pixels[0, 62]
        assert fb.lit() == 4

    def test_snapshot_is_read_only_copy(self):
        fb = FrameBuffer()
        frame = fb.snapshot()
        assert frame.shape == (32, 64)
        with pytest.raises(ValueError):
            frame[0, 0] = True
        fb.draw_sprite(0, 0, [0x80])
        assert not frame[0, 0]

    def test_clear(self):
        fb = FrameBuffer()
        fb.draw_sprite(10, 10, [0xFF] * 4)
        fb.clear()
        assert fb.lit() == 0


class TestInputState:

    def test_bulk_set_and_scan(self):
        keys = InputState()
        assert keys.first_pressed() is None
        states = [False] * 16
        states[0xB] = states[0x3] = True
        keys.set_all(states)
        assert keys.first_pressed() == 0x3
        assert keys.is_pressed(0xB)
        assert not keys.is_pressed(0x0)

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            InputState().set_all([True] * 15)

    def test_caller_list_not_shared(self):
        keys = InputState()
        states = [False] * 16
        keys.set_all(states)
        states[5] = True
        assert not keys.is_pressed(5)
        assert keys.keys.tolist() == [False] * 16
        assert isinstance(keys.keys, np.ndarray)
