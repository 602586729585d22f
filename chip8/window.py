# pyglet front end
#----------------------------------------------------------------------------------------------
# We're subclassing pyglet.window.Window (that'll handle graphics and keyboard handling)
# and overriding whatever def we need from there. Sound lives in audio.py.
# The CPU and the 60 Hz timers are two pyglet.clock schedules on the same
# event loop, so a step, a timer tick and a key update never run at once.
#----------------------------------------------------------------------------------------------

import logging

import numpy as np
import pyglet
from pyglet.window import key

from . import config
from .audio import Beeper
from .errors import Chip8Error

logger = logging.getLogger(__name__)

# Key mapping - maps physical keyboard keys to CHIP-8 keypad
# 1 2 3 4      1 2 3 C
# Q W E R  ->  4 5 6 D
# A S D F      7 8 9 E
# Z X C V      A 0 B F
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}

WHITE = (255, 255, 255, 255)


class Chip8Window(pyglet.window.Window):

    def __init__(self, interpreter, rom_name="", scale=config.scale,
                 cpu_hz=config.cpu_hz, timer_hz=config.timer_HZ):
        self.scale = scale
        win_w, win_h = config.width * scale, config.height * scale
        caption = "CHIP-8 Emulator"
        if rom_name:
            caption += " - " + rom_name
        super().__init__(win_w, win_h, caption=caption, resizable=False, vsync=False)

        self.chip8 = interpreter
        self.cpu_hz = cpu_hz
        self.key_inputs = [False] * config.NUM_KEYS
        self.should_draw = True
        self.has_exit = False

        # Pre-allocated RGBA frame, upscaled with numpy.repeat on redraw
        self._small_framebuf = np.zeros((config.height, config.width, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        blank = np.zeros((win_h, win_w, 4), dtype=np.uint8)
        self.image = pyglet.image.ImageData(win_w, win_h, 'RGBA', blank.tobytes())

        self.beeper = Beeper()

        # ---- Performance Counters ----
        self._fps_counter = 0
        self._cps_counter = 0
        self.fps_label = pyglet.text.Label(
            "FPS: 0", font_size=12, x=5, y=win_h - 15,
            anchor_x='left', anchor_y='center', color=WHITE)
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0", font_size=12, x=5, y=win_h - 30,
            anchor_x='left', anchor_y='center', color=WHITE)

        # Schedule CPU and timer ticks
        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / cpu_hz)
        pyglet.clock.schedule_interval(self._timer_tick, 1.0 / timer_hz)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        if self.has_exit:
            return
        # the clock rarely fires at the full cpu_hz, so catch up on missed cycles
        cycles = max(1, round(self.cpu_hz * dt))
        try:
            for _ in range(cycles):
                if self.chip8.step():
                    self.should_draw = True
                self._cps_counter += 1
        except Chip8Error as e:
            logger.error("Emulation error at PC=0x%03X: %s", self.chip8.pc, e)
            self.stop()

    # ---- timers ----
    def _timer_tick(self, dt):
        self.chip8.tick_timers()
        self.beeper.update(self.chip8.sound_timer)

    def _update_bench(self, dt):
        self.fps_label.text = "FPS: %.1f" % (self._fps_counter / dt)
        self.cps_label.text = "Cycles/s: %d" % round(self._cps_counter / dt)
        self._fps_counter = 0
        self._cps_counter = 0

    def stop(self):
        self.has_exit = True
        pyglet.clock.unschedule(self._cpu_tick)
        pyglet.clock.unschedule(self._timer_tick)
        pyglet.clock.unschedule(self._update_bench)
        self.beeper.delete()
        self.close()

    def on_close(self):
        #@Override
        if not self.has_exit:
            self.stop()
        else:
            super().on_close()

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.stop()
            return pyglet.event.EVENT_HANDLED
        if symbol == key.F1:
            self.toggle_logs()
        if symbol in keymap:
            self.key_inputs[keymap[symbol]] = True
            self.chip8.set_keys(self.key_inputs)

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in keymap:
            self.key_inputs[keymap[symbol]] = False
            self.chip8.set_keys(self.key_inputs)

    def toggle_logs(self):
        package_logger = logging.getLogger("chip8")
        logs_on = package_logger.getEffectiveLevel() > logging.DEBUG
        package_logger.setLevel(logging.DEBUG if logs_on else logging.INFO)
        logger.info("logsOn: %s", logs_on)

    # ---- Drawing ----
    def render_frame(self):
        frame = self.chip8.framebuffer()
        # pyglet's origin is bottom-left, CHIP-8 row 0 is the top row
        lit = frame[::-1]
        self._small_framebuf[..., :3] = np.where(lit, 255, 0)[..., None]
        if self.scale != 1:
            scaled = np.repeat(np.repeat(self._small_framebuf, self.scale, axis=0), self.scale, axis=1)
        else:
            scaled = self._small_framebuf
        self.image.set_data('RGBA', self.image.width * 4, scaled.tobytes())

    def on_draw(self):
        self.clear()
        if self.should_draw:
            self.render_frame()
            self.should_draw = False
        self.image.blit(0, 0)

        # ---- FPS / CPS labels ----
        self.fps_label.draw()
        self.cps_label.draw()
        self._fps_counter += 1


def run(interpreter, rom_name="", **options):
    window = Chip8Window(interpreter, rom_name=rom_name, **options)
    pyglet.app.run()
    return window
