import logging

import pyglet
from pyglet.media import synthesis
from pyglet.media.exceptions import MediaException

from .config import beep_frequency

logger = logging.getLogger(__name__)


def generate_beep(duration=0.1, frequency=440, sample_rate=44100):
    # Use a Sine waveform from pyglet.media.synthesis
    wave = synthesis.Sine(duration=duration, frequency=frequency, sample_rate=sample_rate)
    return pyglet.media.StaticSource(wave)


class Beeper:
    """Continuous buzzer tone driven by the sound timer.

    ``update()`` is polled from the 60 Hz timer tick; the tone starts when
    the timer goes above zero and stops when it gets back to zero.
    """

    def __init__(self, frequency=beep_frequency):
        self.sound_playing = False
        self.enabled = True
        try:
            self.player = pyglet.media.Player()
            self.player.loop = True
            self.player.queue(generate_beep(duration=0.1, frequency=frequency))
        except MediaException as e:
            logger.warning("Sound system unavailable: %s", e)
            self.player = None
            self.enabled = False

    def update(self, sound_timer):
        if sound_timer > 0 and not self.sound_playing:
            self.start()
        elif sound_timer == 0 and self.sound_playing:
            self.stop()

    def start(self):
        self.sound_playing = True
        if self.enabled:
            self.player.play()
            logger.debug("Sound plays!")

    def stop(self):
        self.sound_playing = False
        if self.enabled:
            self.player.pause()
            self.player.seek(0)

    def delete(self):
        if self.player is not None:
            self.player.delete()
            self.player = None
            self.enabled = False
