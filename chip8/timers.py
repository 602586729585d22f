class TimerPair:
    """Delay and sound timers, each counting down to zero at 60 Hz.

    The timers are ticked by an external clock, never by instruction
    execution.
    """

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def set_delay(self, value):
        self.delay = value & 0xFF

    def set_sound(self, value):
        self.sound = value & 0xFF

    def tick_delay(self):
        if self.delay > 0:
            self.delay -= 1

    def tick_sound(self):
        if self.sound > 0:
            self.sound -= 1

    def tick(self):
        self.tick_delay()
        self.tick_sound()

    @property
    def sound_active(self):
        # sound timer > 0 is the only signal that the buzzer should be on
        return self.sound > 0
