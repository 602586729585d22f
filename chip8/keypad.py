import numpy as np

from .config import NUM_KEYS

# CHIP-8 Keypad Layout:
# 1 2 3 C
# 4 5 6 D
# 7 8 9 E
# A 0 B F


class InputState:
    """Level-based state of the 16 hex keys (True while held).

    Written only by the input source, in bulk; the interpreter just reads it.
    """

    def __init__(self):
        self.keys = np.zeros(NUM_KEYS, dtype=bool)

    def set_all(self, states):
        states = np.asarray(states, dtype=bool)
        if states.shape != (NUM_KEYS,):
            raise ValueError("expected %d key states, got %r" % (NUM_KEYS, states.shape))
        self.keys[:] = states

    def is_pressed(self, key):
        return bool(self.keys[key & 0xF])

    def first_pressed(self):
        # lowest-numbered held key, or None
        held = np.flatnonzero(self.keys)
        if held.size == 0:
            return None
        return int(held[0])
