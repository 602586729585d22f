import numpy as np

from .config import width, height


class FrameBuffer:
    """64x32 monochrome screen, indexed ``[y, x]``.

    The only mutations are ``clear()`` and the XOR ``draw_sprite()``; readers
    get a read-only snapshot through ``snapshot()``.
    """

    def __init__(self, w=width, h=height):
        self.width = w
        self.height = h
        self.pixels = np.zeros((h, w), dtype=bool)

    def clear(self):
        self.pixels[:] = False

    def draw_sprite(self, x, y, rows):
        """XOR ``rows`` (one byte each, MSB = leftmost pixel) onto the screen at (x, y).

        Coordinates wrap around both edges. Returns True if any lit pixel was
        turned off.
        """
        x %= self.width
        y %= self.height
        collision = False
        for row, sprite in enumerate(rows):
            if sprite == 0:
                continue
            py = (y + row) % self.height
            for col in range(8):
                if sprite & (0x80 >> col):
                    px = (x + col) % self.width
                    if self.pixels[py, px]:
                        collision = True
                    self.pixels[py, px] = not self.pixels[py, px]
        return collision

    def snapshot(self):
        frame = self.pixels.copy()
        frame.setflags(write=False)
        return frame

    def lit(self):
        return int(np.count_nonzero(self.pixels))
