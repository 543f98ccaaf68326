"""
Drawing surfaces the tile scheduler can paint on.

A surface is anything with a size and two methods:
    clear_rect(x, y, w, h)
    fill_rect(x, y, w, h, color)
where color is an (r, g, b) triple. The scheduler never writes outside
the surface, but both implementations here clip anyway.
"""

import numpy as np

from .colors import BLACK, Color


def surface_size(surface):
    """(width, height) of a surface, pygame style or attribute style."""
    if hasattr(surface, 'get_size'):
        return tuple(surface.get_size())
    return surface.width, surface.height


class ArraySurface:
    """
    In-memory RGB raster backed by a numpy array.

    Attributes:
        width, height: Size in pixels
        pixels: uint8 array of shape (height, width, 3)
    """

    def __init__(self, width, height, background=BLACK):
        self.width = int(width)
        self.height = int(height)
        self.background = Color(*background)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self.pixels[:] = self.background

    def _clip(self, x, y, w, h):
        x0 = max(0, int(x))
        y0 = max(0, int(y))
        x1 = min(self.width, int(x + w))
        y1 = min(self.height, int(y + h))
        return x0, y0, x1, y1

    def clear_rect(self, x, y, w, h):
        x0, y0, x1, y1 = self._clip(x, y, w, h)
        if x1 > x0 and y1 > y0:
            self.pixels[y0:y1, x0:x1] = self.background

    def fill_rect(self, x, y, w, h, color):
        x0, y0, x1, y1 = self._clip(x, y, w, h)
        if x1 > x0 and y1 > y0:
            self.pixels[y0:y1, x0:x1] = color[:3]

    def pixel(self, x, y):
        r, g, b = self.pixels[y, x]
        return Color(int(r), int(g), int(b))

    def to_array(self):
        return self.pixels.copy()


class PygameSurface:
    """
    Adapter exposing a pygame.Surface through the surface protocol.

    pygame clips fills to the surface itself.
    """

    def __init__(self, surface, background=BLACK):
        self.surface = surface
        self.background = Color(*background)

    @property
    def width(self):
        return self.surface.get_width()

    @property
    def height(self):
        return self.surface.get_height()

    def get_size(self):
        return self.surface.get_size()

    def clear_rect(self, x, y, w, h):
        self.surface.fill(self.background, (int(x), int(y), int(w), int(h)))

    def fill_rect(self, x, y, w, h, color):
        self.surface.fill(tuple(color[:3]), (int(x), int(y), int(w), int(h)))
