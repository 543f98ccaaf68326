"""
Shared fixtures: a fake surface that records every write.
"""
import pytest


class CountingSurface:
    """Surface that records clear/fill calls instead of drawing."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.clears = []
        self.fills = []

    def clear_rect(self, x, y, w, h):
        self.clears.append((x, y, w, h))

    def fill_rect(self, x, y, w, h, color):
        self.fills.append((x, y, w, h, tuple(color)))

    @property
    def writes(self):
        return len(self.clears) + len(self.fills)

    def coverage(self):
        """Pixel -> number of fills covering it, plus any out-of-bounds pixels."""
        counts = {}
        outside = []
        for x, y, w, h, _ in self.fills:
            for py in range(y, y + h):
                for px in range(x, x + w):
                    if not (0 <= px < self.width and 0 <= py < self.height):
                        outside.append((px, py))
                    counts[(px, py)] = counts.get((px, py), 0) + 1
        return counts, outside


@pytest.fixture
def counting_surface():
    return CountingSurface
