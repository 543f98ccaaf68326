"""
Palette definitions and smooth coloring.

Each palette function returns a read-only numpy array of shape
(max_iter + 1, 3) with RGB values (uint8). Entry i is the color for
iteration count i; the final entry, index max_iter, is reserved for
points that never escaped and is always black.

To add a new palette:
1. Define a create_palette_xxx(max_iter) function that returns the array
2. Add it to the PALETTES dictionary below
"""

import math

import numpy as np

from .colors import BLACK, Color, interpolate, parse_hex
from .errors import InvalidIterationBound, InvalidPalette


DEFAULT_START = parse_hex('#2c0a4a')  # dark purple
DEFAULT_END = parse_hex('#d2b48c')    # warm tan

LOG2 = math.log(2.0)


def check_max_iter(max_iter):
    if isinstance(max_iter, bool) or not isinstance(max_iter, (int, np.integer)) or max_iter <= 0:
        raise InvalidIterationBound(f"max_iter must be a positive integer, got {max_iter!r}")
    return int(max_iter)


def _finish(colors, max_iter):
    colors[max_iter] = BLACK
    colors.flags.writeable = False
    return colors


def create_palette_sine(max_iter, start=DEFAULT_START, end=DEFAULT_END):
    """
    Sine palette: eases from start toward end along a quarter sine wave.

    The weight sin(i * pi / (2 * (max_iter - 1))) rises quickly at first
    and flattens near the top, so low iteration counts get most of the
    color variation.
    """
    max_iter = check_max_iter(max_iter)
    if isinstance(start, str):
        start = parse_hex(start)
    if isinstance(end, str):
        end = parse_hex(end)
    colors = np.zeros((max_iter + 1, 3), dtype=np.uint8)
    factor = math.pi / (2 * max(1, max_iter - 1))
    for i in range(max_iter):
        colors[i] = interpolate(start, end, math.sin(i * factor))
    return _finish(colors, max_iter)


def create_palette_hex(max_iter):
    """
    Hex palette: spreads the indices evenly over the 24-bit color space.

    Entry i is the integer i * 2**24 / max_iter read as 0xRRGGBB. Adjacent
    entries differ mostly in the low (blue) byte, so this looks striped.
    """
    max_iter = check_max_iter(max_iter)
    colors = np.zeros((max_iter + 1, 3), dtype=np.uint8)
    scale = float(1 << 24) / max_iter
    for i in range(max_iter):
        value = min(int(i * scale), 0xFFFFFF)
        colors[i] = ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    return _finish(colors, max_iter)


def create_palette_grayscale(max_iter):
    """
    Grayscale palette: black -> white.

    Simple, classic look. Good for seeing raw iteration structure.
    """
    max_iter = check_max_iter(max_iter)
    colors = np.zeros((max_iter + 1, 3), dtype=np.uint8)
    for i in range(max_iter):
        v = int(255 * i / max(1, max_iter - 1))
        colors[i] = (v, v, v)
    return _finish(colors, max_iter)


# Registry of all available palettes.
# Keys are display names, values are factory functions taking max_iter.
PALETTES = {
    'Sine': create_palette_sine,
    'Hex': create_palette_hex,
    'Grayscale': create_palette_grayscale,
}

DEFAULT_PALETTE = 'Sine'


def get_palette(name, max_iter, **kwargs):
    """
    Build a palette by name.

    Args:
        name: Key from PALETTES
        max_iter: Iteration budget; the palette has max_iter + 1 entries
        **kwargs: Passed through to the factory (e.g. start/end anchors)

    Raises:
        InvalidPalette if name is not registered
        InvalidIterationBound if max_iter is not positive
    """
    try:
        factory = PALETTES[name]
    except KeyError:
        raise InvalidPalette(
            f"Unknown palette {name!r} (expected one of: {', '.join(PALETTES)})"
        ) from None
    return factory(max_iter, **kwargs)


def list_palette_names():
    """Get list of available palette names."""
    return list(PALETTES.keys())


def palette_color(palette, index):
    """Color stored at a palette index."""
    r, g, b = palette[index]
    return Color(int(r), int(g), int(b))


def smooth_iteration(count, m):
    """
    Normalized (fractional) iteration count for an escaped point.

    Returns:
        count + 1 - log2(log2(|z|)), or None where that is undefined
        (|z|² <= 1, or a non-finite result)
    """
    if not m > 1.0 or math.isinf(m):
        return None
    log_zn = math.log(m) / 2
    nu = math.log(log_zn / LOG2) / LOG2
    it = count + 1 - nu
    if not math.isfinite(it):
        return None
    return it


def color_for(count, m, max_iter, palette):
    """
    Color for one evaluated point.

    Points that did not escape get the reserved final palette entry.
    Escaped points are colored by blending the two palette entries around
    their smooth iteration count; if that count is undefined the entry at
    the integer count is used instead.
    """
    if count >= max_iter:
        return palette_color(palette, max_iter)
    it = smooth_iteration(count, m)
    if it is None:
        return palette_color(palette, count)
    last = max_iter - 1
    base = math.floor(it)
    lo = min(max(base, 0), last)
    hi = min(max(base + 1, 0), last)
    return interpolate(palette[lo], palette[hi], it - base)
