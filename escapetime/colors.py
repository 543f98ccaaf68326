"""
RGB colors, hex interchange and linear interpolation.

Colors are kept as integer triples while rendering; the "#rrggbb" text
form is only used at the edges (settings, user input, debugging).
"""

import re
from collections import namedtuple

from .errors import InvalidColor


_HEX_RE = re.compile(r'#([0-9a-fA-F]{6})')


class Color(namedtuple('Color', ['r', 'g', 'b'])):
    """An RGB color with integer channels in [0, 255]."""

    __slots__ = ()

    def to_hex(self):
        return to_hex(self)


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)


def _clamp_channel(value):
    return max(0, min(255, value))


def parse_hex(text):
    """
    Parse a "#RRGGBB" string (either case) into a Color.

    Raises:
        InvalidColor if the text is not exactly '#' plus six hex digits
    """
    match = _HEX_RE.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        raise InvalidColor(f"Expected a color like '#rrggbb', got {text!r}")
    value = int(match.group(1), 16)
    return Color((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def to_hex(color):
    """Format a color as lowercase "#rrggbb"."""
    r, g, b = (_clamp_channel(int(c)) for c in color)
    return f"#{r:02x}{g:02x}{b:02x}"


def interpolate(c1, c2, t):
    """
    Blend two colors linearly, channel by channel.

    t is normally in [0, 1] but values slightly outside are tolerated:
    the result is extrapolated and each channel clamped into [0, 255].

    Args:
        c1, c2: Any 3-sequences of channel values (Color, tuple, array row)
        t: Blend weight, 0 gives c1 and 1 gives c2

    Returns:
        Color
    """
    channels = []
    for a, b in zip(c1, c2):
        a = int(a)
        b = int(b)
        channels.append(_clamp_channel(int(round(abs(a + t * (b - a))))))
    return Color(*channels)


def average(colors):
    """Per-channel rounded mean of a non-empty sequence of colors."""
    n = len(colors)
    r = sum(int(c[0]) for c in colors)
    g = sum(int(c[1]) for c in colors)
    b = sum(int(c[2]) for c in colors)
    return Color(int(round(r / n)), int(round(g / n)), int(round(b / n)))
