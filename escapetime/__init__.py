"""
Incremental escape-time fractal renderer

Renders the Mandelbrot set (and the Burning Ship variant) onto any
surface that can clear and fill rectangles, one tile at a time, so a
slow render never blocks the host. Numba compiles the per-tile kernel;
pygame hosts the optional viewer.

Quick Start:
    from escapetime import TileScheduler, ArraySurface
    surface = ArraySurface(400, 300)
    scheduler = TileScheduler(surface)
    scheduler.start(200, -2.5, 1.0, -1.25, 1.25)
    while scheduler.tick():
        pass

Or open the viewer from the command line:
    python -m escapetime

Package Structure:
    - complex_math.py: Immutable complex value type
    - compute.py: Escape-time evaluator and JIT tile kernel
    - colors.py: RGB colors, hex interchange, interpolation
    - colormaps.py: Palette definitions and smooth coloring
    - renderer.py: Tiled render scheduler and render handles
    - surface.py: numpy and pygame drawing surfaces
    - settings.py: Defaults loaded from settings.json
    - app.py: pygame viewer
"""

from .colormaps import PALETTES, color_for, get_palette, list_palette_names
from .colors import BLACK, Color, interpolate, parse_hex, to_hex
from .complex_math import Complex
from .compute import FUNC_BURNING_SHIP, FUNC_MANDELBROT, escape_time
from .errors import (
    InvalidColor,
    InvalidIterationBound,
    InvalidIterationPolicy,
    InvalidPalette,
    InvalidRegion,
    InvalidSupersample,
    InvalidSurface,
    RenderError,
)
from .renderer import RenderHandle, SessionState, TileScheduler, render, render_to_array
from .settings import load_settings
from .surface import ArraySurface, PygameSurface

__version__ = "1.0.0"
__all__ = [
    "ArraySurface",
    "BLACK",
    "Color",
    "Complex",
    "FUNC_BURNING_SHIP",
    "FUNC_MANDELBROT",
    "InvalidColor",
    "InvalidIterationBound",
    "InvalidIterationPolicy",
    "InvalidPalette",
    "InvalidRegion",
    "InvalidSupersample",
    "InvalidSurface",
    "PALETTES",
    "PygameSurface",
    "RenderError",
    "RenderHandle",
    "SessionState",
    "TileScheduler",
    "color_for",
    "escape_time",
    "get_palette",
    "interpolate",
    "list_palette_names",
    "load_settings",
    "parse_hex",
    "render",
    "render_to_array",
    "to_hex",
]
