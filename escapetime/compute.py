"""
Escape-time evaluation for the quadratic family, plain and JIT-compiled.

This module contains:
- The reference evaluator, written on Complex values
- Numba JIT kernels for one point and for a whole tile
- The pixel -> complex plane mapping shared by both

Supported iteration policies:
- 0: z² + c (standard Mandelbrot)
- 1: (|Re z| + i|Im z|)² + c (Burning Ship)

The policy is always chosen explicitly by the caller; the two are never
mixed within one render.
"""

import numpy as np
from numba import jit

from .complex_math import Complex, ZERO, add, multiply, squared_magnitude
from .errors import InvalidIterationPolicy


# Policy IDs
FUNC_MANDELBROT = 0     # z² + c
FUNC_BURNING_SHIP = 1   # (|zr| + i|zi|)² + c

ITERATION_POLICIES = {
    'mandelbrot': FUNC_MANDELBROT,
    'burning_ship': FUNC_BURNING_SHIP,
}

# |z|² past which the orbit is known to diverge (escape radius 2)
ESCAPE_THRESHOLD = 4.0


def get_policy(policy):
    """
    Resolve an iteration policy given by name or by id.

    Raises:
        InvalidIterationPolicy for anything that is not a known policy
    """
    if isinstance(policy, str):
        try:
            return ITERATION_POLICIES[policy.lower()]
        except KeyError:
            pass
    elif isinstance(policy, int) and not isinstance(policy, bool):
        if policy in ITERATION_POLICIES.values():
            return policy
    names = ', '.join(sorted(ITERATION_POLICIES))
    raise InvalidIterationPolicy(f"Unknown iteration policy {policy!r} (expected one of: {names})")


def policy_name(func_id):
    for name, value in ITERATION_POLICIES.items():
        if value == func_id:
            return name
    raise InvalidIterationPolicy(f"Unknown iteration policy {func_id!r}")


def pixel_to_complex(px, py, x_min, y_min, xf, yf):
    """Map pixel (px, py) to the point c it samples in the complex plane."""
    return Complex(x_min + px * xf, y_min + py * yf)


def iterate(z, c, func_id=FUNC_MANDELBROT):
    """Apply one step of the selected map to z."""
    if func_id == FUNC_BURNING_SHIP:
        z = z.abs_components()
    return add(multiply(z, z), c)


def escape_time(c, max_iter, func_id=FUNC_MANDELBROT):
    """
    Iterate from z = 0 until |z|² reaches the threshold or max_iter steps pass.

    Args:
        c: Complex point being tested
        max_iter: Positive iteration budget
        func_id: Iteration policy (FUNC_MANDELBROT or FUNC_BURNING_SHIP)

    Returns:
        (count, m): number of steps taken and the final |z|².
        count == max_iter means the point is presumed to be in the set.
    """
    z = ZERO
    count = 0
    m = 0.0
    while m < ESCAPE_THRESHOLD and count < max_iter:
        z = iterate(z, c, func_id)
        count += 1
        m = squared_magnitude(z)
    return count, m


@jit(nopython=True, cache=True)
def escape_time_jit(cr, ci, max_iter, func_id):
    """
    Float-only twin of escape_time for use inside JIT kernels.

    The arithmetic follows complex_math operation for operation so both
    evaluators agree exactly.
    """
    zr = 0.0
    zi = 0.0
    count = 0
    m = 0.0
    while m < ESCAPE_THRESHOLD and count < max_iter:
        if func_id == FUNC_BURNING_SHIP:
            zr = abs(zr)
            zi = abs(zi)
        sr = zr * zr - zi * zi
        si = zr * zi + zi * zr
        zr = sr + cr
        zi = si + ci
        count += 1
        m = zr * zr + zi * zi
    return count, m


@jit(nopython=True, cache=True)
def compute_tile(x_min, y_min, xf, yf, start_x, start_y, tile_w, tile_h,
                 max_iter, func_id, supersample):
    """
    Evaluate every sample of one tile.

    With supersample == 1 each pixel is sampled at its top-left corner,
    matching pixel_to_complex. With supersample == s each pixel gets an
    s x s grid of samples centred on that corner.

    Args:
        x_min, y_min: Complex plane point of pixel (0, 0)
        xf, yf: Complex plane units per pixel
        start_x, start_y: Top-left pixel of the tile
        tile_w, tile_h: Tile size in pixels (already clipped to the surface)
        max_iter: Iteration budget
        func_id: Iteration policy
        supersample: Samples per pixel along each axis

    Returns:
        (counts, magnitudes): arrays of shape (tile_h * s, tile_w * s)
    """
    s = supersample
    counts = np.zeros((tile_h * s, tile_w * s), dtype=np.int64)
    magnitudes = np.zeros((tile_h * s, tile_w * s), dtype=np.float64)
    for row in range(tile_h * s):
        py = start_y + row // s
        if s == 1:
            ci = y_min + py * yf
        else:
            ci = y_min + (py + ((row % s) + 0.5) / s - 0.5) * yf
        for col in range(tile_w * s):
            px = start_x + col // s
            if s == 1:
                cr = x_min + px * xf
            else:
                cr = x_min + (px + ((col % s) + 0.5) / s - 0.5) * xf
            count, m = escape_time_jit(cr, ci, max_iter, func_id)
            counts[row, col] = count
            magnitudes[row, col] = m
    return counts, magnitudes


def compute_tile_python(x_min, y_min, xf, yf, start_x, start_y, tile_w, tile_h,
                        max_iter, func_id, supersample):
    """Same contract as compute_tile, using the reference evaluator."""
    s = supersample
    counts = np.zeros((tile_h * s, tile_w * s), dtype=np.int64)
    magnitudes = np.zeros((tile_h * s, tile_w * s), dtype=np.float64)
    for row in range(tile_h * s):
        py = start_y + row // s
        for col in range(tile_w * s):
            px = start_x + col // s
            if s == 1:
                c = pixel_to_complex(px, py, x_min, y_min, xf, yf)
            else:
                c = Complex(x_min + (px + ((col % s) + 0.5) / s - 0.5) * xf,
                            y_min + (py + ((row % s) + 0.5) / s - 0.5) * yf)
            counts[row, col], magnitudes[row, col] = escape_time(c, max_iter, func_id)
    return counts, magnitudes


def warmup_jit():
    """
    Warm up JIT compilation with a tiny tile.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real tile.
    """
    compute_tile(-2.0, -1.0, 0.1, 0.1, 0, 0, 2, 2, 10, FUNC_MANDELBROT, 1)
