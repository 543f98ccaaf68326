"""
test_colormaps.py
"""
import math

import numpy as np
import pytest

from escapetime.colormaps import (
    DEFAULT_END,
    DEFAULT_START,
    PALETTES,
    color_for,
    create_palette_hex,
    create_palette_sine,
    get_palette,
    list_palette_names,
    palette_color,
    smooth_iteration,
)
from escapetime.colors import BLACK, Color
from escapetime.errors import InvalidIterationBound, InvalidPalette


@pytest.mark.parametrize('name', sorted(PALETTES))
@pytest.mark.parametrize('max_iter', [1, 2, 3, 17, 256])
def test_palette_length_and_black_tail(name, max_iter):
    palette = get_palette(name, max_iter)
    assert palette.shape == (max_iter + 1, 3)
    assert palette.dtype == np.uint8
    assert palette_color(palette, max_iter) == BLACK


@pytest.mark.parametrize('name', sorted(PALETTES))
def test_palette_is_deterministic(name):
    np.testing.assert_array_equal(get_palette(name, 64), get_palette(name, 64))


def test_palette_is_read_only():
    palette = create_palette_sine(8)
    with pytest.raises(ValueError):
        palette[0] = (1, 2, 3)


@pytest.mark.parametrize('bad', [0, -5, 2.5, None, True])
def test_palette_rejects_bad_max_iter(bad):
    with pytest.raises(InvalidIterationBound):
        create_palette_sine(bad)


def test_unknown_palette_name():
    with pytest.raises(InvalidPalette):
        get_palette('Neon', 10)


def test_list_palette_names():
    assert list_palette_names() == list(PALETTES)


def test_sine_palette_eases_between_anchors():
    palette = create_palette_sine(3)
    assert palette_color(palette, 0) == DEFAULT_START
    assert palette_color(palette, 2) == DEFAULT_END


def test_sine_palette_single_iteration():
    palette = create_palette_sine(1)
    assert palette_color(palette, 0) == DEFAULT_START


def test_sine_palette_custom_anchors():
    palette = create_palette_sine(3, start='#000000', end='#ffffff')
    assert palette_color(palette, 0) == BLACK
    assert palette_color(palette, 2) == Color(255, 255, 255)


def test_hex_palette_fills_color_space():
    assert palette_color(create_palette_hex(2), 1) == Color(128, 0, 0)
    palette = create_palette_hex(256)
    assert palette_color(palette, 0) == BLACK
    assert palette_color(palette, 1) == Color(1, 0, 0)
    assert palette_color(palette, 255) == Color(255, 0, 0)


def test_smooth_iteration_at_known_magnitude():
    # |z| = 4: log2(log2(4)) == 1, so the smooth count equals the integer count
    assert smooth_iteration(5, 16.0) == pytest.approx(5.0)


@pytest.mark.parametrize('m', [0.0, 0.5, 1.0, -2.0, float('inf'), float('nan')])
def test_smooth_iteration_undefined(m):
    assert smooth_iteration(3, m) is None


def test_in_set_point_is_black():
    palette = create_palette_sine(20)
    assert color_for(20, 0.5, 20, palette) == BLACK


def test_undefined_smoothing_falls_back_to_integer_count():
    palette = create_palette_hex(4)
    assert color_for(2, 0.5, 4, palette) == palette_color(palette, 2)
    assert color_for(2, float('nan'), 4, palette) == palette_color(palette, 2)


def test_smooth_color_at_exact_count():
    palette = create_palette_sine(10)
    assert color_for(1, 16.0, 10, palette) == palette_color(palette, 1)


def test_escaped_point_never_gets_in_set_color():
    palette = create_palette_sine(5)
    color = color_for(4, 4.5, 5, palette)
    assert color == palette_color(palette, 4)
    assert color != BLACK


def test_negative_smooth_count_clamps_to_first_entry():
    palette = create_palette_sine(10)
    assert color_for(0, 1e300, 10, palette) == palette_color(palette, 0)


@pytest.mark.parametrize('m', [1.0 + 1e-12, 1.5, 4.0, 4.0001, 1e10, 1e308, float('inf')])
@pytest.mark.parametrize('count', [0, 1, 8, 9])
def test_color_for_always_returns_valid_color(count, m):
    palette = create_palette_sine(10)
    color = color_for(count, m, 10, palette)
    assert all(isinstance(ch, int) and 0 <= ch <= 255 for ch in color)
    it = smooth_iteration(count, m)
    assert it is None or not math.isnan(it)
