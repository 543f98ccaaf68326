"""
test_surface.py
"""
import pytest

from escapetime.colors import BLACK, Color
from escapetime.renderer import TileScheduler
from escapetime.settings import DEFAULT_SETTINGS
from escapetime.surface import ArraySurface, PygameSurface, surface_size


def test_array_surface_starts_with_background():
    surface = ArraySurface(4, 3, background=(9, 8, 7))
    assert surface.pixels.shape == (3, 4, 3)
    assert surface.pixel(3, 2) == Color(9, 8, 7)


def test_array_surface_fill_and_clear():
    surface = ArraySurface(5, 5)
    surface.fill_rect(1, 1, 2, 3, Color(255, 0, 0))
    assert surface.pixel(1, 1) == Color(255, 0, 0)
    assert surface.pixel(2, 3) == Color(255, 0, 0)
    assert surface.pixel(3, 3) == BLACK
    surface.clear_rect(0, 0, 2, 2)
    assert surface.pixel(1, 1) == BLACK
    assert surface.pixel(2, 2) == Color(255, 0, 0)


def test_array_surface_clips_writes():
    surface = ArraySurface(3, 3)
    surface.fill_rect(2, 2, 10, 10, Color(1, 2, 3))
    surface.fill_rect(-5, -5, 2, 2, Color(50, 50, 50))
    assert surface.pixel(2, 2) == Color(1, 2, 3)
    assert surface.pixel(0, 0) == BLACK


def test_surface_size():
    assert surface_size(ArraySurface(7, 2)) == (7, 2)


def test_to_array_is_a_copy():
    surface = ArraySurface(2, 2)
    image = surface.to_array()
    image[0, 0] = (255, 255, 255)
    assert surface.pixel(0, 0) == BLACK


def test_pygame_surface_adapter():
    pygame = pytest.importorskip('pygame')
    canvas = pygame.Surface((6, 4))
    surface = PygameSurface(canvas)
    assert surface_size(surface) == (6, 4)
    assert (surface.width, surface.height) == (6, 4)

    surface.fill_rect(1, 1, 2, 2, Color(10, 20, 30))
    assert tuple(canvas.get_at((1, 1)))[:3] == (10, 20, 30)
    surface.clear_rect(1, 1, 1, 1)
    assert tuple(canvas.get_at((1, 1)))[:3] == (0, 0, 0)
    assert tuple(canvas.get_at((2, 2)))[:3] == (10, 20, 30)


def test_render_onto_pygame_surface():
    pygame = pytest.importorskip('pygame')
    canvas = pygame.Surface((20, 10))
    settings = dict(DEFAULT_SETTINGS, backend='python')
    scheduler = TileScheduler(PygameSurface(canvas), settings)
    # Pixel (10, 5) samples c = 0, inside the set
    handle = scheduler.start(30, -2.0, 2.0, -1.0, 1.0)
    scheduler.run_until_complete()
    assert handle.done
    assert tuple(canvas.get_at((10, 5)))[:3] == (0, 0, 0)
    assert tuple(canvas.get_at((0, 0)))[:3] != (0, 0, 0)
