"""
test_app.py
"""
import pytest

pytest.importorskip('pygame')

from escapetime.app import FractalApp
from escapetime.errors import InvalidIterationPolicy
from escapetime.settings import DEFAULT_SETTINGS


@pytest.mark.parametrize('policy, expected', [
    ('mandelbrot', 'mandelbrot'),
    ('Burning_Ship', 'burning_ship'),
    ('MANDELBROT', 'mandelbrot'),
    (0, 'mandelbrot'),
    (1, 'burning_ship'),
])
def test_policy_setting_is_normalised(policy, expected):
    app = FractalApp(settings=dict(DEFAULT_SETTINGS, policy=policy))
    assert app.policy == expected
    # The B key cycles from this position
    assert app.policy_names[app.policy_names.index(app.policy)] == expected


def test_unknown_policy_setting_rejected():
    with pytest.raises(InvalidIterationPolicy):
        FractalApp(settings=dict(DEFAULT_SETTINGS, policy='julia'))


def test_window_and_iterations_default_from_settings():
    app = FractalApp(settings=dict(DEFAULT_SETTINGS, window=[320, 200], max_iter=77))
    assert (app.width, app.height, app.max_iter) == (320, 200, 77)
    assert app.screen is None
