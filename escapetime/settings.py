"""
Render settings loaded from settings.json.

The JSON file shipped next to this module holds the defaults used by the
viewer and by TileScheduler when no explicit values are given. A user
file can override any subset of the keys.
"""

import copy
import json
import logging
import os


logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

# Fallback when settings.json itself is missing or broken
DEFAULT_SETTINGS = {
    'max_iter': 200,
    'bounds': [-2.5, 1.0, -1.25, 1.25],  # x_min, x_max, y_min, y_max
    'palette': 'Sine',
    'policy': 'mandelbrot',
    'backend': 'jit',
    'supersample': 1,
    'tile_divisions': [40, 20],  # tiles per row, tile rows per surface
    'tiles_per_frame': 8,
    'window': [800, 600],
}


def _read_json(path):
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load settings from %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring settings in %s: expected a JSON object", path)
        return None
    return data


def load_settings(path=None):
    """
    Load settings, layering a JSON file over the defaults.

    Args:
        path: Settings file to read (default: the packaged settings.json)

    Returns:
        dict with every key of DEFAULT_SETTINGS. Unknown keys in the file
        are ignored; unreadable files fall back to the defaults.
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    sources = [SETTINGS_PATH]
    if path is not None and os.path.abspath(path) != SETTINGS_PATH:
        sources.append(path)
    for source in sources:
        data = _read_json(source)
        if not data:
            continue
        for key, value in data.items():
            if key in settings:
                settings[key] = value
            else:
                logger.debug("Ignoring unknown setting %r in %s", key, source)
    return settings
