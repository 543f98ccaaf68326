"""
test_settings.py
"""
import json
import logging

from escapetime.settings import DEFAULT_SETTINGS, load_settings


def test_packaged_settings_have_every_key():
    settings = load_settings()
    assert set(settings) == set(DEFAULT_SETTINGS)
    assert settings['policy'] in ('mandelbrot', 'burning_ship')


def test_user_file_overrides_defaults(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'max_iter': 999, 'palette': 'Hex', 'colour': 'blue'}))
    settings = load_settings(str(path))
    assert settings['max_iter'] == 999
    assert settings['palette'] == 'Hex'
    assert 'colour' not in settings
    assert settings['tile_divisions'] == load_settings()['tile_divisions']


def test_broken_file_falls_back_with_warning(tmp_path, caplog):
    path = tmp_path / 'settings.json'
    path.write_text('{not json')
    with caplog.at_level(logging.WARNING, logger='escapetime.settings'):
        settings = load_settings(str(path))
    assert settings == load_settings()
    assert 'Could not load settings' in caplog.text


def test_missing_file_falls_back(tmp_path):
    assert load_settings(str(tmp_path / 'nope.json')) == load_settings()


def test_non_object_json_is_ignored(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('[1, 2, 3]')
    assert load_settings(str(path)) == load_settings()


def test_defaults_are_not_shared():
    settings = load_settings()
    settings['bounds'].append(42)
    assert load_settings()['bounds'] == DEFAULT_SETTINGS['bounds']
