import os
import json
import pytest
from lesswire import modules
from lesswire.app import App, AppError, InvalidAppRoot
from lesswire.app.config import DEFAULT_SETTINGS, merge_settings, load_settings
from lesswire.modules.adminstyle import AdminStyle


@modules.register()
class CustomStyle(AdminStyle, modules.Module):
    summary = 'Test style'

    def get_style_vars(self):
        return {'primary': 'red'}


def _write_settings(app_root, settings):
    with open(os.path.join(app_root, App.CONFIG_NAME), 'w', encoding='utf-8') as fh:
        fh.write(settings if isinstance(settings, str) else json.dumps(settings))


def test_merge_settings():
    target = {'a': {'b': 1, 'c': 2}, 'l': [1], 'o': {'x': 1}, 'r': [1]}
    merge_settings(target, {'a': {'c': 3}, 'l': [2], 'o!': {'y': 2}, 'r!': [2], 'n': None})
    assert target == {'a': {'b': 1, 'c': 3}, 'l': [1, 2], 'o': {'y': 2}, 'r': [2], 'n': None}


def test_load_settings(temp_dir):
    path = os.path.join(temp_dir, 'settings.json')
    with open(path, 'w', encoding='utf-8') as fh:
        json.dump({'debug': True, 'admin_style': {'style': 'a.less'}}, fh)
    settings = load_settings(path)
    assert settings['debug']
    assert settings['admin_style'] == {'style': 'a.less', 'template': 'admin', 'vars': {}}
    assert settings['paths'] == DEFAULT_SETTINGS['paths']
    assert DEFAULT_SETTINGS['admin_style']['style'] is None


def test_load_settings_not_an_object(temp_dir):
    path = os.path.join(temp_dir, 'settings.json')
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write('[]')
    with pytest.raises(ValueError):
        load_settings(path)


def test_app(app, temp_dir):
    assert app.is_valid
    assert app.root == os.path.join(temp_dir, 'test_app')
    assert app.assets_root == os.path.join(app.root, 'assets')
    assert os.path.isfile(os.path.join(app.log_root, 'app.log'))
    assert app.settings == DEFAULT_SETTINGS
    assert sorted(app.module_classes) == ['AdminStyle', 'AdminTheme', 'Less']


def test_invalid_root(temp_dir):
    with pytest.raises(InvalidAppRoot):
        App(os.path.join(temp_dir, 'missing'))
    with pytest.raises(InvalidAppRoot):
        App(temp_dir)


def test_no_root(monkeypatch, temp_dir):
    monkeypatch.chdir(temp_dir)
    app = App()
    assert not app.is_valid
    assert app.settings == DEFAULT_SETTINGS


def test_malformed_settings(app):
    _write_settings(app.root, '{"debug": ')
    with pytest.raises(AppError):
        App(app.root)


def test_assets_path_setting(app):
    _write_settings(app.root, {'paths': {'assets': 'public/css'}})
    assert App(app.root).assets_root == os.path.join(app.root, 'public', 'css')


def test_create(temp_dir):
    app = App.create(os.path.join(temp_dir, 'new_app'))
    assert app.is_valid
    assert os.path.isdir(app.log_root)
    assert os.path.isdir(app.assets_root)


def test_get_module(app):
    assert app.get_module('AdminStyle') is app.get_module('AdminStyle')
    with pytest.raises(AppError):
        app.get_module('Missing')


def test_builtin_modules_load_by_name(app):
    assert sorted(name for name in app.module_classes if name in ('Less', 'AdminStyle', 'AdminTheme')) == \
        ['AdminStyle', 'AdminTheme', 'Less']
    assert app.get_module('Less').get_css() == ''


def test_load_module(app):
    with pytest.raises(AppError):
        app.load_module('lesswire.modules.missing')

    app.load_module(__name__)
    style = app.get_module('CustomStyle')
    assert isinstance(style, CustomStyle)
    assert style.get_style_vars() == {'primary': 'red'}


def test_modules_setting(app):
    _write_settings(app.root, {'modules': [__name__]})
    assert 'CustomStyle' in App(app.root).module_classes
