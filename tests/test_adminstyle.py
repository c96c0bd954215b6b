import os
import pytest
from lesswire.modules import Module
from lesswire.modules.adminstyle import AdminStyle, AdminStyleError


class PlainStyle(AdminStyle, Module):
    pass


def _touch(path, mtime=None):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write('')
    if mtime is not None:
        os.utime(path, (mtime, mtime))


def test_not_admin_template(admin_app):
    assert admin_app.get_module('AdminStyle').load_style('styles/admin.less', 'page') is None


def test_load_style(admin_app):
    settings = admin_app.get_module('AdminStyle').load_style('styles/admin.less', 'admin')
    assert settings.style == os.path.join(admin_app.root, 'styles', 'admin.less')
    assert settings.compress
    assert settings.custom_css_file == os.path.join(admin_app.assets_root, 'admin.min.css')
    assert settings.recompile
    assert settings.vars == {'primary': '#336699'}


def test_load_style_debug(admin_app):
    admin_app.settings['debug'] = True
    settings = admin_app.get_module('AdminStyle').load_style('styles/admin.less', 'admin')
    assert not settings.compress
    assert settings.custom_css_file == os.path.join(admin_app.assets_root, 'admin.css')


def test_recompile_when_style_is_newer(admin_app):
    style = admin_app.get_module('AdminStyle')
    mtime = os.path.getmtime(os.path.join(admin_app.root, 'styles', 'admin.less'))
    compiled = style.compiled_path(True)

    _touch(compiled, mtime + 10)
    assert not style.load_style('styles/admin.less', 'admin').recompile
    os.utime(compiled, (mtime - 10, mtime - 10))
    assert style.load_style('styles/admin.less', 'admin').recompile


def test_missing_style(admin_app):
    with pytest.raises(AdminStyleError):
        admin_app.get_module('AdminStyle').load_style('styles/missing.less', 'admin')


def test_default_style_vars(admin_app):
    assert PlainStyle(admin_app).get_style_vars() == {}


def test_render(admin_app):
    settings = admin_app.get_module('AdminStyle').load_style('styles/admin.less', 'admin')
    path = admin_app.get_module('AdminTheme').render(settings)
    assert path == settings.custom_css_file
    with open(path, encoding='utf-8') as fh:
        assert fh.read() == '.header{color:#369}'

    settings = admin_app.get_module('AdminStyle').load_style('styles/admin.less', 'admin')
    assert not settings.recompile


def test_render_uncompressed(admin_app):
    admin_app.settings['debug'] = True
    admin_app.settings['admin_style']['vars'] = {}
    settings = admin_app.get_module('AdminStyle').load_style('styles/admin.less', 'admin')
    path = admin_app.get_module('AdminTheme').render(settings)
    with open(path, encoding='utf-8') as fh:
        assert fh.read() == '.header {\n  color: #000000;\n}\n'


def test_render_skips_up_to_date(admin_app):
    theme = admin_app.get_module('AdminTheme')
    assert theme.render(None) is None

    settings = admin_app.get_module('AdminStyle').load_style('styles/admin.less', 'admin')
    path = theme.render(settings._replace(recompile=False))
    assert path == settings.custom_css_file
    assert not os.path.exists(path)


def test_reset_without_files(admin_app):
    admin_app.get_module('AdminStyle').reset_admin_style()
    assert not os.path.exists(admin_app.assets_root)


def test_reset_deletes_compiled(admin_app):
    style = admin_app.get_module('AdminStyle')
    for compress in (False, True):
        _touch(style.compiled_path(compress))
    style.reset_admin_style()
    assert not os.path.exists(style.compiled_path(False))
    assert not os.path.exists(style.compiled_path(True))


@pytest.mark.parametrize('method', ['install_module', 'uninstall_module'])
def test_install_resets(admin_app, method):
    path = admin_app.get_module('AdminStyle').compiled_path(True)
    _touch(path)
    getattr(admin_app, method)('AdminStyle')
    assert not os.path.exists(path)
