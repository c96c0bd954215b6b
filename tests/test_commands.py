import os
import pytest
from lesswire.commands import CommandError


def test_unknown_command(app):
    with pytest.raises(CommandError):
        app.run_command('nope')


@pytest.mark.parametrize('name,args', [('create', ()), ('create', ('a', 'b')), ('compile', ()), ('reset', ('x',))])
def test_argument_count(app, name, args):
    with pytest.raises(CommandError):
        app.run_command(name, *args)


def test_create(app, temp_dir):
    path = os.path.join(temp_dir, 'created')
    assert app.run_command('create', path) == path
    assert os.path.isfile(os.path.join(path, 'lesswire.json'))
    with pytest.raises(CommandError):
        app.run_command('create', path)
    with pytest.raises(CommandError):
        app.run_command('create', os.path.join(temp_dir, 'missing', 'created'))


def test_compile(app, resources, temp_dir):
    output = os.path.join(temp_dir, 'out.css')
    written = app.run_command('compile', output, resources.path('styles', 'main.less'),
                              resources.path('styles', 'flat.css'))
    with open(output, encoding='utf-8') as fh:
        css = fh.read()
    assert written == len(css)
    assert css.startswith('.box {\n')
    assert css.endswith(resources.read('styles', 'flat.css'))


def test_compile_errors(app, resources, temp_dir):
    output = os.path.join(temp_dir, 'out.css')
    with pytest.raises(CommandError):
        app.run_command('compile', output)
    with pytest.raises(CommandError):
        app.run_command('compile', output, resources.path('styles', 'broken.less'))
    with pytest.raises(CommandError):
        app.run_command('compile', output, resources.path('styles', 'vars.less'))
    assert not os.path.exists(output)


def test_adminstyle(admin_app, capsys):
    path = admin_app.run_command('adminstyle')
    assert path == os.path.join(admin_app.assets_root, 'admin.min.css')
    assert os.path.isfile(path)
    assert capsys.readouterr().out == path + '\n'
    assert admin_app.run_command('adminstyle', 'page') is None


def test_adminstyle_errors(app, admin_app):
    with pytest.raises(CommandError):
        app.run_command('adminstyle')
    admin_app.settings['admin_style']['style'] = 'styles/missing.less'
    with pytest.raises(CommandError):
        admin_app.run_command('adminstyle')


def test_reset(admin_app):
    path = admin_app.run_command('adminstyle')
    admin_app.run_command('reset')
    assert not os.path.exists(path)


def test_install(admin_app):
    path = admin_app.run_command('adminstyle')
    admin_app.run_command('install', 'AdminStyle')
    assert not os.path.exists(path)
    with pytest.raises(CommandError):
        admin_app.run_command('uninstall', 'Missing')


def test_list_modules(app, capsys):
    app.run_command('modules')
    out = capsys.readouterr().out
    assert 'Less    LESS to CSS compiler' in out
    assert 'AdminTheme' in out


def test_list_commands(app, capsys):
    app.run_command('commands')
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == len(app.commands)
    assert lines[0].split() == ['adminstyle', '[TEMPLATE]', 'Compile', 'the', 'admin', 'style', 'if', 'it', 'is',
                                'out', 'of', 'date']
