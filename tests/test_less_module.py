import os
import pytest
from lesswire.less import LessError, LessSyntaxError, Parser
from lesswire.less.lessc import Lessc
from lesswire.less.lesscpy_engine import LesscpyParser

MAIN_CSS = '.box {\n  padding: 10px;\n  border: 2px solid #ff0000;\n}\n'


def test_not_singular(app):
    assert app.get_module('Less') is not app.get_module('Less')


def test_options(app):
    less = app.get_module('Less')
    assert less.get_options() == {'compress': False, 'engine': 'builtin'}
    less.set_option('compress', True)
    less.set_options({'math': 'always'})
    assert less.get_options() == {'compress': True, 'engine': 'builtin', 'math': 'always'}
    less.set_options({'compress': False}, reset=True)
    assert less.get_options() == {'compress': False}


def test_options_from_settings(resources, temp_dir):
    from lesswire.app import App

    root = os.path.join(temp_dir, 'app')
    resources.copy('app_new', root)
    with open(os.path.join(root, 'lesswire.json'), 'w', encoding='utf-8') as fh:
        fh.write('{"less": {"compress": true}}')
    less = App(root).get_module('Less')
    assert less.get_options() == {'compress': True, 'engine': 'builtin'}


def test_parser_instance(app):
    less = app.get_module('Less')
    parser = less.parser()
    assert isinstance(parser, Parser)
    assert less.parser() is parser
    assert less.parser(reset=True) is not parser

    parser = less.parser()
    assert less.parser({'compress': True}) is parser
    assert less.get_options()['compress']
    assert less.reset_parser().options['compress']


def test_engine_option(app):
    less = app.get_module('Less')
    less.set_option('engine', 'lesscpy')
    assert isinstance(less.parser(reset=True), LesscpyParser)
    less.set_option('engine', 'nope')
    with pytest.raises(LessError):
        less.reset_parser()


def test_add_files(app, resources):
    less = app.get_module('Less')
    less.add_files([resources.path('styles', 'main.less'), resources.path('styles', 'flat.css')])
    assert less.get_css() == MAIN_CSS + resources.read('styles', 'flat.css')
    assert less.parser().all_parsed_files()[0] == resources.path('styles', 'main.less')


def test_parse_errors(app, resources):
    with pytest.raises(LessSyntaxError):
        app.get_module('Less').add_file(resources.path('styles', 'broken.less'))


def test_save_css(app, resources, temp_dir):
    less = app.get_module('Less')
    less.add_file(resources.path('styles', 'main.less'))
    path = os.path.join(temp_dir, 'out', 'nested', 'main.css')
    written = less.save_css(path, replacements={'10px': '12px', 'box': 'panel'})
    with open(path, encoding='utf-8') as fh:
        css = fh.read()
    assert css == MAIN_CSS.replace('10px', '12px').replace('box', 'panel')
    assert written == len(css.encode('utf-8'))


def test_save_given_css(app, temp_dir):
    path = os.path.join(temp_dir, 'given.css')
    assert app.get_module('Less').save_css(path, css='a{b:c}') == 6
    with open(path, encoding='utf-8') as fh:
        assert fh.read() == 'a{b:c}'


def test_save_empty_css(app, resources, temp_dir):
    less = app.get_module('Less')
    path = os.path.join(temp_dir, 'empty.css')
    assert less.save_css(path) is None
    less.add_file(resources.path('styles', 'vars.less'))
    assert less.save_css(path) is None
    assert not os.path.exists(path)


def test_lessc(app):
    less = app.get_module('Less')
    lessc = less.lessc()
    assert isinstance(lessc, Lessc)
    assert less.lessc() is not lessc
