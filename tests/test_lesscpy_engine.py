import os
import pytest
from lesswire.less import get_engine, Parser
from lesswire.less import lesscpy_engine
from lesswire.less.lesscpy_engine import LesscpyParser
from lesswire.less.errors import LessError, LessSyntaxError


def _write(path, text):
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write(text)
    return path


def test_get_engine():
    assert get_engine('builtin') is Parser
    assert get_engine('lesscpy') is LesscpyParser
    with pytest.raises(LessError):
        get_engine('nope')


def test_parse_file(temp_dir):
    path = _write(os.path.join(temp_dir, 'a.less'), '@w: 10px;\na { b { width: @w; } }\n')
    parser = LesscpyParser().parse_file(path)
    css = parser.get_css()
    assert 'a b' in css
    assert 'width: 10px' in css
    assert parser.all_parsed_files() == [path]


def test_compress(temp_dir):
    path = _write(os.path.join(temp_dir, 'a.less'), 'a { b { width: 10px; } }\n')
    css = LesscpyParser({'compress': True}).parse_file(path).get_css()
    assert 'width:10px' in css
    assert '\n' not in css.strip()


def test_parse_text():
    css = LesscpyParser().parse('a { width: 10px; }').get_css()
    assert 'width: 10px' in css


def test_reset(temp_dir):
    path = _write(os.path.join(temp_dir, 'a.less'), 'a { width: 10px; }\n')
    parser = LesscpyParser().parse_file(path)
    parser.reset()
    assert parser.get_css() == ''
    assert parser.all_parsed_files() == []


def test_modify_vars():
    parser = LesscpyParser()
    assert parser.modify_vars({}) is parser
    with pytest.raises(LessError):
        parser.modify_vars({'a': '1px'})


def test_errors_are_wrapped(monkeypatch, temp_dir):
    class FailingParser:
        def __init__(self, **kwargs):
            pass

        def parse(self, **kwargs):
            raise ValueError('bad input')

    monkeypatch.setattr(lesscpy_engine.parser, 'LessParser', FailingParser)
    path = _write(os.path.join(temp_dir, 'a.less'), 'a { width: 10px; }\n')
    with pytest.raises(LessSyntaxError) as e:
        LesscpyParser().parse_file(path)
    assert e.value.filename == path
    assert 'bad input' in e.value.message
