import os
import pytest
from lesswire.less.lessc import Lessc
from lesswire.less.errors import LessError


def test_compile():
    assert Lessc().compile('.a { .b { c: d; } }') == '.a .b {\n  c: d;\n}\n'


def test_formatter():
    lessc = Lessc()
    lessc.set_formatter('compressed')
    assert lessc.compile('.a { .b { c: d; } }') == '.a .b{c:d}'
    lessc.set_formatter('classic')
    assert lessc.compile('.a { .b { c: d; } }') == '.a .b {\n  c: d;\n}\n'
    with pytest.raises(ValueError):
        lessc.set_formatter('bogus')


def test_variables():
    lessc = Lessc()
    lessc.set_variables({'color': 'red'})
    assert lessc.compile('@color: blue;\n.a { color: @color; }') == '.a {\n  color: red;\n}\n'
    lessc.unset_variable('@color')
    assert lessc.compile('@color: blue;\n.a { color: @color; }') == '.a {\n  color: blue;\n}\n'


def test_compile_errors_name_the_source():
    with pytest.raises(LessError) as e:
        Lessc().compile('.a { color: @nope; }', 'inline.less')
    assert e.value.filename == 'inline.less'


def test_compile_file(resources, temp_dir):
    out = os.path.join(temp_dir, 'main.css')
    written = Lessc().compile_file(resources.path('styles', 'main.less'), out)
    with open(out, encoding='utf-8') as fh:
        css = fh.read()
    assert css == '.box {\n  padding: 10px;\n  border: 2px solid #ff0000;\n}\n'
    assert written == len(css)
    assert Lessc().compile_file(resources.path('styles', 'main.less')) == css


def test_checked_compile(resources, temp_dir):
    source = os.path.join(temp_dir, 'a.less')
    resources.copy(os.path.join('styles', 'flat.css'), source)
    out = os.path.join(temp_dir, 'a.css')
    lessc = Lessc()

    assert lessc.checked_compile(source, out)
    mtime = os.path.getmtime(source)
    os.utime(out, (mtime + 10, mtime + 10))
    assert not lessc.checked_compile(source, out)
    os.utime(out, (mtime - 10, mtime - 10))
    assert lessc.checked_compile(source, out)


def test_import_dirs(resources):
    lessc = Lessc()
    lessc.set_import_dir(resources.path('styles'))
    lessc.add_import_dir(resources.path('styles', 'lib'))
    assert lessc.import_dirs == [resources.path('styles'), resources.path('styles', 'lib')]
    css = lessc.compile('@import "vars";\n@import "theme";\n.a { color: @brand; b: @theme-color; }')
    assert css == '.a {\n  color: #ff0000;\n  b: #0000ff;\n}\n'
