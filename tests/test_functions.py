import pytest
from lesswire.less import compile_less, functions
from lesswire.less.errors import LessCompileError
from lesswire.less.values import Color, Dimension, Keyword, Quoted


def _value(expression):
    css = compile_less('.a {{ v: {0}; }}'.format(expression))
    return css[len('.a {\n  v: '):-len(';\n}\n')]


@pytest.mark.parametrize('expression,expected', [
    ('rgb(255, 0, 0)', '#ff0000'),
    ('rgba(255, 0, 0, 0.5)', 'rgba(255, 0, 0, 0.5)'),
    ('hsl(120, 100%, 50%)', '#00ff00'),
    ('darken(#ffffff, 50%)', '#808080'),
    ('lighten(#000000, 100%)', '#ffffff'),
    ('spin(#ff0000, 120)', '#00ff00'),
    ('fade(#000000, 20%)', 'rgba(0, 0, 0, 0.2)'),
    ('mix(#ff0000, #0000ff)', '#800080'),
    ('greyscale(#ff0000)', '#808080'),
    ('contrast(#ffffff)', '#000000'),
    ('contrast(#000000)', '#ffffff'),
    ('red(#102030)', '16'),
    ('percentage(0.25)', '25%'),
    ('round(1.5px)', '2px'),
    ('round(3.14159, 2)', '3.14'),
    ('ceil(1.2em)', '2em'),
    ('floor(1.8em)', '1em'),
    ('min(3px, 1px, 2px)', '1px'),
    ('max(3px, 1px, 2px)', '3px'),
    ('unit(5px, em)', '5em'),
    ('unit(5px)', '5'),
    ('e("foo")', 'foo'),
    ('escape("a=1")', 'a%3D1'),
    ('iscolor(#fff)', 'true'),
    ('isnumber("a")', 'false'),
    ('ispixel(1px)', 'true'),
])
def test_builtin_functions(expression, expected):
    assert _value(expression) == expected


def test_unknown_functions_pass_through():
    assert _value('translate(10px, 20px)') == 'translate(10px, 20px)'


def test_css_filter_functions_pass_through():
    assert _value('contrast(150%)') == 'contrast(150%)'
    assert _value('alpha(opacity=50)') == 'alpha(opacity=50)'


def test_mixed_unit_min_passes_through():
    assert _value('min(10px, 5vw)') == 'min(10px, 5vw)'


def test_function_names_are_case_insensitive():
    assert _value('RGB(0, 0, 255)') == '#0000ff'


def test_argument_errors():
    with pytest.raises(LessCompileError) as e:
        functions.lighten(Keyword('x'), Dimension(10, '%'))
    assert 'lighten' in e.value.message

    with pytest.raises(LessCompileError):
        functions.mod(Dimension(1), Dimension(0))


def test_registry():
    assert functions.available['round'] is functions.round_
    assert functions.available['lighten'] is functions.lighten

    @functions.register(name='double-it')
    def double(value):
        return Dimension(value.value * 2, value.unit)

    try:
        assert _value('double-it(4px)') == '8px'
    finally:
        del functions.available['double-it']


def test_color_values():
    color = Color.from_hex('#336699')
    hue, saturation, lightness, alpha = color.to_hsl()
    assert round(hue) == 210
    assert round(saturation * 100) == 50
    assert round(lightness * 100) == 40
    assert Color.from_hsl(hue, saturation, lightness).to_hex() == '#336699'
    assert isinstance(functions.e(Quoted('x')), Keyword)
