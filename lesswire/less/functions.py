import math
import urllib.parse
from lesswire.less.errors import LessCompileError
from lesswire.less.values import Dimension, Color, Quoted, Keyword, Url

available = {}
""":type: dict[str, callable]"""


# noinspection PyPep8Naming
class register:
    """
    Decorator to add a function to the builtin functions available to stylesheets.
    """
    def __init__(self, name=None):
        """
        :param name: Name stylesheets call the function by, if None, the name of the function is used.
        :type name: str | None
        """
        self.name = name

    def __call__(self, func):
        global available
        available[self.name or func.__name__.rstrip('_')] = func
        return func


def _color(value, func):
    if not isinstance(value, Color):
        raise LessCompileError('Argument to {0}() must be a color, got \'{1}\''.format(func, value.to_css()))
    return value


def _number(value, func):
    if not isinstance(value, Dimension):
        raise LessCompileError('Argument to {0}() must be a number, got \'{1}\''.format(func, value.to_css()))
    return value


def _amount(value, func):
    """
    Amount argument as a fraction, e.g. 10% and 10 both mean 0.1.
    """
    return _number(value, func).value / 100.0


def _channel(value, func):
    number = _number(value, func)
    return number.value * 2.55 if number.unit == '%' else number.value


def _ratio(value, func):
    number = _number(value, func)
    return number.value / 100.0 if number.unit == '%' or number.value > 1 else number.value


def _alpha(value, func):
    number = _number(value, func)
    return number.value / 100.0 if number.unit == '%' else number.value


def _bool(value):
    return Keyword('true' if value else 'false')


def _hsl_adjust(color, func, h=0.0, s=0.0, l=0.0):
    hue, saturation, lightness, alpha = _color(color, func).to_hsl()
    return Color.from_hsl(hue + h, min(max(saturation + s, 0.0), 1.0), min(max(lightness + l, 0.0), 1.0), alpha)


# Color definition

@register()
def rgb(r, g, b):
    return Color([_channel(r, 'rgb'), _channel(g, 'rgb'), _channel(b, 'rgb')])


@register()
def rgba(r, g, b=None, a=None):
    if isinstance(r, Color) and b is None:
        return Color(r.rgb, _alpha(g, 'rgba'))
    if b is None or a is None:
        raise LessCompileError('rgba() expects four arguments')
    return Color([_channel(r, 'rgba'), _channel(g, 'rgba'), _channel(b, 'rgba')], _alpha(a, 'rgba'))


@register()
def hsl(h, s, l):
    return Color.from_hsl(_number(h, 'hsl').value, _ratio(s, 'hsl'), _ratio(l, 'hsl'))


@register()
def hsla(h, s, l, a):
    return Color.from_hsl(_number(h, 'hsla').value, _ratio(s, 'hsla'), _ratio(l, 'hsla'), _alpha(a, 'hsla'))


# Color channels

@register()
def red(color):
    return Dimension(_color(color, 'red').rgb[0])


@register()
def green(color):
    return Dimension(_color(color, 'green').rgb[1])


@register()
def blue(color):
    return Dimension(_color(color, 'blue').rgb[2])


@register()
def alpha(color):
    # alpha(opacity=50) is an old IE filter, pass it through as CSS.
    if not isinstance(color, Color):
        return None
    return Dimension(color.alpha)


@register()
def hue(color):
    return Dimension(round(_color(color, 'hue').to_hsl()[0]))


@register()
def saturation(color):
    return Dimension(round(_color(color, 'saturation').to_hsl()[1] * 100), '%')


@register()
def lightness(color):
    return Dimension(round(_color(color, 'lightness').to_hsl()[2] * 100), '%')


@register()
def luma(color):
    return Dimension(round(_color(color, 'luma').luma() * 100, 8), '%')


# Color operations

@register()
def lighten(color, amount):
    return _hsl_adjust(color, 'lighten', l=_amount(amount, 'lighten'))


@register()
def darken(color, amount):
    return _hsl_adjust(color, 'darken', l=-_amount(amount, 'darken'))


@register()
def saturate(color, amount):
    return _hsl_adjust(color, 'saturate', s=_amount(amount, 'saturate'))


@register()
def desaturate(color, amount):
    return _hsl_adjust(color, 'desaturate', s=-_amount(amount, 'desaturate'))


@register()
def spin(color, angle):
    return _hsl_adjust(color, 'spin', h=_number(angle, 'spin').value)


@register()
def fadein(color, amount):
    color = _color(color, 'fadein')
    return Color(color.rgb, min(max(color.alpha + _amount(amount, 'fadein'), 0.0), 1.0))


@register()
def fadeout(color, amount):
    color = _color(color, 'fadeout')
    return Color(color.rgb, min(max(color.alpha - _amount(amount, 'fadeout'), 0.0), 1.0))


@register()
def fade(color, amount):
    color = _color(color, 'fade')
    return Color(color.rgb, min(max(_amount(amount, 'fade'), 0.0), 1.0))


@register()
def mix(color1, color2, weight=None):
    color1 = _color(color1, 'mix')
    color2 = _color(color2, 'mix')
    p = _amount(weight, 'mix') if weight is not None else 0.5
    w = p * 2 - 1
    a = color1.alpha - color2.alpha
    w1 = ((w if w * a == -1 else (w + a) / (1 + w * a)) + 1) / 2.0
    w2 = 1 - w1
    rgb = [c1 * w1 + c2 * w2 for c1, c2 in zip(color1.rgb, color2.rgb)]
    return Color(rgb, color1.alpha * p + color2.alpha * (1 - p))


@register()
def tint(color, amount=None):
    return mix(Color([255, 255, 255]), _color(color, 'tint'), amount)


@register()
def shade(color, amount=None):
    return mix(Color([0, 0, 0]), _color(color, 'shade'), amount)


@register()
def greyscale(color):
    return _hsl_adjust(color, 'greyscale', s=-1.0)


@register()
def contrast(color, dark=None, light=None, threshold=None):
    # contrast() of a non color is most likely the CSS filter function.
    if not isinstance(color, Color):
        return None
    dark = _color(dark, 'contrast') if dark is not None else Color([0, 0, 0])
    light = _color(light, 'contrast') if light is not None else Color([255, 255, 255])
    if dark.luma() > light.luma():
        dark, light = light, dark
    limit = _amount(threshold, 'contrast') if threshold is not None else 0.43
    return light if color.luma() < limit else dark


# Math

def _math(value, func, operation):
    number = _number(value, func)
    return Dimension(operation(number.value), number.unit)


@register()
def percentage(value):
    return Dimension(_number(value, 'percentage').value * 100, '%')


@register(name='round')
def round_(value, places=None):
    digits = int(_number(places, 'round').value) if places is not None else 0
    # Round half away from zero, the way browsers and less.js do.
    factor = 10 ** digits
    return _math(value, 'round', lambda v: math.floor(abs(v) * factor + 0.5) / factor * (1 if v >= 0 else -1))


@register()
def ceil(value):
    return _math(value, 'ceil', math.ceil)


@register()
def floor(value):
    return _math(value, 'floor', math.floor)


@register()
def sqrt(value):
    return _math(value, 'sqrt', math.sqrt)


@register(name='abs')
def abs_(value):
    return _math(value, 'abs', abs)


@register(name='pow')
def pow_(base, exponent):
    return _math(base, 'pow', lambda v: v ** _number(exponent, 'pow').value)


@register()
def mod(value, divisor):
    divisor = _number(divisor, 'mod').value
    if divisor == 0:
        raise LessCompileError('Division by zero in mod()')
    return _math(value, 'mod', lambda v: math.fmod(v, divisor))


def _extreme(values, func, pick):
    if not values:
        raise LessCompileError('{0}() expects at least one argument'.format(func))
    best = _number(values[0], func)
    for value in values[1:]:
        order = best.compare(_number(value, func))
        # Mixed units like min(10px, 5vw) are left for the browser.
        if order is None:
            return None
        if order == pick:
            best = value
    return best


@register(name='min')
def min_(*values):
    return _extreme(values, 'min', 1)


@register(name='max')
def max_(*values):
    return _extreme(values, 'max', -1)


@register()
def unit(value, unit_=None):
    number = _number(value, 'unit')
    return Dimension(number.value, unit_.to_css() if unit_ is not None else '')


# Strings

def _text(value):
    return value.text if isinstance(value, (Quoted, Keyword)) else value.to_css()


@register()
def e(value):
    return Keyword(_text(value))


@register()
def escape(value):
    return Keyword(urllib.parse.quote(_text(value), safe=',/?@&+\'~!$'))


# Type checking

@register()
def iscolor(value):
    return _bool(isinstance(value, Color))


@register()
def isnumber(value):
    return _bool(isinstance(value, Dimension))


@register()
def isstring(value):
    return _bool(isinstance(value, Quoted))


@register()
def iskeyword(value):
    return _bool(isinstance(value, Keyword))


@register()
def isurl(value):
    return _bool(isinstance(value, Url))


@register()
def ispixel(value):
    return _bool(isinstance(value, Dimension) and value.unit == 'px')


@register()
def ispercentage(value):
    return _bool(isinstance(value, Dimension) and value.unit == '%')


@register()
def isem(value):
    return _bool(isinstance(value, Dimension) and value.unit == 'em')


@register()
def isunit(value, unit_):
    return _bool(isinstance(value, Dimension) and value.unit == _text(unit_))
