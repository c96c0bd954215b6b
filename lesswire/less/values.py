import math
from lesswire.less.errors import LessCompileError

# Factors to a base unit for each group of convertible units.
UNIT_GROUPS = {
    'length': {
        'px': 1.0,
        'cm': 96.0 / 2.54,
        'mm': 96.0 / 25.4,
        'q': 96.0 / 101.6,
        'in': 96.0,
        'pt': 96.0 / 72.0,
        'pc': 16.0,
    },
    'duration': {
        's': 1.0,
        'ms': 0.001,
    },
    'angle': {
        'turn': 1.0,
        'rad': 1.0 / (2 * math.pi),
        'deg': 1.0 / 360.0,
        'grad': 1.0 / 400.0,
    },
}

NAMED_COLORS = {
    'aliceblue': '#f0f8ff', 'antiquewhite': '#faebd7', 'aqua': '#00ffff', 'aquamarine': '#7fffd4',
    'azure': '#f0ffff', 'beige': '#f5f5dc', 'bisque': '#ffe4c4', 'black': '#000000',
    'blanchedalmond': '#ffebcd', 'blue': '#0000ff', 'blueviolet': '#8a2be2', 'brown': '#a52a2a',
    'burlywood': '#deb887', 'cadetblue': '#5f9ea0', 'chartreuse': '#7fff00', 'chocolate': '#d2691e',
    'coral': '#ff7f50', 'cornflowerblue': '#6495ed', 'cornsilk': '#fff8dc', 'crimson': '#dc143c',
    'cyan': '#00ffff', 'darkblue': '#00008b', 'darkcyan': '#008b8b', 'darkgoldenrod': '#b8860b',
    'darkgray': '#a9a9a9', 'darkgrey': '#a9a9a9', 'darkgreen': '#006400', 'darkkhaki': '#bdb76b',
    'darkmagenta': '#8b008b', 'darkolivegreen': '#556b2f', 'darkorange': '#ff8c00', 'darkorchid': '#9932cc',
    'darkred': '#8b0000', 'darksalmon': '#e9967a', 'darkseagreen': '#8fbc8f', 'darkslateblue': '#483d8b',
    'darkslategray': '#2f4f4f', 'darkslategrey': '#2f4f4f', 'darkturquoise': '#00ced1', 'darkviolet': '#9400d3',
    'deeppink': '#ff1493', 'deepskyblue': '#00bfff', 'dimgray': '#696969', 'dimgrey': '#696969',
    'dodgerblue': '#1e90ff', 'firebrick': '#b22222', 'floralwhite': '#fffaf0', 'forestgreen': '#228b22',
    'fuchsia': '#ff00ff', 'gainsboro': '#dcdcdc', 'ghostwhite': '#f8f8ff', 'gold': '#ffd700',
    'goldenrod': '#daa520', 'gray': '#808080', 'grey': '#808080', 'green': '#008000',
    'greenyellow': '#adff2f', 'honeydew': '#f0fff0', 'hotpink': '#ff69b4', 'indianred': '#cd5c5c',
    'indigo': '#4b0082', 'ivory': '#fffff0', 'khaki': '#f0e68c', 'lavender': '#e6e6fa',
    'lavenderblush': '#fff0f5', 'lawngreen': '#7cfc00', 'lemonchiffon': '#fffacd', 'lightblue': '#add8e6',
    'lightcoral': '#f08080', 'lightcyan': '#e0ffff', 'lightgoldenrodyellow': '#fafad2', 'lightgray': '#d3d3d3',
    'lightgrey': '#d3d3d3', 'lightgreen': '#90ee90', 'lightpink': '#ffb6c1', 'lightsalmon': '#ffa07a',
    'lightseagreen': '#20b2aa', 'lightskyblue': '#87cefa', 'lightslategray': '#778899',
    'lightslategrey': '#778899', 'lightsteelblue': '#b0c4de', 'lightyellow': '#ffffe0', 'lime': '#00ff00',
    'limegreen': '#32cd32', 'linen': '#faf0e6', 'magenta': '#ff00ff', 'maroon': '#800000',
    'mediumaquamarine': '#66cdaa', 'mediumblue': '#0000cd', 'mediumorchid': '#ba55d3', 'mediumpurple': '#9370d8',
    'mediumseagreen': '#3cb371', 'mediumslateblue': '#7b68ee', 'mediumspringgreen': '#00fa9a',
    'mediumturquoise': '#48d1cc', 'mediumvioletred': '#c71585', 'midnightblue': '#191970',
    'mintcream': '#f5fffa', 'mistyrose': '#ffe4e1', 'moccasin': '#ffe4b5', 'navajowhite': '#ffdead',
    'navy': '#000080', 'oldlace': '#fdf5e6', 'olive': '#808000', 'olivedrab': '#6b8e23',
    'orange': '#ffa500', 'orangered': '#ff4500', 'orchid': '#da70d6', 'palegoldenrod': '#eee8aa',
    'palegreen': '#98fb98', 'paleturquoise': '#afeeee', 'palevioletred': '#d87093', 'papayawhip': '#ffefd5',
    'peachpuff': '#ffdab9', 'peru': '#cd853f', 'pink': '#ffc0cb', 'plum': '#dda0dd',
    'powderblue': '#b0e0e6', 'purple': '#800080', 'rebeccapurple': '#663399', 'red': '#ff0000',
    'rosybrown': '#bc8f8f', 'royalblue': '#4169e1', 'saddlebrown': '#8b4513', 'salmon': '#fa8072',
    'sandybrown': '#f4a460', 'seagreen': '#2e8b57', 'seashell': '#fff5ee', 'sienna': '#a0522d',
    'silver': '#c0c0c0', 'skyblue': '#87ceeb', 'slateblue': '#6a5acd', 'slategray': '#708090',
    'slategrey': '#708090', 'snow': '#fffafa', 'springgreen': '#00ff7f', 'steelblue': '#4682b4',
    'tan': '#d2b48c', 'teal': '#008080', 'thistle': '#d8bfd8', 'tomato': '#ff6347',
    'turquoise': '#40e0d0', 'violet': '#ee82ee', 'wheat': '#f5deb3', 'white': '#ffffff',
    'whitesmoke': '#f5f5f5', 'yellow': '#ffff00', 'yellowgreen': '#9acd32',
}

HEX_DIGITS = set('0123456789abcdefABCDEF')


def format_number(value, compress=False):
    """
    Format a number the way it is written to CSS: rounded to 8 decimals, without trailing zeros.

    :type value: float
    :type compress: bool
    :rtype: str
    """
    value = round(value, 8)
    if value == int(value):
        text = str(int(value))
    else:
        text = '{0:.8f}'.format(value).rstrip('0').rstrip('.')
    if compress:
        if text.startswith('0.'):
            text = text[1:]
        elif text.startswith('-0.'):
            text = '-' + text[2:]
    return text


def unit_group(unit):
    for name, units in UNIT_GROUPS.items():
        if unit in units:
            return name
    return None


def is_hex_color(text):
    digits = text[1:]
    return text.startswith('#') and len(digits) in (3, 4, 6, 8) and all(c in HEX_DIGITS for c in digits)


class Value:
    """
    Base class for evaluated values.
    """
    def to_css(self, compress=False):
        raise NotImplementedError

    def operate(self, op, other, pos=None):
        raise LessCompileError.at('Operation on an invalid type', pos)

    def compare(self, other):
        """
        Compare to another value.

        :return: -1, 0 or 1, or None if the values are not comparable.
        :rtype: int | None
        """
        if self.to_css() == other.to_css():
            return 0
        return None

    def __str__(self):
        return self.to_css()

    def __repr__(self):
        return '{0}({1!r})'.format(self.__class__.__name__, self.to_css())


class Dimension(Value):
    def __init__(self, value, unit=''):
        self.value = float(value)
        self.unit = unit

    def to_css(self, compress=False):
        return format_number(self.value, compress) + self.unit

    def convert_to(self, unit):
        """
        Convert to another unit in the same group. Returns self when the units are not convertible.

        :type unit: str
        :rtype: Dimension
        """
        if unit == self.unit or not unit or not self.unit:
            return self
        group = unit_group(self.unit)
        if group is None or group != unit_group(unit):
            return self
        factors = UNIT_GROUPS[group]
        return Dimension(self.value * factors[self.unit] / factors[unit], unit)

    def operate(self, op, other, pos=None):
        if isinstance(other, Color):
            if op in ('+', '*'):
                return other.operate(op, self, pos)
            raise LessCompileError.at('Can\'t subtract or divide a color from a number', pos)
        if not isinstance(other, Dimension):
            raise LessCompileError.at('Operation on an invalid type', pos)

        unit = self.unit or other.unit
        right = other.convert_to(unit) if self.unit else other
        return Dimension(_apply(op, self.value, right.value, pos), unit)

    def compare(self, other):
        if not isinstance(other, Dimension):
            return None
        if self.unit and other.unit and self.unit != other.unit:
            converted = other.convert_to(self.unit)
            if converted.unit != self.unit:
                return None
            other = converted
        if self.value < other.value:
            return -1
        return 1 if self.value > other.value else 0


class Color(Value):
    def __init__(self, rgb, alpha=1.0, original=None):
        """
        :param rgb: Red, green and blue channels, 0 to 255. Not clamped until output.
        :type rgb: list[float]
        :param alpha: Alpha channel, 0 to 1.
        :type alpha: float
        :param original: Source text for a literal color, output as is.
        :type original: str | None
        """
        self.rgb = [float(c) for c in rgb]
        self.alpha = float(alpha)
        self.original = original

    @classmethod
    def from_hex(cls, text):
        digits = text[1:]
        if len(digits) in (3, 4):
            digits = ''.join(c * 2 for c in digits)
        rgb = [int(digits[i:i + 2], 16) for i in (0, 2, 4)]
        alpha = int(digits[6:8], 16) / 255.0 if len(digits) == 8 else 1.0
        return cls(rgb, alpha, original=text)

    @classmethod
    def from_keyword(cls, name):
        """
        :return: Color for a named CSS color, or None if the name is not a color.
        :rtype: Color | None
        """
        hex_value = NAMED_COLORS.get(name.lower())
        if hex_value is None:
            return None
        color = cls.from_hex(hex_value)
        color.original = name
        return color

    @classmethod
    def from_hsl(cls, h, s, l, alpha=1.0):
        h = (h % 360) / 360.0
        s = min(max(s, 0.0), 1.0)
        l = min(max(l, 0.0), 1.0)
        m2 = l * (s + 1) if l <= 0.5 else l + s - l * s
        m1 = l * 2 - m2

        def hue(x):
            x = x + 1 if x < 0 else x - 1 if x > 1 else x
            if x * 6 < 1:
                return m1 + (m2 - m1) * x * 6
            elif x * 2 < 1:
                return m2
            elif x * 3 < 2:
                return m1 + (m2 - m1) * (2.0 / 3 - x) * 6
            return m1

        return cls([hue(h + 1.0 / 3) * 255, hue(h) * 255, hue(h - 1.0 / 3) * 255], alpha)

    def to_hsl(self):
        """
        :return: Hue in degrees, saturation and lightness from 0 to 1, and alpha.
        :rtype: tuple[float, float, float, float]
        """
        r, g, b = [c / 255.0 for c in self.channels()]
        high = max(r, g, b)
        low = min(r, g, b)
        l = (high + low) / 2
        d = high - low
        if d == 0:
            return 0.0, 0.0, l, self.alpha
        s = d / (2 - high - low) if l > 0.5 else d / (high + low)
        if high == r:
            h = (g - b) / d + (6 if g < b else 0)
        elif high == g:
            h = (b - r) / d + 2
        else:
            h = (r - g) / d + 4
        return h * 60, s, l, self.alpha

    def channels(self):
        return [min(max(c, 0.0), 255.0) for c in self.rgb]

    def luma(self):
        def linear(c):
            c /= 255.0
            return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4
        r, g, b = [linear(c) for c in self.channels()]
        return 0.2126 * r + 0.7152 * g + 0.0722 * b

    def to_hex(self):
        return '#' + ''.join('{0:02x}'.format(_round(c)) for c in self.channels())

    def to_css(self, compress=False):
        if self.original is not None:
            if compress and is_hex_color(self.original):
                return _shorten_hex(self.original.lower())
            return self.original
        alpha = min(max(self.alpha, 0.0), 1.0)
        if alpha < 1:
            parts = [str(_round(c)) for c in self.channels()] + [format_number(alpha, compress)]
            return 'rgba({0})'.format((',' if compress else ', ').join(parts))
        text = self.to_hex()
        return _shorten_hex(text) if compress else text

    def operate(self, op, other, pos=None):
        if isinstance(other, Dimension):
            rgb = [_apply(op, c, other.value, pos) for c in self.rgb]
            return Color(rgb, self.alpha)
        if isinstance(other, Color):
            rgb = [_apply(op, a, b, pos) for a, b in zip(self.rgb, other.rgb)]
            alpha = self.alpha * (1 - other.alpha) + other.alpha
            return Color(rgb, alpha)
        raise LessCompileError.at('Operation on an invalid type', pos)

    def compare(self, other):
        if not isinstance(other, Color):
            return None
        same = [_round(c) for c in self.channels()] == [_round(c) for c in other.channels()]
        return 0 if same and abs(self.alpha - other.alpha) < 1e-9 else None


class Quoted(Value):
    def __init__(self, text, quote='"', escaped=False):
        self.text = text
        self.quote = quote
        self.escaped = escaped

    def to_css(self, compress=False):
        if self.escaped:
            return self.text
        return self.quote + self.text + self.quote

    def compare(self, other):
        if isinstance(other, (Quoted, Keyword)):
            return 0 if self.text == other.text else None
        return None


class Keyword(Value):
    def __init__(self, text):
        self.text = text

    def to_css(self, compress=False):
        return self.text

    def compare(self, other):
        if isinstance(other, (Quoted, Keyword)):
            return 0 if self.text == other.text else None
        return super().compare(other)

    def is_true(self):
        return self.text == 'true'


class Url(Value):
    def __init__(self, value, base=''):
        """
        :param value: Quoted or raw url contents.
        :type value: Value
        :param base: Root url prefixed to relative paths.
        :type base: str
        """
        self.value = value
        self.base = base

    def to_css(self, compress=False):
        inner = self.value.to_css(compress)
        if self.base:
            if isinstance(self.value, Quoted):
                if _is_relative_url(self.value.text):
                    inner = self.value.quote + self.base + self.value.text + self.value.quote
            elif _is_relative_url(inner):
                inner = self.base + inner
        return 'url({0})'.format(inner)


class ValueList(Value):
    def __init__(self, items, separator=' '):
        self.items = items
        self.separator = separator

    def to_css(self, compress=False):
        if self.separator == ',':
            joiner = ',' if compress else ', '
        else:
            joiner = self.separator
        return joiner.join(item.to_css(compress) for item in self.items)


class Concat(Value):
    """
    Values written without whitespace between them, like `opacity=50`.
    """
    def __init__(self, items):
        self.items = items

    def to_css(self, compress=False):
        return ''.join(item.to_css(compress) for item in self.items)


class Paren(Value):
    def __init__(self, value):
        self.value = value

    def to_css(self, compress=False):
        return '(' + self.value.to_css(compress) + ')'


class Call(Value):
    """
    A plain CSS function call, output as written after its arguments are evaluated.
    """
    def __init__(self, name, args):
        self.name = name
        self.args = args

    def to_css(self, compress=False):
        joiner = ',' if compress else ', '
        return '{0}({1})'.format(self.name, joiner.join(arg.to_css(compress) for arg in self.args))


class DetachedRuleset(Value):
    def __init__(self, rules, scope):
        """
        :param rules: Ruleset body statements.
        :type rules: list
        :param scope: Frames the ruleset was declared in.
        :type scope: list
        """
        self.rules = rules
        self.scope = scope

    def to_css(self, compress=False):
        raise LessCompileError('Detached rulesets can not be output as a value')


def _apply(op, a, b, pos):
    if op == '+':
        return a + b
    elif op == '-':
        return a - b
    elif op == '*':
        return a * b
    elif op == '/':
        if b == 0:
            raise LessCompileError.at('Division by zero', pos)
        return a / b
    raise LessCompileError.at('Unknown operator \'{0}\''.format(op), pos)


def _shorten_hex(text):
    if len(text) == 7 and text[1] == text[2] and text[3] == text[4] and text[5] == text[6]:
        return '#' + text[1] + text[3] + text[5]
    return text


def _is_relative_url(url):
    return not (url.startswith('/') or url.startswith('#') or url.startswith('@') or
                url.startswith('data:') or '://' in url)


def _round(channel):
    return int(math.floor(channel + 0.5))
