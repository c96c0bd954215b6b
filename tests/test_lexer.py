import pytest
from lesswire.less import tokens as t
from lesswire.less.lexer import Lexer
from lesswire.less.errors import LessSyntaxError


def _types(text):
    return [token.type for token in Lexer(text).tokenize() if token.type != t.WS]


def _significant(text):
    return [(token.type, token.value) for token in Lexer(text).tokenize() if token.type not in (t.WS, t.EOF)]


def test_declaration():
    assert _significant('color: red;') == [
        (t.IDENT, 'color'), (t.COLON, ':'), (t.IDENT, 'red'), (t.SEMICOLON, ';')]


def test_ends_with_eof():
    tokens = Lexer('').tokenize()
    assert len(tokens) == 1
    assert tokens[0].type == t.EOF


def test_dimensions():
    assert _significant('10px 1.5em .5 50%') == [
        (t.DIMENSION, ('10', 'px')), (t.DIMENSION, ('1.5', 'em')), (t.DIMENSION, ('.5', '')),
        (t.DIMENSION, ('50', '%'))]


def test_sign_after_value_is_operator():
    assert _significant('10px-5px') == [(t.DIMENSION, ('10', 'px')), (t.DELIM, '-'), (t.DIMENSION, ('5', 'px'))]
    assert _significant('0 -5px') == [(t.DIMENSION, ('0', '')), (t.DIMENSION, ('-5', 'px'))]


def test_variables_and_interpolation():
    assert _significant('@a @@b @{c}') == [(t.AT_KEYWORD, '@a'), (t.AT_KEYWORD, '@@b'), (t.INTERP, 'c')]


def test_hash_and_ident():
    assert _significant('#fff -webkit-box --custom') == [
        (t.HASH, '#fff'), (t.IDENT, '-webkit-box'), (t.IDENT, '--custom')]


def test_strings():
    assert _significant('"a b" \'c\'') == [(t.STRING, ('a b', '"')), (t.STRING, ('c', '\''))]


def test_url():
    assert _significant('url(images/a.png)') == [(t.URL, 'images/a.png')]
    assert _types('url("a.png")') == [t.FUNCTION, t.STRING, t.RPAREN, t.EOF]


def test_comments():
    tokens = _significant('a /* block */ b // line\nc')
    assert tokens == [(t.IDENT, 'a'), (t.COMMENT, '/* block */'), (t.IDENT, 'b'), (t.IDENT, 'c')]


def test_rest_delim():
    assert _significant('(@rest...)') == [(t.LPAREN, '('), (t.AT_KEYWORD, '@rest'), (t.DELIM, '...'),
                                          (t.RPAREN, ')')]


def test_positions():
    tokens = [token for token in Lexer('a {\n  color: red;\n}', 'test.less').tokenize() if token.type != t.WS]
    color = tokens[2]
    assert color.value == 'color'
    assert color.pos == ('test.less', 2, 3)


def test_byte_order_mark():
    assert _significant('\ufeffa') == [(t.IDENT, 'a')]


@pytest.mark.parametrize('text', ['"unterminated', '/* unterminated', '@{unterminated', 'url(unterminated'])
def test_unterminated(text):
    with pytest.raises(LessSyntaxError) as e:
        Lexer(text, 'bad.less').tokenize()
    assert e.value.filename == 'bad.less'
    assert e.value.line == 1
