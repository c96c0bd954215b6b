from collections import namedtuple

WS = 'WS'
COMMENT = 'COMMENT'
IDENT = 'IDENT'
FUNCTION = 'FUNCTION'
AT_KEYWORD = 'AT_KEYWORD'
INTERP = 'INTERP'
HASH = 'HASH'
DIMENSION = 'DIMENSION'
STRING = 'STRING'
URL = 'URL'
COLON = 'COLON'
SEMICOLON = 'SEMICOLON'
COMMA = 'COMMA'
LBRACE = 'LBRACE'
RBRACE = 'RBRACE'
LPAREN = 'LPAREN'
RPAREN = 'RPAREN'
LBRACKET = 'LBRACKET'
RBRACKET = 'RBRACKET'
DELIM = 'DELIM'
EOF = 'EOF'

PUNCTUATION = {
    ':': COLON,
    ';': SEMICOLON,
    ',': COMMA,
    '{': LBRACE,
    '}': RBRACE,
    '(': LPAREN,
    ')': RPAREN,
    '[': LBRACKET,
    ']': RBRACKET,
}

# Tokens after which a '+' or '-' is an operator rather than a number sign.
VALUE_TYPES = {IDENT, DIMENSION, HASH, STRING, URL, RPAREN, RBRACKET, AT_KEYWORD, INTERP}


class Token(namedtuple('Token', ['type', 'value', 'line', 'column', 'filename'])):
    """
    Named tuple for a single lexed token. `value` depends on the type: a (number, unit) tuple for DIMENSION, a
    (contents, quote) tuple for STRING, and the source text for everything else.
    """
    @property
    def pos(self):
        return self.filename, self.line, self.column

    def is_delim(self, *chars):
        return self.type == DELIM and self.value in chars

    def text(self):
        """
        Source-like text for the token, used when rebuilding selectors and raw at-rule preludes.

        :rtype: str
        """
        if self.type == DIMENSION:
            return self.value[0] + self.value[1]
        elif self.type == STRING:
            return self.value[1] + self.value[0] + self.value[1]
        elif self.type == URL:
            return 'url({0})'.format(self.value)
        elif self.type == FUNCTION:
            return self.value + '('
        elif self.type == INTERP:
            return '@{' + self.value + '}'
        elif self.type == EOF:
            return ''
        return self.value
