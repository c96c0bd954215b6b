import bisect
from lesswire.less import tokens as t
from lesswire.less.errors import LessSyntaxError

WHITESPACE = ' \t\r\n\f'
DIGITS = '0123456789'


def _is_name_start(c):
    return c != '' and (c.isalpha() or c == '_' or c == '\\' or ord(c) > 127)


def _is_name_char(c):
    return c != '' and (c.isalnum() or c in '_-\\' or ord(c) > 127)


class Lexer:
    """
    Turns LESS source text into a flat list of tokens. Whitespace is kept as WS tokens since selectors and operators
    are whitespace sensitive; line comments are dropped, block comments are kept.
    """
    def __init__(self, text, filename=None):
        """
        :param text: LESS source.
        :type text: str
        :param filename: Source file name, used for error locations.
        :type filename: str | None
        """
        self.text = text.lstrip('\ufeff')
        self.filename = filename
        self.length = len(self.text)
        self.tokens = []
        self._newlines = [i for i, c in enumerate(self.text) if c == '\n']

    def position(self, index):
        """
        Get the line and column for a character offset.

        :type index: int
        :rtype: tuple[int, int]
        """
        line = bisect.bisect_left(self._newlines, index)
        start = self._newlines[line - 1] + 1 if line > 0 else 0
        return line + 1, index - start + 1

    def error(self, message, index):
        line, column = self.position(index)
        return LessSyntaxError(message, self.filename, line, column)

    def _add(self, type_, value, start):
        line, column = self.position(start)
        self.tokens.append(t.Token(type_, value, line, column, self.filename))

    def _peek(self, i, offset=0):
        i += offset
        return self.text[i] if i < self.length else ''

    def _previous_type(self):
        return self.tokens[-1].type if self.tokens else None

    def tokenize(self):
        """
        Lex the entire source.

        :return: Token list, always ending with an EOF token.
        :rtype: list[t.Token]
        :raises LessSyntaxError: On unterminated strings, comments, or interpolations.
        """
        text = self.text
        i = 0
        while i < self.length:
            c = text[i]
            start = i

            if c in WHITESPACE:
                while i < self.length and text[i] in WHITESPACE:
                    i += 1
                self._add(t.WS, text[start:i], start)
                continue

            if c == '/' and self._peek(i, 1) == '*':
                end = text.find('*/', i + 2)
                if end < 0:
                    raise self.error('Unterminated comment', start)
                i = end + 2
                self._add(t.COMMENT, text[start:i], start)
                continue

            if c == '/' and self._peek(i, 1) == '/':
                end = text.find('\n', i)
                i = self.length if end < 0 else end
                continue

            if c in '"\'':
                i = self._string(i)
                continue

            if c == '@':
                i = self._at(i)
                continue

            if c == '#' and _is_name_char(self._peek(i, 1)):
                i += 1
                while i < self.length and _is_name_char(text[i]):
                    i += 1
                self._add(t.HASH, text[start:i], start)
                continue

            if self._is_number_start(i):
                i = self._number(i)
                continue

            if _is_name_start(c) or (c == '-' and (_is_name_start(self._peek(i, 1)) or self._peek(i, 1) == '-')):
                i = self._ident(i)
                continue

            if c == '.' and text.startswith('...', i):
                self._add(t.DELIM, '...', start)
                i += 3
                continue

            if c in t.PUNCTUATION:
                self._add(t.PUNCTUATION[c], c, start)
                i += 1
                continue

            self._add(t.DELIM, c, start)
            i += 1

        self._add(t.EOF, '', self.length)
        return self.tokens

    def _string(self, i):
        text = self.text
        quote = text[i]
        start = i
        i += 1
        while i < self.length:
            c = text[i]
            if c == '\\':
                i += 2
                continue
            if c == quote:
                self._add(t.STRING, (text[start + 1:i], quote), start)
                return i + 1
            if c == '\n':
                break
            i += 1
        raise self.error('Unterminated string', start)

    def _at(self, i):
        text = self.text
        start = i
        if self._peek(i, 1) == '{':
            end = text.find('}', i)
            if end < 0:
                raise self.error('Unterminated variable interpolation', start)
            self._add(t.INTERP, text[i + 2:end].strip(), start)
            return end + 1
        i += 1
        if self._peek(i) == '@':
            i += 1
        name_start = i
        while i < self.length and _is_name_char(text[i]):
            i += 1
        if i == name_start:
            self._add(t.DELIM, '@', start)
            return start + 1
        self._add(t.AT_KEYWORD, text[start:i], start)
        return i

    def _is_number_start(self, i):
        c = self._peek(i)
        if c in DIGITS:
            return True
        if c == '.' and self._peek(i, 1) in DIGITS and self._peek(i, 1) != '':
            return True
        if c in '+-' and self._previous_type() not in t.VALUE_TYPES:
            n = self._peek(i, 1)
            if n != '' and n in DIGITS:
                return True
            if n == '.' and self._peek(i, 2) != '' and self._peek(i, 2) in DIGITS:
                return True
        return False

    def _number(self, i):
        text = self.text
        start = i
        if text[i] in '+-':
            i += 1
        while i < self.length and text[i] in DIGITS:
            i += 1
        if i < self.length - 1 and text[i] == '.' and text[i + 1] in DIGITS:
            i += 1
            while i < self.length and text[i] in DIGITS:
                i += 1
        number = text[start:i]
        unit_start = i
        if i < self.length and text[i] == '%':
            i += 1
        else:
            while i < self.length and text[i].isalpha():
                i += 1
        self._add(t.DIMENSION, (number, text[unit_start:i]), start)
        return i

    def _ident(self, i):
        text = self.text
        start = i
        while i < self.length and _is_name_char(text[i]):
            i += 2 if text[i] == '\\' else 1
        name = text[start:i]

        if self._peek(i) != '(':
            self._add(t.IDENT, name, start)
            return i

        if name.lower() == 'url':
            j = i + 1
            while j < self.length and text[j] in WHITESPACE:
                j += 1
            if self._peek(j) not in ('"', '\'', '@'):
                end = text.find(')', j)
                if end < 0:
                    raise self.error('Unterminated url()', start)
                self._add(t.URL, text[j:end].strip(), start)
                return end + 1

        self._add(t.FUNCTION, name, start)
        return i + 1
