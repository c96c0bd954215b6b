from lesswire.less import tokens as t
from lesswire.less import nodes
from lesswire.less.values import Dimension, Color, Keyword, is_hex_color
from lesswire.less.errors import LessSyntaxError

# At-rules that are never variable declarations, even when followed by a colon (e.g. '@page :first').
CSS_AT_RULES = {
    '@media', '@supports', '@font-face', '@keyframes', '@page', '@charset', '@import', '@namespace',
    '@document', '@viewport', '@counter-style', '@font-feature-values', '@layer', '@container', '@property',
}

# Tokens that end a space separated value list.
LIST_END = {t.COMMA, t.SEMICOLON, t.RBRACE, t.RPAREN, t.RBRACKET, t.LBRACE, t.EOF}

OPENERS = (t.LPAREN, t.FUNCTION, t.LBRACKET)
CLOSERS = (t.RPAREN, t.RBRACKET)


class Grammar:
    """
    Recursive descent parser building a rule tree from a token list.
    """
    def __init__(self, tokens, uri_root=''):
        """
        :param tokens: Tokens from a Lexer, ending with EOF.
        :type tokens: list[t.Token]
        :param uri_root: Root url prepended to relative url() paths.
        :type uri_root: str
        """
        self.tokens = tokens
        self.index = 0
        self.uri_root = uri_root

    def parse(self):
        """
        Parse the token list as a stylesheet.

        :return: Top level statements.
        :rtype: list[nodes.Node]
        :raises LessSyntaxError: If the tokens are not a valid stylesheet.
        """
        return self.parse_rules(root=True)

    # Token helpers

    def peek(self, offset=0):
        return self.tokens[min(self.index + offset, len(self.tokens) - 1)]

    def next(self):
        token = self.peek()
        if self.index < len(self.tokens) - 1:
            self.index += 1
        return token

    def skip_ws(self, comments=True):
        skipped = False
        while self.peek().type == t.WS or (comments and self.peek().type == t.COMMENT):
            self.next()
            skipped = True
        return skipped

    def peek_past_ws(self, offset=0):
        i = min(self.index + offset, len(self.tokens) - 1)
        while self.tokens[i].type in (t.WS, t.COMMENT):
            i += 1
        return self.tokens[i]

    def expect(self, type_, what):
        token = self.peek()
        if token.type != type_:
            raise self.error('Expected {0}'.format(what), token)
        return self.next()

    def error(self, message, token=None):
        token = token if token is not None else self.peek()
        return LessSyntaxError(message, token.filename, token.line, token.column)

    # Statements

    def parse_rules(self, root=False):
        rules = []
        while True:
            self.skip_ws(comments=False)
            token = self.peek()
            if token.type == t.EOF:
                if not root:
                    raise self.error('Unexpected end of file, missing }', token)
                return rules
            if token.type == t.RBRACE:
                if root:
                    raise self.error('Unexpected }', token)
                return rules
            if token.type == t.COMMENT:
                rules.append(nodes.Comment(token.value, token.pos))
                self.next()
            elif token.type == t.SEMICOLON:
                self.next()
            else:
                rules.append(self.parse_statement())

    def parse_block(self):
        self.expect(t.LBRACE, '{')
        rules = self.parse_rules()
        self.expect(t.RBRACE, '}')
        return rules

    def parse_statement(self):
        token = self.peek()
        if token.type == t.AT_KEYWORD:
            return self.parse_at_statement()
        if self._statement_end().type == t.LBRACE:
            if self._is_mixin_definition():
                return self.parse_mixin_definition()
            return self.parse_ruleset()
        if token.is_delim('.') or token.type == t.HASH:
            return self.parse_mixin_call()
        return self.parse_declaration()

    def _statement_end(self):
        """
        Find the first '{', ';' or '}' outside of parentheses, which decides what kind of statement follows.
        """
        depth = 0
        i = self.index
        while True:
            token = self.tokens[i]
            if token.type == t.EOF:
                return token
            if token.type in OPENERS:
                depth += 1
            elif token.type in CLOSERS:
                depth = max(depth - 1, 0)
            elif depth == 0 and token.type in (t.LBRACE, t.SEMICOLON, t.RBRACE):
                return token
            i += 1

    def _is_mixin_definition(self):
        first, second = self.peek(), self.peek(1)
        return (first.is_delim('.') and second.type == t.FUNCTION) or \
               (first.type == t.HASH and second.type == t.LPAREN)

    def _end_statement(self):
        token = self.peek()
        if token.type == t.SEMICOLON:
            self.next()
        elif token.type not in (t.RBRACE, t.EOF):
            raise self.error('Expected ;', token)

    def _parse_important(self):
        if not self.peek().is_delim('!'):
            return False
        save = self.index
        self.next()
        self.skip_ws()
        token = self.peek()
        if token.type == t.IDENT and token.value.lower() == 'important':
            self.next()
            return True
        self.index = save
        return False

    def _raw_until_end(self):
        """
        Collect the source text up to the end of the current statement.
        """
        parts = []
        depth = 0
        while True:
            token = self.peek()
            if token.type == t.EOF:
                break
            if token.type in OPENERS or token.type == t.LBRACE:
                depth += 1
            elif token.type in CLOSERS or token.type == t.RBRACE:
                if depth == 0:
                    break
                depth -= 1
            elif depth == 0 and token.type == t.SEMICOLON:
                break
            self.next()
            if token.type == t.WS:
                parts.append(' ')
            elif token.type != t.COMMENT:
                parts.append(token.text())
        return ''.join(parts).strip()

    def parse_declaration(self):
        start = self.peek()
        name = []
        while True:
            token = self.peek()
            if token.type == t.COLON:
                break
            if token.type in (t.SEMICOLON, t.RBRACE, t.LBRACE, t.EOF):
                raise self.error('Expected : in declaration', token)
            self.next()
            if token.type == t.INTERP:
                name.append(nodes.Variable('@' + token.value, token.pos))
            elif token.type not in (t.WS, t.COMMENT):
                name.append(token.text())
        if not name:
            raise self.error('Expected property name', start)
        self.next()
        self.skip_ws()

        important = False
        if isinstance(name[0], str) and name[0].startswith('--'):
            value = nodes.Literal(Keyword(self._raw_until_end()), start.pos)
        else:
            value = self.parse_value()
            self.skip_ws()
            important = self._parse_important()
        self.skip_ws()
        self._end_statement()
        return nodes.Declaration(name, value, important, start.pos)

    def parse_value(self):
        """
        Parse a declaration or variable value. Values the expression grammar can not handle, such as old browser
        hacks, are kept as raw text.
        """
        start = self.peek()
        save = self.index
        try:
            value = self.parse_comma_list()
            self.skip_ws()
            token = self.peek()
            if token.type in (t.SEMICOLON, t.RBRACE, t.EOF) or token.is_delim('!'):
                return value
        except LessSyntaxError:
            pass
        self.index = save
        return nodes.Literal(Keyword(self._raw_until_end()), start.pos)

    def parse_ruleset(self):
        start = self.peek()
        selector = []
        guard = None
        depth = 0
        while True:
            token = self.peek()
            if token.type == t.EOF:
                raise self.error('Unexpected end of file in selector', token)
            if depth == 0 and token.type == t.LBRACE:
                break
            if depth == 0 and token.type == t.IDENT and token.value == 'when' and selector and \
                    selector[-1].type == t.WS:
                self.next()
                guard = self.parse_guard()
                self.skip_ws()
                break
            if token.type in OPENERS:
                depth += 1
            elif token.type in CLOSERS:
                depth -= 1
            selector.append(self.next())

        while selector and selector[-1].type in (t.WS, t.COMMENT):
            selector.pop()
        rules = self.parse_block()
        return nodes.Ruleset(nodes.Selector(selector, start.pos), rules, guard, start.pos)

    def parse_mixin_definition(self):
        start = self.next()
        if start.type == t.HASH:
            name = start.value
            self.expect(t.LPAREN, '(')
        else:
            name = '.' + self.next().value
        params = self.parse_params()
        self.skip_ws()
        guard = None
        token = self.peek()
        if token.type == t.IDENT and token.value == 'when':
            self.next()
            guard = self.parse_guard()
            self.skip_ws()
        rules = self.parse_block()
        return nodes.MixinDefinition(name, params, rules, guard, start.pos)

    def _arg_separator(self):
        """
        Arguments are separated by semicolons if there is one at the top level of the argument list, commas
        otherwise. Expects the opening parenthesis to have been consumed.
        """
        depth = 0
        i = self.index
        while True:
            token = self.tokens[i]
            if token.type == t.EOF:
                break
            if token.type in OPENERS or token.type == t.LBRACE:
                depth += 1
            elif token.type in CLOSERS or token.type == t.RBRACE:
                if depth == 0:
                    break
                depth -= 1
            elif depth == 0 and token.type == t.SEMICOLON:
                return t.SEMICOLON
            i += 1
        return t.COMMA

    def _parse_arg_value(self, separator):
        if self.peek_past_ws().type == t.LBRACE:
            self.skip_ws()
            start = self.peek()
            return nodes.DetachedRulesetNode(self.parse_block(), start.pos)
        if separator == t.SEMICOLON:
            return self.parse_comma_list()
        return self.parse_space_list()

    def _colon_follows(self, offset):
        return self.peek_past_ws(offset).type == t.COLON

    def parse_params(self):
        params = []
        separator = self._arg_separator()
        while True:
            self.skip_ws()
            token = self.peek()
            if token.type == t.RPAREN:
                self.next()
                return params
            if token.type == t.EOF:
                raise self.error('Unexpected end of file in mixin parameters', token)

            if token.type == t.AT_KEYWORD:
                self.next()
                if self.peek().is_delim('...'):
                    self.next()
                    param = nodes.Param(token.value, rest=True, pos=token.pos)
                elif self._colon_follows(0):
                    self.skip_ws()
                    self.next()
                    self.skip_ws()
                    param = nodes.Param(token.value, default=self._parse_arg_value(separator), pos=token.pos)
                else:
                    param = nodes.Param(token.value, pos=token.pos)
            elif token.is_delim('...'):
                self.next()
                param = nodes.Param(rest=True, pos=token.pos)
            else:
                param = nodes.Param(pattern=self._parse_arg_value(separator), pos=token.pos)
            params.append(param)

            self.skip_ws()
            token = self.peek()
            if token.type == separator:
                self.next()
            elif token.type != t.RPAREN:
                raise self.error('Expected , ; or ) in mixin parameters', token)

    def parse_args(self):
        args = []
        separator = self._arg_separator()
        while True:
            self.skip_ws()
            token = self.peek()
            if token.type == t.RPAREN:
                self.next()
                return args
            if token.type == t.EOF:
                raise self.error('Unexpected end of file in mixin arguments', token)

            name = None
            if token.type == t.AT_KEYWORD and self._colon_follows(1):
                self.next()
                self.skip_ws()
                self.next()
                self.skip_ws()
                name = token.value
            args.append(nodes.Arg(name, self._parse_arg_value(separator), token.pos))

            self.skip_ws()
            token = self.peek()
            if token.type == separator:
                self.next()
            elif token.type != t.RPAREN:
                raise self.error('Expected , ; or ) in mixin arguments', token)

    def parse_mixin_call(self):
        start = self.peek()
        path = []
        args = []
        while True:
            token = self.peek()
            if token.is_delim('.'):
                self.next()
                name = self.next()
                if name.type == t.IDENT:
                    path.append('.' + name.value)
                elif name.type == t.FUNCTION:
                    path.append('.' + name.value)
                    args = self.parse_args()
                    break
                else:
                    raise self.error('Expected mixin name', name)
            elif token.type == t.HASH:
                self.next()
                path.append(token.value)
            elif token.type == t.LPAREN and path:
                self.next()
                args = self.parse_args()
                break
            elif token.type == t.WS or token.is_delim('>'):
                self.next()
            else:
                break

        self.skip_ws()
        important = self._parse_important()
        self.skip_ws()
        self._end_statement()
        return nodes.MixinCall(path, args, important, start.pos)

    def parse_guard(self):
        start = self.peek()
        groups = [[self.parse_condition()]]
        while True:
            save = self.index
            self.skip_ws()
            token = self.peek()
            if token.type == t.IDENT and token.value == 'and':
                self.next()
                groups[-1].append(self.parse_condition())
            elif token.type == t.COMMA:
                self.next()
                groups.append([self.parse_condition()])
            else:
                self.index = save
                return nodes.Guard(groups, start.pos)

    def parse_condition(self):
        self.skip_ws()
        start = self.peek()
        negate = False
        if start.type == t.IDENT and start.value == 'not':
            self.next()
            self.skip_ws()
            negate = True
        self.expect(t.LPAREN, '( in guard')
        self.skip_ws()
        left = self.parse_additive()
        self.skip_ws()
        op = self._comparison()
        right = None
        if op is not None:
            self.skip_ws()
            right = self.parse_additive()
            self.skip_ws()
        self.expect(t.RPAREN, ') in guard')
        return nodes.Condition(left, op, right, negate, start.pos)

    def _comparison(self):
        token = self.peek()
        if token.type != t.DELIM or token.value not in '<>=':
            return None
        op = self.next().value
        token = self.peek()
        if token.type == t.DELIM and op + token.value in ('>=', '<=', '=<', '=>'):
            op += self.next().value
        return {'=<': '<=', '=>': '>='}.get(op, op)

    def parse_at_statement(self):
        token = self.peek()
        name = token.value
        if name == '@import':
            return self.parse_import()
        if self.peek(1).type == t.LPAREN and self.peek(2).type == t.RPAREN:
            self.next()
            self.next()
            self.next()
            self.skip_ws()
            self._end_statement()
            return nodes.DetachedCall(name, token.pos)
        if name.lower() not in CSS_AT_RULES and not name.startswith('@-') and self._colon_follows(1):
            return self.parse_variable_declaration()
        return self.parse_at_rule()

    def parse_variable_declaration(self):
        token = self.next()
        self.skip_ws()
        self.expect(t.COLON, ':')
        self.skip_ws()
        if self.peek().type == t.LBRACE:
            value = nodes.DetachedRulesetNode(self.parse_block(), token.pos)
            self.skip_ws()
            if self.peek().type == t.SEMICOLON:
                self.next()
            return nodes.VariableDeclaration(token.value, value, token.pos)
        value = self.parse_value()
        self.skip_ws()
        self._parse_important()
        self.skip_ws()
        self._end_statement()
        return nodes.VariableDeclaration(token.value, value, token.pos)

    def _collect_prelude(self):
        prelude = []
        depth = 0
        while True:
            token = self.peek()
            if token.type == t.EOF:
                break
            if depth == 0 and token.type in (t.LBRACE, t.SEMICOLON, t.RBRACE):
                break
            if token.type in OPENERS:
                depth += 1
            elif token.type in CLOSERS:
                depth -= 1
            prelude.append(self.next())
        while prelude and prelude[0].type in (t.WS, t.COMMENT):
            prelude.pop(0)
        while prelude and prelude[-1].type in (t.WS, t.COMMENT):
            prelude.pop()
        return prelude

    def parse_at_rule(self):
        token = self.next()
        prelude = self._collect_prelude()
        if self.peek().type == t.LBRACE:
            rules = self.parse_block()
        else:
            self._end_statement()
            rules = None
        return nodes.AtRule(token.value, prelude, rules, token.pos)

    def parse_import(self):
        token = self.next()
        self.skip_ws()
        options = set()
        if self.peek().type == t.LPAREN:
            self.next()
            while True:
                self.skip_ws()
                option = self.next()
                if option.type == t.IDENT:
                    options.add(option.value.lower())
                elif option.type == t.RPAREN:
                    break
                elif option.type != t.COMMA:
                    raise self.error('Malformed import options', option)
            self.skip_ws()

        current = self.peek()
        if current.type == t.STRING:
            self.next()
            path = nodes.QuotedNode(current.value[0], current.value[1], pos=current.pos)
        elif current.type == t.URL or (current.type == t.FUNCTION and current.value.lower() == 'url'):
            self.next()
            path = self.parse_url(current)
        else:
            raise self.error('Expected import path', current)

        media = self._collect_prelude()
        self._end_statement()
        return nodes.Import(path, options, media, token.pos)

    # Expressions

    def parse_comma_list(self):
        start = self.peek()
        items = [self.parse_space_list()]
        while True:
            save = self.index
            self.skip_ws()
            if self.peek().type != t.COMMA:
                self.index = save
                break
            self.next()
            items.append(self.parse_space_list())
        if len(items) == 1:
            return items[0]
        return nodes.ListNode(items, ',', start.pos)

    def parse_space_list(self):
        groups = []
        while True:
            save = self.index
            spaced = self.skip_ws()
            token = self.peek()
            if token.type in LIST_END or token.is_delim('!'):
                self.index = save
                break
            value = self.parse_additive()
            if groups and not spaced:
                groups[-1].append(value)
            else:
                groups.append([value])
        if not groups:
            raise self.error('Expected a value')

        items = [group[0] if len(group) == 1 else nodes.ConcatNode(group, group[0].pos) for group in groups]
        if len(items) == 1:
            return items[0]
        return nodes.ListNode(items, ' ', items[0].pos)

    def _operator(self, chars):
        """
        Consume a math operator if one follows. An operator needs whitespace on both sides or neither, so that
        `1 -2` stays a list of two numbers.

        :return: Tuple of the operator and whether it was surrounded by whitespace, or None.
        :rtype: tuple[str, bool] | None
        """
        save = self.index
        before = self.skip_ws()
        token = self.peek()
        if token.type == t.DELIM and token.value in chars:
            after = self.peek(1).type in (t.WS, t.COMMENT)
            if before == after:
                self.next()
                self.skip_ws()
                following = self.peek()
                if following.type not in LIST_END and not following.is_delim('!'):
                    return token.value, before
        self.index = save
        return None

    def parse_additive(self):
        left = self.parse_multiplicative()
        while True:
            operator = self._operator('+-')
            if operator is None:
                return left
            right = self.parse_multiplicative()
            left = nodes.Operation(operator[0], left, right, operator[1], left.pos)

    def parse_multiplicative(self):
        left = self.parse_unary()
        while True:
            operator = self._operator('*/')
            if operator is None:
                return left
            right = self.parse_unary()
            left = nodes.Operation(operator[0], left, right, operator[1], left.pos)

    def parse_unary(self):
        token = self.peek()
        if token.is_delim('-') and self.peek(1).type not in (t.WS, t.COMMENT, t.EOF):
            self.next()
            return nodes.Negative(self.parse_primary(), token.pos)
        return self.parse_primary()

    def parse_primary(self):
        token = self.peek()
        pos = token.pos

        if token.type == t.DIMENSION:
            self.next()
            return nodes.Literal(Dimension(float(token.value[0]), token.value[1]), pos)
        elif token.type == t.HASH:
            self.next()
            if is_hex_color(token.value):
                return nodes.Literal(Color.from_hex(token.value), pos)
            return nodes.Literal(Keyword(token.value), pos)
        elif token.type == t.STRING:
            self.next()
            return nodes.QuotedNode(token.value[0], token.value[1], pos=pos)
        elif token.is_delim('~') and self.peek(1).type == t.STRING:
            self.next()
            string = self.next()
            return nodes.QuotedNode(string.value[0], string.value[1], escaped=True, pos=pos)
        elif token.type == t.IDENT:
            self.next()
            color = Color.from_keyword(token.value)
            return nodes.Literal(color if color is not None else Keyword(token.value), pos)
        elif token.type == t.URL:
            self.next()
            return self.parse_url(token)
        elif token.type == t.FUNCTION:
            self.next()
            if token.value.lower() == 'url':
                return self.parse_url(token)
            return self.parse_call(token)
        elif token.type == t.LPAREN:
            self.next()
            self.skip_ws()
            value = self.parse_comma_list()
            self.skip_ws()
            self.expect(t.RPAREN, ')')
            return nodes.ParenNode(value, pos)
        elif token.type == t.AT_KEYWORD:
            self.next()
            return nodes.Variable(token.value, pos)
        elif token.type == t.INTERP:
            self.next()
            return nodes.Variable('@' + token.value, pos)
        elif token.type == t.LBRACKET:
            self.next()
            text = '[' + self._raw_until_end() + ']'
            self.expect(t.RBRACKET, ']')
            return nodes.Literal(Keyword(text), pos)
        elif token.type in (t.DELIM, t.COLON):
            self.next()
            return nodes.Literal(Keyword(token.value), pos)
        raise self.error('Unexpected {0}'.format(token.text() or 'end of file'), token)

    def parse_url(self, token):
        """
        Parse a url() value. Expects the url token, or the 'url(' function token, to have been consumed.
        """
        if token.type == t.URL:
            return nodes.UrlNode(nodes.Literal(Keyword(token.value), token.pos), self.uri_root, token.pos)

        parts = []
        while True:
            current = self.peek()
            if current.type in (t.RPAREN, t.EOF):
                break
            parts.append(self.next())
        self.expect(t.RPAREN, ')')
        parts = [part for part in parts if part.type not in (t.WS, t.COMMENT)]

        if len(parts) == 1 and parts[0].type == t.STRING:
            value = nodes.QuotedNode(parts[0].value[0], parts[0].value[1], pos=parts[0].pos)
        elif len(parts) == 1 and parts[0].type == t.AT_KEYWORD:
            value = nodes.Variable(parts[0].value, parts[0].pos)
        else:
            value = nodes.QuotedNode(''.join(part.text() for part in parts), '', escaped=True, pos=token.pos)
        return nodes.UrlNode(value, self.uri_root, token.pos)

    def parse_call(self, token):
        """
        Parse function call arguments. Expects the function token to have been consumed.
        """
        args = []
        self.skip_ws()
        if self.peek().type == t.RPAREN:
            self.next()
            return nodes.CallNode(token.value, args, token.pos)
        while True:
            args.append(self.parse_space_list())
            self.skip_ws()
            current = self.next()
            if current.type == t.RPAREN:
                return nodes.CallNode(token.value, args, token.pos)
            if current.type != t.COMMA:
                raise self.error('Expected , or ) in function call', current)
