import re
import inspect
from collections import namedtuple
from lesswire.less import nodes, functions
from lesswire.less import tokens as t
from lesswire.less.errors import LessCompileError, LessReferenceError
from lesswire.less.emitter import CssRule, CssAtBlock, CssDeclaration, CssComment, CssDirective, CssRaw
from lesswire.less.values import Value, Dimension, Quoted, Keyword, Url, ValueList, Concat, Paren, Call, \
    DetachedRuleset

INTERPOLATION = re.compile(r'@\{([\w-]+)\}')

COMPARISONS = {
    '>': (1,),
    '>=': (0, 1),
    '=': (0,),
    '<=': (-1, 0),
    '<': (-1,),
}

CALC_FUNCTIONS = ('calc', '-webkit-calc', '-moz-calc')

# Evaluation state for a block body.
#   scope: frames searched for variables and mixins, innermost first.
#   selectors: complete selectors of the enclosing ruleset.
#   rule: output rule receiving declarations.
#   container: output list receiving nested rules and blocks.
#   media: queries of the enclosing @media block, or None.
#   media_container: output list the enclosing @media block lives in.
#   important: mark all declarations !important.
Context = namedtuple('Context', ['scope', 'selectors', 'rule', 'container', 'media', 'media_container', 'important'])


class Frame:
    """
    Variables and mixins declared directly in one block body.
    """
    def __init__(self, rules=None, values=None):
        """
        :param rules: Block statements to collect declarations from.
        :type rules: list[nodes.Node] | None
        :param values: Already evaluated variables, such as mixin arguments.
        :type values: dict[str, Value] | None
        """
        self.rules = rules if rules is not None else []
        self.values = dict(values) if values is not None else {}
        self.variables = {}
        self.mixins = {}
        self.cache = {}
        self._collect(self.rules)

    def _collect(self, rules):
        for rule in rules:
            if isinstance(rule, nodes.VariableDeclaration):
                # Later declarations win.
                self.variables[rule.name] = rule
            elif isinstance(rule, nodes.MixinDefinition):
                self.mixins.setdefault(rule.name, []).append(rule)
            elif isinstance(rule, nodes.Ruleset):
                for key in rule.selector.keys:
                    self.mixins.setdefault(key, []).append(rule)
            elif isinstance(rule, nodes.Reference):
                self._collect(rule.rules)


def split_top_level(text, separator=','):
    """
    Split text on a separator that is not inside parentheses, brackets or quotes.

    :type text: str
    :type separator: str
    :rtype: list[str]
    """
    parts = []
    depth = 0
    quote = None
    current = ''
    for c in text:
        if quote is not None:
            if c == quote:
                quote = None
        elif c in '"\'':
            quote = c
        elif c in '([':
            depth += 1
        elif c in ')]':
            depth -= 1
        elif c == separator and depth == 0:
            parts.append(current)
            current = ''
            continue
        current += c
    parts.append(current)
    return [part.strip() for part in parts if part.strip()]


def join_selectors(parents, children):
    """
    Combine a ruleset's selectors with its parent's. '&' is replaced by each parent selector, other selectors become
    descendants of each parent.

    :type parents: list[str]
    :type children: list[str]
    :rtype: list[str]
    """
    joined = []
    for child in children:
        if not parents:
            joined.append(child.replace('&', ''))
        elif '&' in child:
            segments = child.split('&')
            partials = [segments[0]]
            for segment in segments[1:]:
                partials = [partial + parent + segment for partial in partials for parent in parents]
            joined.extend(partials)
        else:
            joined.extend(parent + ' ' + child for parent in parents)
    return [re.sub(r'\s+', ' ', selector).strip() for selector in joined if selector.strip()]


def _chain(inner, outer):
    """
    Scope for a mixin or detached ruleset body: its own frames first, then the caller's frames it does not already
    include. A recursive call grows the chain only by the frames it adds.

    :type inner: list[Frame]
    :type outer: list[Frame]
    :rtype: list[Frame]
    """
    seen = set(id(frame) for frame in inner)
    return inner + [frame for frame in outer if id(frame) not in seen]


class Evaluator:
    """
    Resolves variables, mixins, operations and functions in a parsed stylesheet, producing flattened CSS nodes.
    """
    def __init__(self, options=None):
        """
        :param options: Parser options, 'math' and 'max_depth' are used.
        :type options: dict | None
        """
        options = options or {}
        self.math = options.get('math', 'parens-division')
        self.max_depth = options.get('max_depth', 64)
        self._parens = 0
        self._math_off = 0
        self._depth = 0
        self._evaluating = set()
        self._root = None

    def evaluate(self, rules):
        """
        Evaluate top level statements.

        :type rules: list[nodes.Node]
        :return: Flattened CSS nodes, ready for an Emitter.
        :rtype: list
        :raises LessError: On undefined variables, unmatched mixins, or invalid operations.
        """
        out = []
        self._root = CssRule([])
        out.append(self._root)
        context = Context([Frame(rules)], [], self._root, out, None, out, False)
        self._eval_body(rules, context)
        return out

    # Statements

    def _eval_block(self, rules, context):
        rule = CssRule(context.selectors)
        context.container.append(rule)
        self._eval_body(rules, context._replace(rule=rule))

    def _eval_body(self, rules, context):
        for rule in rules:
            if isinstance(rule, nodes.Declaration):
                self._declaration(rule, context)
            elif isinstance(rule, nodes.Comment):
                if context.rule is self._root:
                    context.container.append(CssComment(rule.text))
                else:
                    context.rule.declarations.append(CssComment(rule.text))
            elif isinstance(rule, nodes.Ruleset):
                self._ruleset(rule, context)
            elif isinstance(rule, nodes.MixinCall):
                self._mixin_call(rule, context)
            elif isinstance(rule, nodes.DetachedCall):
                self._detached_call(rule, context)
            elif isinstance(rule, nodes.AtRule):
                self._at_rule(rule, context)
            elif isinstance(rule, nodes.CssImport):
                media = self._prelude(rule.media, context.scope)
                path = self.eval(rule.path, context.scope).to_css()
                context.container.append(CssDirective('@import ' + path + (' ' + media if media else '')))
            elif isinstance(rule, nodes.InlineCss):
                context.container.append(CssRaw(rule.text))

    def _declaration(self, declaration, context):
        name = ''.join(part if isinstance(part, str) else self._text(self.eval(part, context.scope))
                       for part in declaration.name)
        value = self.eval(declaration.value, context.scope)
        if isinstance(value, DetachedRuleset):
            raise LessCompileError.at('Detached ruleset can not be used as the value of {0}'.format(name),
                                      declaration.pos)
        important = declaration.important or context.important
        context.rule.declarations.append(CssDeclaration(name, value, important))

    def _ruleset(self, ruleset, context):
        if ruleset.guard is not None and not self._guard(ruleset.guard, context.scope):
            return
        selectors = join_selectors(context.selectors, self._selectors(ruleset.selector, context.scope))
        scope = [Frame(ruleset.rules)] + context.scope
        self._eval_block(ruleset.rules, context._replace(scope=scope, selectors=selectors))

    def _selectors(self, selector, scope):
        parts = []
        depth = 0
        for token in selector.tokens:
            if token.type in (t.LPAREN, t.FUNCTION, t.LBRACKET):
                depth += 1
            elif token.type in (t.RPAREN, t.RBRACKET):
                depth -= 1

            if token.type == t.INTERP:
                parts.append(self._text(self.lookup('@' + token.value, scope, token.pos)))
            elif token.type == t.WS:
                parts.append(' ')
            elif token.type == t.COMMENT:
                continue
            elif depth == 0 and token.type == t.DELIM and token.value in '>+~':
                parts.append(' {0} '.format(token.value))
            else:
                parts.append(token.text())
        return [re.sub(r'\s+', ' ', part) for part in split_top_level(''.join(parts))]

    def _at_rule(self, rule, context):
        name = rule.name
        lower = name.lower()
        prelude = self._prelude(rule.prelude, context.scope)

        if rule.rules is None:
            context.container.append(CssDirective(name + (' ' + prelude if prelude else '')))
            return

        scope = [Frame(rule.rules)] + context.scope

        if lower == '@media':
            queries = split_top_level(prelude) or ['all']
            container = context.container
            if context.media:
                # Nested media blocks bubble up next to the enclosing block, with their queries combined.
                queries = [outer + ' and ' + inner for outer in context.media for inner in queries]
                container = context.media_container
            block = CssAtBlock(name, ', '.join(queries))
            container.append(block)
            self._eval_block(rule.rules, context._replace(scope=scope, container=block.children, media=queries,
                                                          media_container=container))
        elif lower == '@supports':
            block = CssAtBlock(name, prelude)
            context.container.append(block)
            self._eval_block(rule.rules, context._replace(scope=scope, container=block.children))
        else:
            block = CssAtBlock(name, prelude)
            context.container.append(block)
            self._eval_block(rule.rules, context._replace(scope=scope, selectors=[], container=block.children,
                                                          media=None, media_container=block.children))

    def _prelude(self, tokens, scope):
        parts = []
        for token in tokens:
            if token.type == t.WS:
                parts.append(' ')
            elif token.type == t.COMMENT:
                continue
            elif token.type == t.AT_KEYWORD:
                parts.append(self.lookup(token.value, scope, token.pos).to_css())
            elif token.type == t.INTERP:
                parts.append(self._text(self.lookup('@' + token.value, scope, token.pos)))
            else:
                parts.append(token.text())
        return re.sub(r'\s+', ' ', ''.join(parts)).strip()

    # Mixins

    def _mixin_call(self, call, context):
        if self._depth >= self.max_depth:
            raise LessCompileError.at('Maximum mixin call depth exceeded calling {0}'.format(call.name), call.pos)

        candidates = self.find_mixins(call.path, context.scope)
        if not candidates:
            raise LessCompileError.at('{0} is undefined'.format(call.name), call.pos)

        args = [(arg.name, self.eval(arg.value, context.scope)) for arg in call.args]
        important = context.important or call.important
        matched = False
        for definition, definition_scope in candidates:
            values = self._bind(definition, args, definition_scope, context.scope)
            if values is None:
                continue
            matched = True
            outer = _chain([Frame(values=values)] + definition_scope, context.scope)
            if definition.guard is not None and not self._guard(definition.guard, outer):
                continue

            scope = [Frame(definition.rules)] + outer
            self._depth += 1
            try:
                self._eval_body(definition.rules, context._replace(scope=scope, important=important))
            finally:
                self._depth -= 1

        if not matched:
            described = ', '.join(_describe(value) for _, value in args)
            raise LessCompileError.at('No matching definition was found for {0}({1})'.format(call.name, described),
                                      call.pos)

    def find_mixins(self, path, scope):
        """
        Find mixin definitions for a call path, searching the innermost frame first.

        :param path: Mixin selector elements, e.g. ['#namespace', '.mixin'].
        :type path: list[str]
        :type scope: list[Frame]
        :return: Tuples of each definition and the scope it was declared in.
        :rtype: list[tuple[nodes.Ruleset | nodes.MixinDefinition, list[Frame]]]
        """
        for i, frame in enumerate(scope):
            found = []
            for definition in frame.mixins.get(path[0], []):
                found.extend(self._descend(definition, path[1:], scope[i:]))
            if found:
                return found
        return []

    def _descend(self, definition, path, scope):
        if not path:
            return [(definition, scope)]
        frame = Frame(definition.rules)
        found = []
        for inner in frame.mixins.get(path[0], []):
            found.extend(self._descend(inner, path[1:], [frame] + scope))
        return found

    def _bind(self, definition, args, definition_scope, caller_scope):
        """
        Match call arguments against a definition's parameters.

        :return: Parameter values, or None if the definition does not match the arguments.
        :rtype: dict[str, Value] | None
        """
        if isinstance(definition, nodes.Ruleset):
            return {} if not args else None

        named = dict((name, value) for name, value in args if name)
        positional = [value for name, value in args if not name]
        values = {}
        arguments = []

        for param in definition.params:
            if param.rest:
                if param.name:
                    values[param.name] = ValueList(positional, ' ')
                arguments.extend(positional)
                positional = []
                continue
            if param.pattern is not None:
                if not positional:
                    return None
                value = positional.pop(0)
                pattern = self.eval(param.pattern, definition_scope)
                if _describe(value) != _describe(pattern):
                    return None
                arguments.append(value)
                continue

            if param.name in named:
                value = named.pop(param.name)
            elif positional:
                value = positional.pop(0)
            elif param.default is not None:
                value = self.eval(param.default, _chain([Frame(values=values)] + definition_scope, caller_scope))
            else:
                return None
            values[param.name] = value
            arguments.append(value)

        if positional or named:
            return None
        values['@arguments'] = ValueList(arguments, ' ')
        return values

    def _detached_call(self, call, context):
        value = self.lookup(call.name, context.scope, call.pos)
        if not isinstance(value, DetachedRuleset):
            raise LessCompileError.at('{0} is not a detached ruleset'.format(call.name), call.pos)
        if self._depth >= self.max_depth:
            raise LessCompileError.at('Maximum mixin call depth exceeded calling {0}'.format(call.name), call.pos)
        scope = _chain([Frame(value.rules)] + value.scope, context.scope)
        self._depth += 1
        try:
            self._eval_body(value.rules, context._replace(scope=scope))
        finally:
            self._depth -= 1

    def _guard(self, guard, scope):
        return any(all(self._condition(condition, scope) for condition in group) for group in guard.groups)

    def _condition(self, condition, scope):
        left = self.eval(condition.left, scope)
        if condition.op is None:
            result = isinstance(left, Keyword) and left.is_true()
        else:
            right = self.eval(condition.right, scope)
            order = left.compare(right)
            result = order is not None and order in COMPARISONS[condition.op]
        return not result if condition.negate else result

    # Expressions

    def lookup(self, name, scope, pos=None):
        """
        Get the value of a variable. Values are evaluated lazily in the scope they were declared in, and cached.

        :param name: Variable name, including the '@'.
        :type name: str
        :type scope: list[Frame]
        :raises LessReferenceError: If the variable is not declared in any frame.
        :raises LessCompileError: If the variable's value refers back to itself.
        """
        for i, frame in enumerate(scope):
            if name in frame.values:
                return frame.values[name]
            declaration = frame.variables.get(name)
            if declaration is None:
                continue
            if name in frame.cache:
                return frame.cache[name]

            key = (id(frame), name)
            if key in self._evaluating:
                raise LessCompileError.at('Recursive variable definition for {0}'.format(name), pos)
            self._evaluating.add(key)
            parens, math_off = self._parens, self._math_off
            self._parens = self._math_off = 0
            try:
                value = self.eval(declaration.value, scope[i:])
            finally:
                self._evaluating.discard(key)
                self._parens, self._math_off = parens, math_off
            frame.cache[name] = value
            return value
        raise LessReferenceError.at('Variable {0} is undefined'.format(name), pos, name=name)

    def eval(self, node, scope):
        """
        Evaluate an expression node to a value.

        :type node: nodes.Node
        :type scope: list[Frame]
        :rtype: Value
        """
        if isinstance(node, nodes.Literal):
            return node.value
        elif isinstance(node, nodes.Variable):
            return self._variable(node, scope)
        elif isinstance(node, nodes.QuotedNode):
            return Quoted(self.interpolate(node.text, scope, node.pos), node.quote, node.escaped)
        elif isinstance(node, nodes.UrlNode):
            return Url(self.eval(node.value, scope), node.base)
        elif isinstance(node, nodes.Operation):
            return self._operation(node, scope)
        elif isinstance(node, nodes.Negative):
            value = self.eval(node.value, scope)
            if isinstance(value, Dimension):
                return Dimension(-value.value, value.unit)
            return Concat([Keyword('-'), value])
        elif isinstance(node, nodes.ParenNode):
            self._parens += 1
            try:
                value = self.eval(node.value, scope)
            finally:
                self._parens -= 1
            return Paren(value) if self._math_off else value
        elif isinstance(node, nodes.CallNode):
            return self._call(node, scope)
        elif isinstance(node, nodes.ListNode):
            return ValueList([self.eval(item, scope) for item in node.items], node.separator)
        elif isinstance(node, nodes.ConcatNode):
            return Concat([self.eval(item, scope) for item in node.items])
        elif isinstance(node, nodes.DetachedRulesetNode):
            return DetachedRuleset(node.rules, scope)
        raise LessCompileError.at('Can not evaluate {0}'.format(node.__class__.__name__), node.pos)

    def _variable(self, node, scope):
        name = node.name
        if name.startswith('@@'):
            inner = self._variable(nodes.Variable(name[1:], node.pos), scope)
            name = '@' + self._text(inner)
        return self.lookup(name, scope, node.pos)

    def _operation(self, node, scope):
        left = self.eval(node.left, scope)
        right = self.eval(node.right, scope)
        literal_division = node.op == '/' and self._parens == 0 and self.math != 'always'
        if self._math_off or literal_division:
            if node.spaced:
                return ValueList([left, Keyword(node.op), right], ' ')
            return Concat([left, Keyword(node.op), right])
        return left.operate(node.op, right, node.pos)

    def _call(self, node, scope):
        name = node.name
        lower = name.lower()
        if lower in CALC_FUNCTIONS:
            self._math_off += 1
            try:
                return Call(name, [self.eval(arg, scope) for arg in node.args])
            finally:
                self._math_off -= 1

        args = [self.eval(arg, scope) for arg in node.args]
        func = functions.available.get(lower)
        if func is None:
            return Call(name, args)

        try:
            inspect.signature(func).bind(*args)
        except TypeError:
            raise LessCompileError.at('Wrong number of arguments for {0}()'.format(name), node.pos)
        try:
            result = func(*args)
        except LessCompileError as e:
            if e.line is not None:
                raise
            raise LessCompileError.at(e.message, node.pos) from e
        return result if result is not None else Call(name, args)

    def interpolate(self, text, scope, pos=None):
        """
        Replace @{name} references in a string with variable values.

        :type text: str
        :type scope: list[Frame]
        :rtype: str
        """
        return INTERPOLATION.sub(lambda m: self._text(self.lookup('@' + m.group(1), scope, pos)), text)

    @staticmethod
    def _text(value):
        if isinstance(value, (Quoted, Keyword)):
            return value.text
        return value.to_css()


def _describe(value):
    if isinstance(value, DetachedRuleset):
        return '{...}'
    return value.to_css()
