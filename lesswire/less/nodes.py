"""
Parse tree nodes. Statement nodes make up stylesheet and block bodies, expression nodes make up declaration and
variable values. Every node keeps the (filename, line, column) position it was parsed at.
"""


class Node:
    pos = None


# Expressions

class Literal(Node):
    def __init__(self, value, pos=None):
        """
        :type value: lesswire.less.values.Value
        """
        self.value = value
        self.pos = pos


class QuotedNode(Node):
    def __init__(self, text, quote, escaped=False, pos=None):
        self.text = text
        self.quote = quote
        self.escaped = escaped
        self.pos = pos


class UrlNode(Node):
    def __init__(self, value, base='', pos=None):
        self.value = value
        self.base = base
        self.pos = pos


class Variable(Node):
    def __init__(self, name, pos=None):
        """
        :param name: Variable name including the leading '@' (or '@@' for variable variables.)
        :type name: str
        """
        self.name = name
        self.pos = pos


class Operation(Node):
    def __init__(self, op, left, right, spaced=True, pos=None):
        self.op = op
        self.left = left
        self.right = right
        self.spaced = spaced
        self.pos = pos


class Negative(Node):
    def __init__(self, value, pos=None):
        self.value = value
        self.pos = pos


class ParenNode(Node):
    def __init__(self, value, pos=None):
        self.value = value
        self.pos = pos


class CallNode(Node):
    def __init__(self, name, args, pos=None):
        self.name = name
        self.args = args
        self.pos = pos


class ListNode(Node):
    def __init__(self, items, separator, pos=None):
        self.items = items
        self.separator = separator
        self.pos = pos


class ConcatNode(Node):
    def __init__(self, items, pos=None):
        self.items = items
        self.pos = pos


class DetachedRulesetNode(Node):
    def __init__(self, rules, pos=None):
        self.rules = rules
        self.pos = pos


# Statements

class Comment(Node):
    def __init__(self, text, pos=None):
        self.text = text
        self.pos = pos


class Declaration(Node):
    def __init__(self, name, value, important=False, pos=None):
        """
        :param name: Property name parts, plain strings or Variable nodes for interpolations.
        :type name: list[str | Variable]
        :type value: Node
        :type important: bool
        """
        self.name = name
        self.value = value
        self.important = important
        self.pos = pos


class VariableDeclaration(Node):
    def __init__(self, name, value, pos=None):
        self.name = name
        self.value = value
        self.pos = pos


class Selector(Node):
    def __init__(self, tokens, pos=None):
        """
        :param tokens: Raw selector tokens, rendered during evaluation once interpolations are known.
        :type tokens: list[lesswire.less.tokens.Token]
        """
        self.tokens = tokens
        self.pos = pos
        self.keys = _mixin_keys(tokens)


class Ruleset(Node):
    def __init__(self, selector, rules, guard=None, pos=None):
        self.selector = selector
        self.rules = rules
        self.guard = guard
        self.pos = pos


class Param(Node):
    def __init__(self, name=None, default=None, pattern=None, rest=False, pos=None):
        self.name = name
        self.default = default
        self.pattern = pattern
        self.rest = rest
        self.pos = pos


class MixinDefinition(Node):
    def __init__(self, name, params, rules, guard=None, pos=None):
        """
        :param name: Mixin name including its '.' or '#' prefix.
        :type name: str
        :type params: list[Param]
        :type rules: list[Node]
        :type guard: Guard | None
        """
        self.name = name
        self.params = params
        self.rules = rules
        self.guard = guard
        self.pos = pos

    @property
    def variadic(self):
        return any(param.rest for param in self.params)


class Arg(Node):
    def __init__(self, name, value, pos=None):
        self.name = name
        self.value = value
        self.pos = pos


class MixinCall(Node):
    def __init__(self, path, args, important=False, pos=None):
        """
        :param path: Mixin selector elements, e.g. ['#namespace', '.mixin'].
        :type path: list[str]
        :type args: list[Arg]
        """
        self.path = path
        self.args = args
        self.important = important
        self.pos = pos

    @property
    def name(self):
        return ' > '.join(self.path)


class DetachedCall(Node):
    def __init__(self, name, pos=None):
        self.name = name
        self.pos = pos


class AtRule(Node):
    def __init__(self, name, prelude, rules=None, pos=None):
        """
        :param name: At-rule name, including the '@'.
        :type name: str
        :param prelude: Raw tokens between the name and the block or semicolon.
        :type prelude: list[lesswire.less.tokens.Token]
        :param rules: Block body, or None for statement at-rules.
        :type rules: list[Node] | None
        """
        self.name = name
        self.prelude = prelude
        self.rules = rules
        self.pos = pos


class Import(Node):
    def __init__(self, path, options, media, pos=None):
        """
        :param path: Path expression, a QuotedNode or UrlNode.
        :type path: Node
        :param options: Import options such as 'css', 'less', 'inline', 'reference', 'once', 'multiple'.
        :type options: set[str]
        :param media: Raw media query tokens following the path.
        :type media: list[lesswire.less.tokens.Token]
        """
        self.path = path
        self.options = options
        self.media = media
        self.pos = pos


class CssImport(Node):
    """
    An import left for the browser to resolve, output as an @import directive.
    """
    def __init__(self, path, media, pos=None):
        self.path = path
        self.media = media
        self.pos = pos


class InlineCss(Node):
    def __init__(self, text, pos=None):
        self.text = text
        self.pos = pos


class Reference(Node):
    """
    Rules imported with the (reference) option. Their variables and mixins are usable, but nothing is output.
    """
    def __init__(self, rules, pos=None):
        self.rules = rules
        self.pos = pos


class Condition(Node):
    def __init__(self, left, op=None, right=None, negate=False, pos=None):
        self.left = left
        self.op = op
        self.right = right
        self.negate = negate
        self.pos = pos


class Guard(Node):
    def __init__(self, groups, pos=None):
        """
        :param groups: Conditions; the guard passes if all conditions of any one group pass.
        :type groups: list[list[Condition]]
        """
        self.groups = groups
        self.pos = pos


def _mixin_keys(tokens):
    """
    Get the names a ruleset can be mixed in by: each comma separated selector consisting of a single class or id.

    :type tokens: list[lesswire.less.tokens.Token]
    :rtype: list[str]
    """
    from lesswire.less import tokens as t

    keys = []
    part = []
    for token in tokens + [None]:
        if token is None or token.type == t.COMMA:
            if len(part) == 2 and part[0].is_delim('.') and part[1].type == t.IDENT:
                keys.append('.' + part[1].value)
            elif len(part) == 1 and part[0].type == t.HASH:
                keys.append(part[0].value)
            part = []
        elif token.type not in (t.WS, t.COMMENT):
            part.append(token)
    return keys
