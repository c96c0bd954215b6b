import re
from collections import namedtuple


class CssRule:
    """
    Flattened rule: a list of complete selectors and the declarations they share. Rules with no selectors hold
    declarations written directly inside an at-rule block, such as @font-face.
    """
    def __init__(self, selectors, declarations=None):
        """
        :type selectors: list[str]
        :type declarations: list[CssDeclaration | CssComment] | None
        """
        self.selectors = selectors
        self.declarations = declarations if declarations is not None else []


class CssAtBlock:
    def __init__(self, name, prelude, children=None):
        self.name = name
        self.prelude = prelude
        self.children = children if children is not None else []


CssDeclaration = namedtuple('CssDeclaration', ['name', 'value', 'important'])
CssComment = namedtuple('CssComment', ['text'])
CssDirective = namedtuple('CssDirective', ['text'])
CssRaw = namedtuple('CssRaw', ['text'])


STRING = re.compile(r'("(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\')')


def _outside_strings(text, replace):
    # Odd pieces of the split are quoted strings, which are kept as written.
    pieces = STRING.split(text)
    return ''.join(piece if i % 2 else replace(piece) for i, piece in enumerate(pieces))


def compress_selector(selector):
    return _outside_strings(selector, lambda text: re.sub(r'\s*([>+~,])\s*', r'\1', text))


def compress_prelude(name, prelude):
    if name.lower() in ('@media', '@supports'):
        prelude = _outside_strings(prelude, lambda text: re.sub(r'\s*([:,])\s*', r'\1', text))
    return prelude


class Emitter:
    """
    Serializes flattened CSS nodes to text, either indented or compressed.
    """
    INDENT = '  '

    def __init__(self, compress=False):
        """
        :param compress: Remove whitespace and comments from the output.
        :type compress: bool
        """
        self.compress = compress

    def emit(self, nodes):
        """
        Serialize top level nodes. A single @charset goes first, followed by CSS @imports, followed by everything
        else in order.

        :type nodes: list
        :rtype: str
        """
        charset = []
        imports = []
        rest = []
        for node in nodes:
            if isinstance(node, CssDirective) and node.text.lower().startswith('@charset'):
                if not charset:
                    charset.append(node)
            elif isinstance(node, CssDirective) and node.text.lower().startswith('@import'):
                imports.append(node)
            else:
                rest.append(node)

        out = []
        for node in charset + imports + rest:
            self._node(node, 0, out)
        return ''.join(out)

    def _node(self, node, depth, out):
        indent = '' if self.compress else self.INDENT * depth

        if isinstance(node, CssRule):
            self._rule(node, depth, out)
        elif isinstance(node, CssAtBlock):
            self._at_block(node, depth, out)
        elif isinstance(node, CssDirective):
            out.append(node.text + ';' if self.compress else indent + node.text + ';\n')
        elif isinstance(node, CssComment):
            if not self.compress:
                out.append(indent + node.text + '\n')
        elif isinstance(node, CssRaw):
            text = node.text.strip()
            if text:
                out.append(text if self.compress else text + '\n')

    def _declaration(self, declaration):
        value = declaration.value.to_css(self.compress)
        if self.compress:
            return '{0}:{1}{2}'.format(declaration.name, value, '!important' if declaration.important else '')
        return '{0}: {1}{2};'.format(declaration.name, value, ' !important' if declaration.important else '')

    def _rule(self, rule, depth, out):
        # Selectorless rules hold the comments of their enclosing block, and keep them when uncompressed.
        if not any(isinstance(d, CssDeclaration) for d in rule.declarations) and (rule.selectors or self.compress):
            return

        if self.compress:
            body = ';'.join(self._declaration(d) for d in rule.declarations if isinstance(d, CssDeclaration))
            if rule.selectors:
                out.append(','.join(compress_selector(s) for s in rule.selectors) + '{' + body + '}')
            else:
                out.append(body)
            return

        inner = depth + 1 if rule.selectors else depth
        indent = self.INDENT * depth
        if rule.selectors:
            out.append(',\n'.join(indent + selector for selector in rule.selectors) + ' {\n')
        for declaration in rule.declarations:
            if isinstance(declaration, CssComment):
                out.append(self.INDENT * inner + declaration.text + '\n')
            else:
                out.append(self.INDENT * inner + self._declaration(declaration) + '\n')
        if rule.selectors:
            out.append(indent + '}\n')

    def _at_block(self, block, depth, out):
        if self.compress:
            body = self._join_compressed(block.children, depth)
            if body:
                prelude = compress_prelude(block.name, block.prelude)
                out.append(block.name + (' ' + prelude if prelude else '') + '{' + body + '}')
            return

        children = []
        for child in block.children:
            self._node(child, depth + 1, children)
        if not children:
            return

        indent = self.INDENT * depth
        head = block.name + (' ' + block.prelude if block.prelude else '')
        out.append(indent + head + ' {\n' + ''.join(children) + indent + '}\n')

    def _join_compressed(self, nodes, depth):
        """
        Join compressed block children. A run of bare declarations is a rule body without braces, so it needs a ';'
        before whatever follows it.
        """
        pieces = []
        for node in nodes:
            rendered = []
            self._node(node, depth + 1, rendered)
            if rendered:
                pieces.append((''.join(rendered), isinstance(node, CssRule) and not node.selectors))
        out = []
        for i, (text, bare) in enumerate(pieces):
            out.append(text)
            if bare and i < len(pieces) - 1:
                out.append(';')
        return ''.join(out)
