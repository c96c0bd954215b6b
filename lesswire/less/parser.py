import os
from lesswire.less import nodes
from lesswire.less.lexer import Lexer
from lesswire.less.grammar import Grammar
from lesswire.less.evaluator import Evaluator, Frame
from lesswire.less.emitter import Emitter
from lesswire.less.errors import LessImportError

DEFAULT_OPTIONS = {
    'compress': False,
    'math': 'parens-division',
    'import_dirs': [],
    'max_depth': 64,
}


class Parser:
    """
    Compiles LESS source to CSS. Files and source strings added to a parser share one stylesheet, so variables and
    mixins declared in one are visible to all of them.
    """
    def __init__(self, options=None):
        """
        :param options: Options to set over DEFAULT_OPTIONS. Unknown keys are kept, but unused.
        :type options: dict | None
        """
        self.options = dict(DEFAULT_OPTIONS)
        if options is not None:
            self.options.update(options)
        self.rules = []
        self.variables = {}
        self.parsed_files = []
        self._imported = set()

    def reset(self):
        """
        Discard all parsed files, source strings and modified variables.
        """
        self.rules = []
        self.variables = {}
        self.parsed_files = []
        self._imported = set()

    def parse(self, text, filename=None, uri_root=''):
        """
        Add LESS source text to the stylesheet.

        :param text: LESS source.
        :type text: str
        :param filename: File name used in error messages, and to resolve relative imports.
        :type filename: str | None
        :param uri_root: Root url prepended to relative url() paths.
        :type uri_root: str
        :return: This parser, for chaining.
        :rtype: Parser
        :raises LessError: If the source, or a file it imports, can not be parsed.
        """
        rules = Grammar(Lexer(text, filename).tokenize(), uri_root).parse()
        self.rules.extend(self._resolve_imports(rules, rules, filename, uri_root, []))
        return self

    def parse_file(self, path, uri_root=''):
        """
        Add a LESS file to the stylesheet.

        :param path: File path to parse.
        :type path: str
        :param uri_root: Root url prepended to relative url() paths.
        :type uri_root: str
        :return: This parser, for chaining.
        :rtype: Parser
        :raises LessImportError: If the file does not exist or can not be read.
        :raises LessError: If the file, or a file it imports, can not be parsed.
        """
        path = os.path.abspath(path)
        text = self._read(path, None)
        self.parsed_files.append(path)
        self._imported.add(path)
        rules = Grammar(Lexer(text, path).tokenize(), uri_root).parse()
        self.rules.extend(self._resolve_imports(rules, rules, path, uri_root, [path]))
        return self

    def modify_vars(self, variables):
        """
        Set variables that override the ones declared at the top level of every added file.

        :param variables: Variable names, with or without the leading '@', and LESS values.
        :type variables: dict[str, object]
        :return: This parser, for chaining.
        :rtype: Parser
        """
        for name, value in variables.items():
            name = name if name.startswith('@') else '@' + name
            self.variables[name] = value
        return self

    def get_css(self):
        """
        Compile everything added to the parser.

        :return: Compiled CSS.
        :rtype: str
        :raises LessError: If the stylesheet can not be compiled.
        """
        rules = self.rules + self._variable_rules()
        css_nodes = Evaluator(self.options).evaluate(rules)
        return Emitter(self.options.get('compress', False)).emit(css_nodes)

    def all_parsed_files(self):
        """
        :return: Paths of every file parsed, including imported files.
        :rtype: list[str]
        """
        return list(self.parsed_files)

    def _variable_rules(self):
        rules = []
        for name, value in self.variables.items():
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            grammar = Grammar(Lexer(str(value), '<{0}>'.format(name)).tokenize())
            grammar.skip_ws()
            rules.append(nodes.VariableDeclaration(name, grammar.parse_value()))
        return rules

    @staticmethod
    def _read(path, pos):
        if not os.path.isfile(path):
            raise LessImportError.at('File \'{0}\' was not found'.format(path), pos)
        try:
            with open(path, encoding='utf-8') as fh:
                return fh.read()
        except (OSError, UnicodeDecodeError) as e:
            raise LessImportError.at('Could not read \'{0}\': {1}'.format(path, e), pos)

    def _resolve_imports(self, rules, root, filename, uri_root, chain):
        """
        Replace @import statements, including ones nested in blocks, with the rules they import.

        :param rules: Statements to resolve.
        :type rules: list[nodes.Node]
        :param root: Top level statements of the file, used to interpolate variables in import paths.
        :type root: list[nodes.Node]
        :param filename: Path of the file the statements are from, or None.
        :type filename: str | None
        :param chain: Paths of the files currently being imported, outermost first.
        :type chain: list[str]
        :rtype: list[nodes.Node]
        """
        resolved = []
        for rule in rules:
            if isinstance(rule, nodes.Import):
                resolved.extend(self._import(rule, root, filename, uri_root, chain))
                continue
            if isinstance(rule, (nodes.Ruleset, nodes.MixinDefinition)) or \
                    (isinstance(rule, nodes.AtRule) and rule.rules is not None):
                rule.rules = self._resolve_imports(rule.rules, root, filename, uri_root, chain)
            resolved.append(rule)
        return resolved

    def _import_path(self, rule, root):
        path = rule.path
        if isinstance(path, nodes.UrlNode):
            path = path.value
        if isinstance(path, nodes.QuotedNode):
            scope = [Frame(root), Frame(self.rules)]
            return Evaluator(self.options).interpolate(path.text, scope, path.pos)
        if isinstance(path, nodes.Literal):
            return path.value.to_css()
        return None

    def _import(self, rule, root, filename, uri_root, chain):
        name = self._import_path(rule, root)
        options = rule.options
        is_url = isinstance(rule.path, nodes.UrlNode)

        if name is None or 'css' in options:
            return [nodes.CssImport(rule.path, rule.media, rule.pos)]
        if 'less' not in options and 'inline' not in options:
            if is_url or name.lower().endswith('.css') or '://' in name or name.startswith('//'):
                return [nodes.CssImport(rule.path, rule.media, rule.pos)]

        if not os.path.splitext(os.path.basename(name))[1]:
            name += '.less'
        path = self._find(name, filename, rule.pos)

        if 'inline' in options:
            imported = [nodes.InlineCss(self._read(path, rule.pos), rule.pos)]
        else:
            if path in self._imported and 'multiple' not in options:
                return []
            if path in chain:
                raise LessImportError.at('Recursive import of \'{0}\''.format(path), rule.pos)
            self._imported.add(path)
            self.parsed_files.append(path)
            text = self._read(path, rule.pos)
            rules = Grammar(Lexer(text, path).tokenize(), uri_root).parse()
            imported = self._resolve_imports(rules, rules, path, uri_root, chain + [path])

        if 'reference' in options:
            imported = [nodes.Reference(imported, rule.pos)]
        if rule.media:
            imported = [nodes.AtRule('@media', rule.media, imported, rule.pos)]
        return imported

    def _find(self, name, filename, pos):
        if os.path.isabs(name):
            candidates = [name]
        else:
            directories = [os.path.dirname(filename) if filename else os.getcwd()]
            directories.extend(self.options.get('import_dirs') or [])
            candidates = [os.path.join(directory, name) for directory in directories]

        for candidate in candidates:
            if os.path.isfile(candidate):
                return os.path.abspath(candidate)
        raise LessImportError.at('File \'{0}\' was not found'.format(name), pos)
