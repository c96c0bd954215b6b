"""
LESS to CSS compiler.

Source text is tokenized by the Lexer, built into a rule tree by the Grammar, resolved by the Evaluator and written out
as CSS by the Emitter. Parser ties these together and resolves @imports.
"""
from lesswire.less.errors import LessError, LessSyntaxError, LessReferenceError, LessImportError, LessCompileError
from lesswire.less.parser import Parser


def get_engine(name):
    """
    Get a parser class by engine name.

    :param name: 'builtin' for the bundled compiler, or 'lesscpy'.
    :type name: str
    :rtype: type
    :raises LessError: If the engine name is unknown.
    """
    if name == 'builtin':
        return Parser
    elif name == 'lesscpy':
        from lesswire.less.lesscpy_engine import LesscpyParser
        return LesscpyParser
    raise LessError('Unknown LESS engine \'{0}\''.format(name))


def compile_less(text, **options):
    """
    Compile a LESS source string with the bundled compiler.

    :param text: LESS source.
    :type text: str
    :param options: Parser options.
    :rtype: str
    """
    return Parser(options).parse(text).get_css()
