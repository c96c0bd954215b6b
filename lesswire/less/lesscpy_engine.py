import io
from lesscpy.lessc import parser, formatter
from lesswire.less.errors import LessError, LessSyntaxError


class LesscpyParser:
    """
    Parser engine backed by the lesscpy compiler. Each file is compiled on its own, so variables and mixins are not
    shared between added files.
    """
    def __init__(self, options=None):
        """
        :param options: Engine options, only 'compress' is used.
        :type options: dict | None
        """
        self.options = dict(options or {})
        self.results = []
        self.parsed_files = []

    def reset(self):
        self.results = []
        self.parsed_files = []

    def _format(self, less_parser):
        return formatter.Formatter(self._LessOpts(self.options.get('compress', False))).format(less_parser)

    def parse_file(self, path, uri_root=''):
        """
        Compile a LESS file and keep the result.

        :param path: LESS file path.
        :type path: str
        :param uri_root: Unused, lesscpy does not rewrite urls.
        :type uri_root: str
        :return: This parser, for chaining.
        :rtype: LesscpyParser
        :raises LessSyntaxError: If lesscpy fails to parse the file.
        """
        less_parser = parser.LessParser(fail_with_exc=True)
        try:
            less_parser.parse(filename=path)
            self.results.append(self._format(less_parser))
        except Exception as e:
            raise LessSyntaxError(str(e), filename=path) from e
        self.parsed_files.append(path)
        return self

    def parse(self, text, filename=None, uri_root=''):
        less_parser = parser.LessParser(fail_with_exc=True)
        try:
            less_parser.parse(file=io.StringIO(text))
            self.results.append(self._format(less_parser))
        except Exception as e:
            raise LessSyntaxError(str(e), filename=filename) from e
        return self

    def modify_vars(self, variables):
        if variables:
            raise LessError('The lesscpy engine does not support modifying variables')
        return self

    def get_css(self):
        return ''.join(self.results)

    def all_parsed_files(self):
        return list(self.parsed_files)

    class _LessOpts:
        def __init__(self, minify=False):
            self.minify = minify
            self.xminify = False
            self.tabs = False
            self.spaces = True
