import os
from lesswire.less.parser import Parser

FORMATTERS = {
    'compressed': True,
    'lessjs': False,
    'classic': False,
}


class Lessc:
    """
    Compiler with the interface of the lessphp `lessc` class. Every compile call starts from a fresh Parser, set up
    with this instance's variables, import directories and formatter.
    """
    def __init__(self):
        self.variables = {}
        self.import_dirs = []
        self.compress = False

    def _parser(self):
        parser = Parser({'compress': self.compress, 'import_dirs': list(self.import_dirs)})
        if self.variables:
            parser.modify_vars(self.variables)
        return parser

    def compile(self, text, name=None):
        """
        Compile a LESS source string.

        :param text: LESS source.
        :type text: str
        :param name: File name used in error messages.
        :type name: str | None
        :rtype: str
        """
        return self._parser().parse(text, name).get_css()

    def compile_file(self, path, out=None):
        """
        Compile a LESS file, optionally writing the result.

        :param path: LESS file path.
        :type path: str
        :param out: File path to write the CSS to, if None the CSS is returned instead.
        :type out: str | None
        :return: Compiled CSS, or the number of bytes written if out is set.
        :rtype: str | int
        """
        css = self._parser().parse_file(path).get_css()
        if out is None:
            return css
        with open(out, 'w', encoding='utf-8') as fh:
            return fh.write(css)

    def checked_compile(self, path, out):
        """
        Compile a LESS file to an output file, only if the output does not exist or is older than the input.

        :return: True if the file was compiled.
        :rtype: bool
        """
        if not os.path.isfile(out) or os.path.getmtime(path) > os.path.getmtime(out):
            self.compile_file(path, out)
            return True
        return False

    def set_variables(self, variables):
        self.variables.update(variables)

    def unset_variable(self, name):
        self.variables.pop(name, None)
        self.variables.pop(name.lstrip('@'), None)

    def set_formatter(self, name):
        """
        :param name: 'compressed', 'lessjs' or 'classic'.
        :type name: str
        :raises ValueError: If the formatter name is unknown.
        """
        if name not in FORMATTERS:
            raise ValueError('Unknown formatter \'{0}\''.format(name))
        self.compress = FORMATTERS[name]

    def set_import_dir(self, dirs):
        self.import_dirs = list(dirs) if isinstance(dirs, (list, tuple)) else [dirs]

    def add_import_dir(self, directory):
        self.import_dirs.append(directory)
