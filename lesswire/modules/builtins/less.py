import os
from lesswire.modules import register, Module
from lesswire.less import get_engine
from lesswire.less.lessc import Lessc


@register()
class Less(Module):
    """
    Compiles LESS files to CSS.

    Files added to the module are parsed by one parser instance, which is kept until it is reset. Options only take
    effect when the parser is created, so set them before adding files, or reset the parser after changing them.

    Usage::

        less = app.get_module('Less')
        less.set_option('compress', True)
        less.add_file('/path/to/file1.less')
        less.add_file('/path/to/file2.less')
        less.save_css('/path/to/file.min.css')
    """
    summary = 'LESS to CSS compiler'
    singular = False

    DEFAULT_OPTIONS = {
        'compress': False,
        'engine': 'builtin'
    }

    def __init__(self, app):
        super().__init__(app)
        self.options = dict(self.DEFAULT_OPTIONS)
        self.options.update(app.settings.get('less', {}))
        self._parser = None

    def set_options(self, options, reset=False):
        """
        Set multiple options.

        :param options: Option names and values.
        :type options: dict
        :param reset: Replace all previously set options, rather than merging with them.
        :type reset: bool
        :return: This module, for chaining.
        :rtype: Less
        """
        if reset:
            self.options = dict(options)
        else:
            self.options.update(options)
        return self

    def set_option(self, name, value):
        self.options[name] = value
        return self

    def get_options(self):
        return dict(self.options)

    def parser(self, reset=False):
        """
        Get the parser instance. Returns the same instance on each call, until reset.

        :param reset: Create a new parser. A dict is set as options instead, and the current parser is kept.
        :type reset: bool | dict
        :rtype: lesswire.less.Parser | lesswire.less.lesscpy_engine.LesscpyParser
        """
        if isinstance(reset, dict):
            self.set_options(reset)
            reset = False
        if not reset and self._parser is not None:
            return self._parser
        return self.reset_parser()

    def reset_parser(self):
        """
        Create a new parser with the current options, discarding any files added to the old one.

        :rtype: lesswire.less.Parser | lesswire.less.lesscpy_engine.LesscpyParser
        :raises lesswire.less.LessError: If the 'engine' option is not a known engine.
        """
        engine = get_engine(self.options.get('engine', 'builtin'))
        options = dict((key, value) for key, value in self.options.items() if key != 'engine')
        self._parser = engine(options)
        self.app.log.debug('Created %s parser', self.options.get('engine', 'builtin'))
        return self._parser

    def parse_file(self, file, url=''):
        """
        Add a LESS file to parse.

        :param file: LESS file path.
        :type file: str
        :param url: Root url of the file, prepended to relative url() paths.
        :type url: str
        :return: This module, for chaining.
        :rtype: Less
        :raises lesswire.less.LessError: If the file can not be parsed.
        """
        self.parser().parse_file(file, url)
        return self

    def add_file(self, file):
        return self.parse_file(file)

    def add_files(self, files):
        for file in files:
            self.add_file(file)
        return self

    def get_css(self):
        """
        :return: CSS compiled from the added files.
        :rtype: str
        :raises lesswire.less.LessError: If the files can not be compiled.
        """
        return self.parser().get_css()

    def save_css(self, file, css=None, replacements=None):
        """
        Save CSS to a file.

        :param file: File path to write to. Missing parent directories are created.
        :type file: str
        :param css: CSS to save, if None or empty the CSS compiled from the added files is saved.
        :type css: str | None
        :param replacements: Strings to find and replace in the CSS before saving, applied in order.
        :type replacements: dict[str, str] | None
        :return: Number of bytes written, or None if there was nothing to write.
        :rtype: int | None
        :raises OSError: If the file could not be written.
        """
        if not css:
            css = self.get_css()
        if not css:
            self.app.log.info('Nothing to write to \'%s\'', file)
            return None

        for find, replace in (replacements or {}).items():
            css = css.replace(find, replace)

        file = os.path.abspath(file)
        os.makedirs(os.path.dirname(file), exist_ok=True)
        data = css.encode('utf-8')
        with open(file, 'wb') as fh:
            fh.write(data)
        self.app.log.info('Wrote %d bytes to \'%s\'', len(data), file)
        return len(data)

    # noinspection PyMethodMayBeStatic
    def lessc(self):
        """
        Get a new compiler with the lessphp `lessc` interface. It is separate from this module's parser and options.

        :rtype: Lessc
        """
        return Lessc()
