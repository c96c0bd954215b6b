import os
from collections import namedtuple

AdminStyleSettings = namedtuple('AdminStyleSettings', ['style', 'compress', 'custom_css_file', 'recompile', 'vars'])


class AdminStyleError(Exception):
    pass


class AdminStyle:
    """
    Mixin for modules providing an admin theme style. load_style decides where the compiled style goes and whether it
    needs compiling, returning settings for the admin theme to render with. Compiled styles are deleted when the
    module is installed or uninstalled, so they are rebuilt with the module's current variables.

    Classes using this mixin need an `app` attribute, as Module subclasses have.
    """
    COMPILED_NAME = 'admin'

    def compiled_path(self, compress):
        """
        :param compress: Get the path of the minified file.
        :type compress: bool
        :rtype: str
        """
        suffix = '.min.css' if compress else '.css'
        return os.path.join(self.app.assets_root, self.COMPILED_NAME + suffix)

    def load_style(self, style, template):
        """
        Get settings for compiling a LESS style for the admin theme.

        :param style: LESS style file path, relative paths are relative to the app root.
        :type style: str
        :param template: Template of the page being rendered.
        :type template: str
        :return: Style settings, or None if the template is not the admin template.
        :rtype: AdminStyleSettings | None
        :raises AdminStyleError: If the style file does not exist.
        """
        if template != self.app.settings['admin_style'].get('template', 'admin'):
            return None

        style = os.path.join(self.app.root, style)
        if not os.path.isfile(style):
            raise AdminStyleError('Admin style \'{0}\' does not exist'.format(style))

        compress = not self.app.settings.get('debug', False)
        compiled = self.compiled_path(compress)
        recompile = not os.path.isfile(compiled) or os.path.getmtime(style) > os.path.getmtime(compiled)

        return AdminStyleSettings(style, compress, compiled, recompile, self.get_style_vars())

    # noinspection PyMethodMayBeStatic
    def get_style_vars(self):
        """
        LESS variables to compile the style with. Style modules override this to set their own.

        :rtype: dict[str, object]
        """
        return {}

    def reset_admin_style(self):
        """
        Delete compiled admin styles, forcing them to be recompiled.
        """
        for compress in (False, True):
            path = self.compiled_path(compress)
            if not os.path.isfile(path):
                continue
            try:
                os.unlink(path)
                self.app.log.info('Deleted compiled admin style \'%s\'', path)
            except OSError as e:
                self.app.log.warning('Could not delete compiled admin style \'%s\': %s', path, e)

    def install(self):
        self.reset_admin_style()

    def uninstall(self):
        self.reset_admin_style()
