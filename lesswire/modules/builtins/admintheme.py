from lesswire.modules import register, Module


@register()
class AdminTheme(Module):
    summary = 'Compiles admin styles'

    def render(self, settings):
        """
        Compile an admin style if it needs compiling.

        :param settings: Settings from AdminStyle.load_style.
        :type settings: lesswire.modules.adminstyle.AdminStyleSettings | None
        :return: Compiled CSS file path, or None if there are no settings.
        :rtype: str | None
        :raises lesswire.less.LessError: If the style can not be compiled.
        """
        if settings is None:
            return None
        if not settings.recompile:
            return settings.custom_css_file

        less = self.app.get_module('Less')
        less.set_option('compress', settings.compress)
        parser = less.parser(reset=True)
        if settings.vars:
            parser.modify_vars(settings.vars)
        less.add_file(settings.style)
        less.save_css(settings.custom_css_file)
        self.app.log.info('Compiled admin style \'%s\' to \'%s\'', settings.style, settings.custom_css_file)
        return settings.custom_css_file
