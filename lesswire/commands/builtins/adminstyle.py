from lesswire.commands import register


@register(help_args='[TEMPLATE]', help_msg='Compile the admin style if it is out of date')
def adminstyle(app, template='admin'):
    from lesswire.commands import CommandError
    from lesswire.less import LessError
    from lesswire.modules.adminstyle import AdminStyleError

    if not app.is_valid:
        raise CommandError('Need a valid app directory.')

    style = app.settings['admin_style'].get('style')
    if not style:
        raise CommandError('No admin style is set in the \'admin_style.style\' setting.')

    try:
        settings = app.get_module('AdminStyle').load_style(style, template)
        path = app.get_module('AdminTheme').render(settings)
    except (AdminStyleError, LessError) as e:
        raise CommandError(str(e))

    if path is not None:
        print(path)
    return path
