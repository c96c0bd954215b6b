from lesswire.commands import register


@register(help_msg='Delete compiled admin styles')
def reset(app):
    from lesswire.commands import CommandError

    if app.is_valid:
        app.get_module('AdminStyle').reset_admin_style()
    else:
        raise CommandError('Need a valid app directory.')
