from lesswire.commands import register


def _module_call(app, name, method):
    from lesswire.commands import CommandError
    from lesswire.app import AppError

    if not app.is_valid:
        raise CommandError('Need a valid app directory.')
    try:
        getattr(app, method)(name)
    except AppError as e:
        raise CommandError(str(e))


@register(help_args='MODULE', help_msg='Run a module\'s install step')
def install(app, name):
    _module_call(app, name, 'install_module')


@register(help_args='MODULE', help_msg='Run a module\'s uninstall step')
def uninstall(app, name):
    _module_call(app, name, 'uninstall_module')
