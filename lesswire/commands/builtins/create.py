from lesswire.commands import register


@register(help_args='PATH', help_msg='Create a new app directory')
def create(app, path):
    """
    Create an app directory, with an empty settings file.

    :return: Path of the new app directory.
    :rtype: str
    """
    import os
    from lesswire import abspath
    from lesswire.commands import CommandError
    from lesswire.app import App

    root = abspath(path)
    if not os.path.isdir(os.path.dirname(root)):
        raise CommandError('Parent directory \'{0}\' does not exist'.format(os.path.dirname(root)))
    if os.path.exists(root):
        raise CommandError('Target directory \'{0}\' already exists'.format(root))

    created = App.create(root)
    app.log.info('Created app directory \'%s\'', created.root)
    return created.root
