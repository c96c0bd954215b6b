from lesswire.commands import register


@register(name='commands', help_msg='List available commands')
def list_commands(app):
    """
    Print usage for every available command.

    :param app: App instance to get commands for.
    :type app: lesswire.app.App
    """
    commands = sorted(app.commands.values(), key=lambda c: c.name)
    usages = [' '.join(part for part in (c.name, c.help_args) if part) for c in commands]
    width = max(14, max(len(usage) for usage in usages)) + 4

    for usage, command in zip(usages, commands):
        print('  {0}{1}'.format(usage.ljust(width), command.help_msg))
