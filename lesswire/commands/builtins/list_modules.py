from lesswire.commands import register


@register(name='modules', help_msg='List available modules')
def list_modules(app):
    """
    Print available module information.

    :param app: App instance to get modules for.
    :type app: lesswire.app.App
    """
    if len(app.module_classes) == 0:
        return

    name_align = max(14, max([len(name) + 1 for name in app.module_classes]))
    for name in sorted(app.module_classes):
        print('{0}    {1}'.format(name.rjust(name_align), app.module_classes[name].summary).rstrip())
