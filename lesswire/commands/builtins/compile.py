from lesswire.commands import register


@register(name='compile', help_args='OUTPUT SOURCE [SOURCE]...', help_msg='Compile LESS files to a CSS file')
def compile_css(app, output, *sources):
    """
    Compile LESS files, in order, to a single CSS file.

    :return: Number of bytes written.
    :rtype: int
    """
    from lesswire.commands import CommandError
    from lesswire.less import LessError

    if not sources:
        raise CommandError('No LESS files to compile')

    less = app.get_module('Less')
    try:
        less.add_files(sources)
        written = less.save_css(output)
    except LessError as e:
        raise CommandError(str(e))
    if written is None:
        raise CommandError('Nothing to write, compiled CSS is empty')
    return written
