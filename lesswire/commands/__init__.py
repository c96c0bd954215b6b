available = {}
""":type: dict[str, Command]"""


class Command:
    """
    A command line command: the function run and its usage texts.
    """
    def __init__(self, func, name, help_args, help_msg):
        """
        :param func: Function called with the App instance, followed by the command's arguments.
        :type func: callable[lesswire.app.App, *str]
        :param name: Name the command is run by.
        :type name: str
        :param help_args: Usage text describing arguments.
        :type help_args: str
        :param help_msg: Usage text describing the command's purpose.
        :type help_msg: str
        """
        self.func = func
        self.name = name
        self.help_args = help_args
        self.help_msg = help_msg


# noinspection PyPep8Naming
class register:
    """
    Decorator to add a function to the available commands.
    """
    def __init__(self, name=None, help_args='', help_msg=''):
        """
        :param name: Name of the command, if None, the name of the function is used.
        :type name: str | None
        :param help_args: Usage text describing arguments.
        :type help_args: str
        :param help_msg: Usage text describing the command's purpose.
        :type help_msg: str
        """
        self.name = name
        self.help_args = help_args
        self.help_msg = help_msg

    def __call__(self, func):
        global available
        command = Command(func, self.name or func.__name__, self.help_args, self.help_msg)
        available[command.name] = command
        return func


class CommandError(Exception):
    pass
