import inspect

available = {}
""":type: dict[str, list[type]]"""


class Module:
    """
    Base class for app modules. An App creates modules when they are requested with App.get_module, singular modules
    are created once and shared, others are created anew for every request.
    """
    # Name modules are requested by, None will use __class__.__name__
    name = None
    """:type: str | None"""

    singular = True
    """:type: bool"""

    # One line description, shown by the modules command.
    summary = ''
    """:type: str"""

    def __init__(self, app):
        """
        :param app: Parent App instance.
        :type app: lesswire.app.App
        """
        self.app = app

    @classmethod
    def module_name(cls):
        return cls.name or cls.__name__

    def init(self):
        """
        Called after the module is created, before it is returned to the requester.
        """
        pass

    def install(self):
        pass

    def uninstall(self):
        pass


# noinspection PyPep8Naming
class register:
    """
    Decorator to add Module class definitions to the list of available modules.
    """
    def __init__(self):
        self.module_name = inspect.getmodule(inspect.stack()[1][0]).__name__

    def __call__(self, cls):
        global available
        if self.module_name not in available:
            available[self.module_name] = []
        if cls not in available[self.module_name]:
            available[self.module_name].append(cls)
        return cls
