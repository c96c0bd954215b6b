import os
import copy
import json
import logging
import logging.handlers
import importlib
from lesswire import abspath, modules, commands
from lesswire.app.config import DEFAULT_SETTINGS, load_settings

BUILTIN_MODULES = [
    'builtins.less',
    'builtins.adminstyle',
    'builtins.admintheme',
]


class InvalidAppRoot(Exception):
    pass


class AppError(Exception):
    pass


class App:
    CONFIG_NAME = 'lesswire.json'

    def __init__(self, root=None):
        """
        Initialize a new App instance for the given app directory.

        :param root: App directory path root to initialize at. If None the current working directory will be used.
        :type root: str | None
        :raises InvalidAppRoot: If root is given, but is not an app directory.
        :raises AppError: If the settings file is malformed, or a module listed in it can not be loaded.
        """
        # If root is None, then try to use the current directory. If it doesn't work then just set is_valid to false.
        # If it is set, and the directory is invalid, then raise InvalidAppRoot
        raise_invalid = root is not None
        root = root if root is not None else './'

        # Set app path directories
        self.root = abspath(root)
        self.store_root = os.path.realpath(os.path.join(self.root, 'store'))
        self.log_root = os.path.realpath(os.path.join(self.store_root, 'log'))
        self.config_path = os.path.realpath(os.path.join(self.root, self.CONFIG_NAME))
        self.is_valid = os.path.isdir(self.root) and os.path.isfile(self.config_path)

        if not self.is_valid and raise_invalid:
            raise InvalidAppRoot('App root \'{0}\' does not exist or is not a valid app directory.'.format(self.root))

        self.settings = copy.deepcopy(DEFAULT_SETTINGS)
        self.commands = {}
        self.module_classes = {}
        self.modules = {}

        # Import builtin commands
        importlib.import_module('lesswire.commands.builtins')
        self.commands.update(commands.available)

        # Configure logging. Loggers are shared between App instances, so drop handlers a previous App added.
        self.log = logging.getLogger('lesswire')
        self.log.setLevel(logging.DEBUG)
        for handler in list(self.log.handlers):
            self.log.removeHandler(handler)
            handler.close()
        formatter = logging.Formatter('%(asctime)s %(levelname)s: %(message)s')
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.INFO)
        self.log.addHandler(console_handler)

        if self.is_valid:
            # Config logging
            os.makedirs(self.log_root, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(os.path.join(self.log_root, 'app.log'),
                                                                encoding='utf-8',
                                                                maxBytes=2 * 1024 * 1024,
                                                                backupCount=2)
            file_handler.setFormatter(formatter)
            self.log.addHandler(file_handler)

            # Get settings
            try:
                self.settings = load_settings(self.config_path)
            except ValueError as e:
                raise AppError('Could not load config: \'{0}\''.format(e))

        self.assets_root = os.path.realpath(os.path.join(self.root, self.settings['paths']['assets']))

        # Load modules
        for module in BUILTIN_MODULES + list(self.settings.get('modules', [])):
            self.load_module(module)

    def load_module(self, module):
        """
        Import a Python module and make the Module classes it registers available.

        :param module: Python module path. Paths starting with 'builtins.' are builtin modules.
        :type module: str
        :raises AppError: If the module can not be imported.
        """
        if module.startswith('builtins.'):
            module = 'lesswire.modules.' + module
        try:
            importlib.import_module(module)
        except Exception as e:
            raise AppError('Unable to load module \'{0}\': {1}'.format(module, e))
        for cls in modules.available.get(module, []):
            self.module_classes[cls.module_name()] = cls
        # Modules may register their own commands.
        self.commands.update(commands.available)

    def get_module(self, name):
        """
        Get a module instance. Singular modules are created once, others are created on every call.

        :param name: Name of the module.
        :type name: str
        :rtype: lesswire.modules.Module
        :raises AppError: If no module with the given name is available.
        """
        if name in self.modules:
            return self.modules[name]
        if name not in self.module_classes:
            raise AppError('Module \'{0}\' does not exist'.format(name))

        module = self.module_classes[name](self)
        module.init()
        if module.singular:
            self.modules[name] = module
        return module

    def install_module(self, name):
        self.get_module(name).install()
        self.log.info('Installed module \'%s\'', name)

    def uninstall_module(self, name):
        self.get_module(name).uninstall()
        self.modules.pop(name, None)
        self.log.info('Uninstalled module \'%s\'', name)

    @classmethod
    def create(cls, path):
        """
        Create a new app directory.

        :param path: Directory path to create as a new app directory.
        :type path: str
        :return: App instance for the new app directory.
        :rtype: lesswire.app.App
        """
        root = abspath(path)
        os.makedirs(os.path.join(root, 'store', 'log'))
        os.makedirs(os.path.join(root, DEFAULT_SETTINGS['paths']['assets']))
        with open(os.path.join(root, cls.CONFIG_NAME), 'w', encoding='utf-8') as fh:
            json.dump({}, fh)
        return App(root)

    def run_command(self, name, *args):
        """
        Run a command.

        :param name: Name of the command to run.
        :type name: str
        :param args: Arguments to pass to the command.
        :type args: list[str]
        :return: Return value of the command being run.
        :rtype: object
        :raises lesswire.commands.CommandError: If a command with the given name does not exist.
        :raises lesswire.commands.CommandError: If the number of arguments passed to the command is not correct.
        """
        if name in self.commands:
            command = self.commands[name]
            args_len = len(args) + 1
            code = command.func.__code__
            arg_count = code.co_argcount
            has_varg = code.co_flags & 0x04 > 0
            defaults = len(command.func.__defaults__ or ())

            if (has_varg and args_len >= arg_count - defaults) or \
                    (not has_varg and arg_count - defaults <= args_len <= arg_count):
                self.log.debug('Running command \'%s\'', ' '.join([name] + list(args)))
                return command.func(self, *args)
            else:
                raise commands.CommandError('Incorrect number of arguments passed to command \'{0}\''.format(name))
        raise commands.CommandError('Command \'{0}\' does not exist'.format(name))
