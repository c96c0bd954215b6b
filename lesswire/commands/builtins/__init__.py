from lesswire.commands.builtins.create import create
from lesswire.commands.builtins.compile import compile_css
from lesswire.commands.builtins.adminstyle import adminstyle
from lesswire.commands.builtins.reset import reset
from lesswire.commands.builtins.install import install, uninstall
from lesswire.commands.builtins.list_modules import list_modules
from lesswire.commands.builtins.list_commands import list_commands
