import os

__version__ = '0.1'


def abspath(path):
    return os.path.realpath(os.path.abspath(os.path.expanduser(path)))
