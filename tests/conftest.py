import os
import shutil
import tempfile
import pytest

RESOURCES_ROOT = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'resources')


class Resources:
    """
    Access to the test resource trees under tests/resources.
    """
    def __init__(self, root):
        self.root = root

    def path(self, *parts):
        return os.path.join(self.root, *parts)

    def copy(self, name, dest):
        """
        Copy a resource file or directory. Directory contents are merged into dest if it already exists.

        :param name: Resource path, relative to the resources root.
        :type name: str
        :param dest: Destination path.
        :type dest: str
        """
        source = self.path(name)
        if os.path.isdir(source):
            shutil.copytree(source, dest, dirs_exist_ok=True)
        else:
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            shutil.copy2(source, dest)

    def read(self, *parts):
        with open(self.path(*parts), encoding='utf-8') as fh:
            return fh.read()


@pytest.fixture
def resources():
    return Resources(RESOURCES_ROOT)


@pytest.fixture
def temp_dir():
    path = tempfile.mkdtemp(prefix='lesswire_test_')
    yield os.path.realpath(path)
    shutil.rmtree(path, ignore_errors=True)


# noinspection PyShadowingNames
@pytest.fixture
def app(resources, temp_dir):
    from lesswire.app import App

    root = os.path.join(temp_dir, 'test_app')
    resources.copy('app_new', root)
    return App(root)


# noinspection PyShadowingNames
@pytest.fixture
def admin_app(resources, temp_dir):
    from lesswire.app import App

    root = os.path.join(temp_dir, 'admin_app')
    resources.copy('admin', root)
    return App(root)
