"""
pytest plugin sharing one embedded MySQL server across a test session.

Enable it with ``-p embedded_mysqld.pytest_plugin`` on the command line or
``pytest_plugins = ["embedded_mysqld.pytest_plugin"]`` in a conftest.py.
"""
import pytest

from .mysqld import Mysqld
from .run_listener import MysqldRunListener

listener_key = pytest.StashKey[MysqldRunListener]()


def pytest_sessionstart(session):
    listener = MysqldRunListener()
    session.config.stash[listener_key] = listener
    listener.run_started()


def pytest_sessionfinish(session, exitstatus):
    listener = session.config.stash.get(listener_key, None)
    if listener is not None:
        listener.run_finished()


@pytest.fixture(scope="module")
def mysqld():
    """ The shared server, acquired and released once per test module. """
    with Mysqld.start() as mysql:
        yield mysql
