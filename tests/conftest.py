""" Fixtures replacing the mysqld process so the suite runs without MySQL. """
import socket

import pytest

from embedded_mysqld import config
from embedded_mysqld import mysqld as mysqld_module
from embedded_mysqld.registry import MysqldRegistry


class FakeResource:
    """ Stands in for MysqldResource; records what the lifecycle asked for. """

    ready_after = 0

    def __init__(self, directory, out, err, basedir=None):
        self.directory = directory
        self.out = out
        self.err = err
        self.basedir = basedir
        self.deployed = False
        self.running = False
        self.starts = 0
        self.shutdowns = 0
        self.polls = 0
        self.options = None
        self.thread_name = None

    def deploy_files(self):
        self.deployed = True

    def start(self, thread_name, options):
        self.thread_name = thread_name
        self.options = dict(options)
        self.running = True
        self.starts += 1

    def is_running(self):
        return self.running

    def is_ready_for_connections(self):
        self.polls += 1
        return self.running and self.polls > self.ready_after

    def shutdown(self):
        self.running = False
        self.shutdowns += 1


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (config.ENV_ROOT, config.ENV_PORT, config.ENV_INIT,
                 config.ENV_BASEDIR, config.ENV_READY_TIMEOUT):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def resources(monkeypatch):
    """ Every FakeResource created while the test runs, in creation order. """
    created = []

    class RecordingResource(FakeResource):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(mysqld_module, "MysqldResource", RecordingResource)
    return created


@pytest.fixture
def registry():
    return MysqldRegistry()


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def listening_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen(1)
        yield sock.getsockname()[1]
