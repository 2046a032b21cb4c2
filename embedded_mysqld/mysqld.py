""" Mysqld starts, shares and stops embedded MySQL servers for test suites. """
import logging
import os
import socket
import threading
from typing import Optional

import psutil
import pymysql
from pymysql.constants import CLIENT
from retry.api import retry_call

from . import config
from .exceptions import PermissionDeniedError, PortUsedError, ReadyTimeoutError
from .log_stream import debug_stream, info_stream
from .registry import MysqldRegistry, default_registry
from .resource import MysqldResource

THREAD_NAME = "mysqld-thread"
POLL_INTERVAL = 0.01
CONNECT_TIMEOUT = 1

# lines written by the mysqld child process
server_log = logging.getLogger("mysqld")


class _NotReady(Exception):
    """ mysqld is running but does not accept connections yet. """


def _port_owner(port: int) -> Optional[str]:
    """ Name the process listening on the port, when the OS lets us see it. """
    try:
        for conn in psutil.net_connections(kind="inet"):
            if conn.laddr and conn.laddr.port == port and conn.pid \
                    and conn.status == psutil.CONN_LISTEN:
                return f"{psutil.Process(conn.pid).name()} ({conn.pid})"
    except (psutil.AccessDenied, psutil.NoSuchProcess) as error:
        logging.debug("Cannot inspect the owner of port %d: %s", port, error)
    return None


class Mysqld:
    """
    An embedded MySQL server bound to a directory and a port.

    ``Mysqld.start()`` is safe to call from every test module's setup and
    ``close()`` from its teardown: servers are reused by port, and a shared
    server survives ``close()`` until the test-run hook shuts it down.
    """

    def __init__(self, root: str, port: int, shared: bool = False,
                 registry: Optional[MysqldRegistry] = None):
        self.port = port
        self.registry = registry if registry is not None else default_registry

        path = root if os.path.isabs(root) else os.path.join(os.getcwd(), root)
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as error:
            if not os.path.isdir(path):
                raise PermissionDeniedError(root) from error
        self.directory = path

        self.out = info_stream(server_log)
        self.err = debug_stream(server_log)
        self.mysql = MysqldResource(path, self.out, self.err, config.basedir())
        self.mysql.deploy_files()

        self.options = {"port": str(port)}
        self.interrupted = threading.Event()

        self.registry.put(port, self)
        if shared:
            self.registry.mark_shared(port)

        logging.info("embedded mysql server @ path=%s port=%d", path, port)

    @classmethod
    def start(cls, port: Optional[int] = None, root: Optional[str] = None,
              registry: Optional[MysqldRegistry] = None) -> "Mysqld":
        """
        Return the server for a port, starting it when none is registered.

        Args:
            port (int): Port of the server. Defaults to the shared port if a
                shared server exists, else to ``MYSQLD_PORT`` or 3306.
            root (str): Directory of the server files. Defaults to
                ``MYSQLD_ROOT`` or ``mysqld``; relative paths are resolved
                against the current working directory.
            registry (MysqldRegistry): Registry to use instead of the
                process-wide one.

        Returns:
            Mysqld: A running server.
        """
        registry = registry if registry is not None else default_registry
        if port is None:
            port = registry.shared_port()
            if port is None:
                port = config.port()
        if root is None:
            root = config.root()

        logging.info("connect mysql @ %d", port)
        with registry.lock:
            mysql = registry.get(port)
            if mysql is not None:
                return mysql
            mysql = cls(root, port, registry=registry)
            try:
                mysql.run()
            except Exception:
                mysql.discard()
                raise
            return mysql

    def check_port(self):
        """ Raise PortUsedError when something already accepts connections on the port. """
        try:
            connection = socket.create_connection(("localhost", self.port),
                                                  timeout=CONNECT_TIMEOUT)
        except OSError as error:
            # any failure to connect counts as available
            logging.debug("Port %d is available: %s", self.port, error)
            return
        connection.close()
        owner = _port_owner(self.port)
        if owner is not None:
            logging.info("Port %d is in use by process %s", self.port, owner)
        raise PortUsedError(self.port)

    def run(self):
        """ Start mysqld and wait until it is ready for connections. """
        if self.mysql.is_running():
            return
        self.check_port()
        self.mysql.start(THREAD_NAME, self.options)
        self.wait_for_ready()
        logging.info("embedded mysql server started")
        self.initialize()

    def _poll_ready(self):
        if self.interrupted.is_set():
            logging.warning("mysql is not ready for connections")
            return
        if not self.mysql.is_running():
            logging.warning("mysqld @ %d exited before it was ready for connections",
                            self.port)
            return
        if not self.mysql.is_ready_for_connections():
            raise _NotReady()

    def wait_for_ready(self):
        """
        Block until mysqld is ready for connections, has exited, or the wait
        is interrupted by ``interrupt()`` or KeyboardInterrupt.

        Waits indefinitely unless ``MYSQLD_READY_TIMEOUT`` is set.
        """
        timeout = config.ready_timeout()
        tries = -1 if timeout is None else max(1, int(timeout / POLL_INTERVAL))
        logging.debug("Waiting for MySQL server to start")
        try:
            retry_call(self._poll_ready, exceptions=_NotReady, tries=tries,
                       delay=POLL_INTERVAL, logger=None)
        except KeyboardInterrupt:
            logging.warning("mysql is not ready for connections")
        except _NotReady as error:
            raise ReadyTimeoutError(self.port, timeout) from error

    def interrupt(self):
        """
        Stop waiting for readiness. The process keeps running.

        Only reachable for instances built directly, such as the run
        listener's shared server: ``Mysqld.start`` holds the registry lock
        until the server is ready and only then hands the instance out.
        """
        self.interrupted.set()

    def connect_kwargs(self):
        """ Keyword arguments for ``pymysql.connect`` to reach this server. """
        return {"host": "localhost", "port": self.port, "user": "root",
                "password": "", "charset": "utf8mb4"}

    @property
    def url(self) -> str:
        return f"mysql://root@localhost:{self.port}/?charset=utf8mb4"

    def initialize(self):
        """
        Run the ``MYSQLD_INIT`` script, if any, as one multi-statement batch.

        Failures are logged and never raised; the server stays usable.
        """
        spec = config.init_script()
        if spec is None:
            return

        try:
            sql = config.read_script(spec)
        except (OSError, ImportError, ValueError):
            logging.warning("read sql file %s failed", spec, exc_info=True)
            return

        try:
            connection = pymysql.connect(client_flag=CLIENT.MULTI_STATEMENTS,
                                         **self.connect_kwargs())
            try:
                with connection.cursor() as cursor:
                    cursor.execute(sql)
                    # errors of later statements surface while advancing
                    while cursor.nextset():
                        pass
                connection.commit()
            finally:
                connection.close()
        except (pymysql.MySQLError, OSError):
            logging.warning("initialize mysql server failed", exc_info=True)
            return
        logging.info("initialized mysql server with %s", spec)

    def shutdown(self):
        """ Stop mysqld, shared or not. """
        if self.mysql.is_running():
            self.mysql.shutdown()
            logging.info("embedded mysql server stopped")
        # a later run() waits for readiness again
        self.interrupted.clear()

    def close(self):
        """ Stop and unregister the server unless it is shared. """
        logging.info("disconnect mysql @ %d", self.port)
        if not self.registry.is_shared(self.port):
            self.shutdown()
            self.registry.remove(self.port)
            self.out.close()
            self.err.close()

    def discard(self):
        """ Stop, unregister and unshare a server whose run failed. """
        self.shutdown()
        self.registry.remove(self.port)
        self.registry.unmark_shared(self.port)
        self.out.close()
        self.err.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return f"Mysqld(directory={self.directory!r}, port={self.port})"
