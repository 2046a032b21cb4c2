""" Registry of running embedded MySQL servers, keyed by port. """
import threading


class MysqldRegistry:
    """
    Maps a port to the server bound to it and remembers shared ports.

    A shared port is never removed by the ordinary close path; only the
    test-run hook shuts its server down. Every operation holds ``lock``,
    which is reentrant so ``Mysqld.start`` can keep it while the server is
    constructed and registered.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.pool = {}
        self.shared_ports = set()

    def get(self, port: int):
        """ Return the server registered for the port, or None. """
        with self.lock:
            return self.pool.get(port)

    def put(self, port: int, instance):
        """ Register a server for the port. """
        with self.lock:
            self.pool[port] = instance

    def remove(self, port: int):
        """ Forget the server registered for the port. """
        with self.lock:
            return self.pool.pop(port, None)

    def mark_shared(self, port: int):
        with self.lock:
            self.shared_ports.add(port)

    def unmark_shared(self, port: int):
        with self.lock:
            self.shared_ports.discard(port)

    def is_shared(self, port: int) -> bool:
        with self.lock:
            return port in self.shared_ports

    def shared_port(self):
        """ Return any shared port, or None when nothing is shared. """
        with self.lock:
            return next(iter(self.shared_ports), None)

    def __contains__(self, port):
        with self.lock:
            return port in self.pool

    def __len__(self):
        with self.lock:
            return len(self.pool)


default_registry = MysqldRegistry()
