""" Exceptions raised while setting up an embedded MySQL server. """


class MysqldError(Exception):
    """ Base class for embedded MySQL server errors. """


class PermissionDeniedError(MysqldError):
    """ The working directory neither exists nor can be created. """

    def __init__(self, root):
        super().__init__("no permission to create folder " + root)
        self.root = root


class PortUsedError(MysqldError):
    """ Another process already listens on the port. """

    def __init__(self, port: int):
        super().__init__(f"port {port} has been used")
        self.port = port


class ReadyTimeoutError(MysqldError):
    """ The server did not report ready for connections in time. """

    def __init__(self, port: int, timeout: float):
        super().__init__(
            f"mysqld @ {port} not ready for connections after {timeout}s")
        self.port = port
        self.timeout = timeout
