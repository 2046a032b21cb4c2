""" Embedded MySQL servers for test suites. """
from .exceptions import MysqldError, PermissionDeniedError, PortUsedError, ReadyTimeoutError
from .mysqld import Mysqld
from .registry import MysqldRegistry, default_registry
from .run_listener import MysqldRunListener

__all__ = [
    "Mysqld",
    "MysqldError",
    "MysqldRegistry",
    "MysqldRunListener",
    "PermissionDeniedError",
    "PortUsedError",
    "ReadyTimeoutError",
    "default_registry",
]
