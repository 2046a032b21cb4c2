""" Environment driven configuration of the embedded MySQL server. """
import importlib.resources
import os
from typing import Optional

ENV_ROOT = "MYSQLD_ROOT"
ENV_PORT = "MYSQLD_PORT"
ENV_INIT = "MYSQLD_INIT"
ENV_BASEDIR = "MYSQLD_BASEDIR"
ENV_READY_TIMEOUT = "MYSQLD_READY_TIMEOUT"

# server files live in ./mysqld unless MYSQLD_ROOT says otherwise
DEFAULT_ROOT = "mysqld"
DEFAULT_PORT = 3306


def root() -> str:
    """ Root directory of the server files. """
    return os.environ.get(ENV_ROOT, DEFAULT_ROOT)


def port() -> int:
    """ Port of the server. """
    value = os.environ.get(ENV_PORT)
    if value is None:
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError as error:
        raise ValueError(f"{ENV_PORT} must be an integer, got {value!r}") from error


def init_script() -> Optional[str]:
    """ Identifier of the initialization script, None when unset. """
    return os.environ.get(ENV_INIT) or None


def basedir() -> Optional[str]:
    """ MySQL installation directory searched for binaries. """
    return os.environ.get(ENV_BASEDIR) or None


def ready_timeout() -> Optional[float]:
    """ Seconds to wait for readiness, None to wait indefinitely. """
    value = os.environ.get(ENV_READY_TIMEOUT)
    if not value:
        return None
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(
            f"{ENV_READY_TIMEOUT} must be a number, got {value!r}") from error


def read_script(spec: str) -> str:
    """
    Read an SQL script as UTF-8 text.

    ``package:path/to/file.sql`` is loaded from the installed package through
    importlib.resources, anything else is a filesystem path. Each line is
    terminated by the platform line separator.

    Args:
        spec (str): Script identifier.

    Returns:
        str: Script content.
    """
    package, sep, name = spec.partition(":")
    if sep and not os.path.exists(spec) and all(
            part.isidentifier() for part in package.split(".")):
        text = importlib.resources.files(package).joinpath(name).read_text(
            encoding="utf-8")
    else:
        with open(spec, encoding="utf-8") as script:
            text = script.read()
    return "".join(line + os.linesep for line in text.splitlines())
