"""Utility functions for the package."""
import logging
import os


def find_executable(executable, path=None):
    """Tries to find 'executable' in the directories listed in 'path' (a
    string listing directories separated by 'os.pathsep', or a list;
    defaults to os.environ['PATH']).  Returns the complete filename or
    raises FileNotFoundError if not found.
    """
    if path is None:
        path = os.environ.get("PATH", os.defpath)
    if not isinstance(path, (list, tuple)):
        path = path.split(os.pathsep)
    for inpath in path:
        candidate = os.path.join(inpath, executable)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            logging.debug("Found %s in %s", executable, inpath)
            return candidate
    raise FileNotFoundError(f"Could not find {executable} in {path}")


def mysql_search_path(basedir=None):
    """
    Directories searched for MySQL binaries.

    Args:
        basedir (str): MySQL installation directory, searched first.

    Returns:
        list: Directories in search order.
    """
    path = []
    if basedir is not None:
        path.extend([os.path.join(basedir, "bin"), os.path.join(basedir, "sbin"),
                     basedir])
    path.extend(os.environ.get("PATH", os.defpath).split(os.pathsep))
    # mysqld is usually not on a regular user's PATH
    path.extend(["/usr/sbin", "/usr/local/mysql/bin"])
    return path


def setup_logger(name, workdir, log_level):
    """
    Set up and configure a logger.

    Args:
        name (str): Name of the log file, without extension.
        workdir (str): Directory of the log file.
        log_level (str): Log level name.
    """
    log_file = os.path.join(workdir, name + ".log")
    os.makedirs(workdir, exist_ok=True)
    # do logging on console and in file
    logging.basicConfig(level=log_level,
                        format="%(asctime)s [%(levelname)s] %(message)s",
                        handlers=[logging.FileHandler(log_file), logging.StreamHandler()])
