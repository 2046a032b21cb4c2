""" Command line arguments of the embedded MySQL server """
import argparse

from . import config


class CommonArgs(argparse.ArgumentParser):
    """ Command line arguments of the embedded MySQL server """

    def __init__(self):
        """ Command line arguments of the embedded MySQL server """
        super().__init__(prog="embedded-mysqld",
                         description="Run an embedded MySQL server until interrupted")
        group = self.add_argument_group("Common arguments")
        group.add_argument("--root", default=config.root(),
                           help="Directory of the server files, relative to the current directory")
        group.add_argument("--port", default=config.port(), type=int,
                           help="Port number")
        group.add_argument("--init", default=config.init_script(),
                           help="SQL script run once the server is ready "
                                "(a path or package:resource)")
        group.add_argument("-b", "--basedir", default=config.basedir(),
                           help="MySQL installation directory containing the binaries")
        group.add_argument("--log-level", default="INFO",
                           help="Log level (e.g., INFO, DEBUG, WARNING, ERROR, CRITICAL)",
                           choices=["INFO", "DEBUG", "WARNING", "ERROR", "CRITICAL"])
