""" Starts one shared embedded MySQL server around a whole test run. """
import logging
from typing import Optional

from . import config
from .mysqld import Mysqld
from .registry import MysqldRegistry


class MysqldRunListener:
    """
    Test-run hook owning the shared server.

    Every ``Mysqld.start()`` made during the run reuses the shared server and
    every ``Mysqld.close()`` leaves it alone; ``run_finished`` is the one
    place that stops it.
    """

    def __init__(self, registry: Optional[MysqldRegistry] = None):
        self.registry = registry
        self.mysql = None

    def run_started(self) -> Mysqld:
        """ Start the shared server. Errors abort the run. """
        logging.debug("on test run started: start embedded mysql server")
        self.mysql = Mysqld(config.root(), config.port(), shared=True,
                            registry=self.registry)
        try:
            self.mysql.run()
        except Exception:
            # pytest skips sessionfinish when sessionstart raises
            self.mysql.discard()
            raise
        return self.mysql

    def run_finished(self):
        """ Stop the shared server regardless of the shared flag. """
        logging.debug("on test run finished: stop embedded mysql server")
        if self.mysql is not None:
            self.mysql.shutdown()
