""" Run an embedded MySQL server until interrupted. It takes the following arguments:
    --root: Directory of the server files
    --port: Port of the server
    --init: SQL script run once the server is ready
    --basedir: MySQL installation directory
    """
import logging
import os
import time

from . import config
from .common_args import CommonArgs
from .mysqld import Mysqld
from .utils import setup_logger


def argument_for_server(argv=None):
    """ This function is used to parse the arguments """
    return CommonArgs().parse_args(argv)


def main(argv=None):
    args = argument_for_server(argv)
    setup_logger("embedded-mysqld", args.root, args.log_level)
    # Mysqld reads these from the environment
    if args.init is not None:
        os.environ[config.ENV_INIT] = args.init
    if args.basedir is not None:
        os.environ[config.ENV_BASEDIR] = args.basedir

    mysql = Mysqld.start(args.port, args.root)
    logging.info("serving %s, press Ctrl-C to stop", mysql.url)
    try:
        while mysql.mysql.is_running():
            time.sleep(1)
        logging.error("mysqld @ %d exited", mysql.port)
    except KeyboardInterrupt:
        logging.info("Interrupted")
    finally:
        mysql.close()


if __name__ == "__main__":
    main()
