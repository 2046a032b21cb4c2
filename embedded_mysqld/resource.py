""" MysqldResource runs a mysqld binary out of a working directory. """
import logging
import os
import subprocess
import threading
from typing import Dict, List, Optional

from .log_stream import LogStream, pump
from .safe_process import check_call, check_output, run_background
from .utils import find_executable, mysql_search_path

# mysqld prints "<path>/mysqld: ready for connections." once it accepts clients
READY_MARKER = b": ready for connections"
SHUTDOWN_TIMEOUT = 30


class MysqldResource:
    """
    One mysqld process whose files live below a single directory.

    Standard output is copied into ``out`` and error output into ``err``
    by two pump threads; the error stream is also watched for the
    ready for connections line.
    """

    def __init__(self, directory: str, out: LogStream, err: LogStream,
                 basedir: Optional[str] = None):
        """ Method to intialize the MysqldResource class. """
        self.directory = directory
        self.out = out
        self.err = err
        self.basedir = basedir
        self.datadir = os.path.join(directory, "data")
        self.tmpdir = os.path.join(directory, "tmp")
        self.socket = os.path.join(directory, "mysql.sock")
        self.pid_file = os.path.join(directory, "mysqld.pid")
        self.executable = None
        self.process = None
        self.pumps = []
        self.ready = threading.Event()

    def __common_args(self) -> List[str]:
        """ Method to return the arguments shared by every mysqld call. """
        parameter = ["--no-defaults", "--datadir=" + self.datadir]
        if self.basedir is not None:
            parameter.append("--basedir=" + self.basedir)
        # mysqld refuses to run as root unless told so
        if hasattr(os, "geteuid") and os.geteuid() == 0:
            parameter.append("--user=root")
        return parameter

    def deploy_files(self):
        """ Locate the binaries and initialize an empty data directory. """
        self.executable = find_executable(
            "mysqld", mysql_search_path(self.basedir))
        logging.info("Using %s", check_output([self.executable, "--version"]).strip())
        os.makedirs(self.tmpdir, exist_ok=True)
        if os.path.isdir(self.datadir) and os.listdir(self.datadir):
            logging.debug("Reusing data directory %s", self.datadir)
            return
        os.makedirs(self.datadir, exist_ok=True)
        logging.info("Initializing MySQL in %s", self.datadir)
        parameter = [self.executable]
        parameter.extend(self.__common_args())
        parameter.append("--initialize-insecure")
        check_call(parameter)

    def start(self, thread_name: str, options: Dict[str, str]):
        """ Method to start mysqld as a background process. """
        parameter = [self.executable]
        parameter.extend(self.__common_args())
        parameter.extend(["--socket=" + self.socket,
                          "--pid-file=" + self.pid_file,
                          "--tmpdir=" + self.tmpdir])
        parameter.extend(f"--{key}={value}" for key, value in options.items())

        self.ready.clear()
        self.process = run_background(parameter)
        logging.debug("Started mysqld with process %d", self.process.pid)
        self.pumps = [
            threading.Thread(target=pump, args=(self.process.stdout, self.out),
                             name=thread_name + "-stdout", daemon=True),
            threading.Thread(target=pump,
                             args=(self.process.stderr, self.err, self.__watch),
                             name=thread_name + "-stderr", daemon=True),
        ]
        for thread in self.pumps:
            thread.start()

    def __watch(self, line: bytes):
        if READY_MARKER in line:
            self.ready.set()

    def is_running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def is_ready_for_connections(self) -> bool:
        return self.is_running() and self.ready.is_set()

    def shutdown(self):
        """ Method to stop mysqld and wait for its output to drain. """
        if self.process is None:
            return
        logging.info("Stopping MySQL server with process %d", self.process.pid)
        self.process.terminate()
        try:
            self.process.wait(timeout=SHUTDOWN_TIMEOUT)
        except subprocess.TimeoutExpired:
            logging.warning("mysqld did not stop within %ds, killing process %d",
                            SHUTDOWN_TIMEOUT, self.process.pid)
            self.process.kill()
            self.process.wait()
        for thread in self.pumps:
            thread.join()
        self.pumps = []
        self.process = None
        self.ready.clear()
