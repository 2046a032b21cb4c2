""" methods used for running mysqld subprocesses with logging """
import logging
import subprocess
from typing import List


def check_call(args: List[str], silent=False):
    """
    Run a command to completion, discarding its output.
    Args:
        args (list): List of command line arguments.
        silent (bool): If True, do not log a failure.
    """
    logging.debug(" ".join(args))
    try:
        subprocess.run(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                       text=True, check=True)
    except subprocess.CalledProcessError as error:
        if not silent:
            logging.error("Command failed with return code %d", error.returncode)
            logging.error("stdout: error %s", error.stdout)
            logging.error("stderr: error %s", error.stderr)
        raise error


def check_output(args: List[str], silent=False):
    """
    Run a command and return its standard output.
    Args:
        args (list): List of command line arguments.
        silent (bool): If True, do not log a failure.
    Returns:
        str: Output of the command.
    """
    logging.debug(" ".join(args))
    try:
        return subprocess.check_output(args, text=True, stderr=subprocess.PIPE)
    except subprocess.CalledProcessError as error:
        if not silent:
            logging.error("Command failed with return code %d", error.returncode)
            logging.error("stderr: error %s", error.stderr)
        raise error


def run_background(args: List[str], silent=False):
    """
    Start a command without waiting for it. Both output streams are pipes
    the caller has to drain.
    Args:
        args (list): List of command line arguments.
        silent (bool): If True, do not log a failure.
    Returns:
        subprocess.Popen: The running process.
    """
    logging.debug(" ".join(args))
    try:
        return subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except OSError as error:
        if not silent:
            logging.error("Failed to start %s: %s", args[0], error)
        raise error
