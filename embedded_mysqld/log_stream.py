""" Line oriented sinks that turn child process output into log records. """
import logging
import re

_TRAILING = re.compile(r"[\r\n]+$")
_LINE_BREAK = re.compile(r"[\r\n]+")


class LogStream:
    """
    Buffers raw bytes and emits one log record per line on flush.

    Args:
        logger (logging.Logger): Logger receiving the lines.
        level (int): Severity used for every line.
    """

    def __init__(self, logger, level=logging.INFO):
        self.logger = logger
        self.level = level
        self.buffer = bytearray()
        self.closed = False

    def write(self, data: bytes) -> int:
        """ Append bytes to the buffer. """
        if self.closed:
            raise ValueError("write to closed LogStream")
        self.buffer.extend(data)
        return len(data)

    def writable(self):
        return True

    def flush(self):
        """ Emit every buffered line, then clear the buffer. """
        if self.buffer:
            text = self.buffer.decode("utf-8", errors="replace")
            for line in _LINE_BREAK.split(_TRAILING.sub("", text)):
                self.logger.log(self.level, line)
        self.buffer.clear()

    def close(self):
        """ Release the buffer. Pending bytes are dropped. """
        self.buffer = bytearray()
        self.closed = True


def info_stream(logger):
    """ Sink for standard output. """
    return LogStream(logger, logging.INFO)


def debug_stream(logger):
    """ Sink for error output. """
    return LogStream(logger, logging.DEBUG)


def pump(pipe, stream: LogStream, on_line=None):
    """
    Copy a child pipe into a stream, one flushed line at a time.

    Args:
        pipe: Binary file object of the child process.
        stream (LogStream): Destination sink.
        on_line (callable): Called with every raw line before it is logged.
    """
    for line in iter(pipe.readline, b""):
        if on_line is not None:
            on_line(line)
        if stream.closed:
            continue
        stream.write(line)
        stream.flush()
    pipe.close()
