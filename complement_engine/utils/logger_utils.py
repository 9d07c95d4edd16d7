# logger_utils.py - logging messages and performance metrics for the completer

import logging
import time

from rich.logging import RichHandler

LOGGER_NAME = "complement_engine"

_logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: int = logging.INFO, show_path: bool = False) -> logging.Logger:
    """
    Attach a RichHandler to the package logger (once).
    Hosts that configure logging themselves can skip this.
    """
    if not any(isinstance(h, RichHandler) for h in _logger.handlers):
        handler = RichHandler(show_path=show_path, rich_tracebacks=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        _logger.addHandler(handler)
    _logger.setLevel(level)
    return _logger


class Log:
    """Thin facade over the package logger, plus metrics/timing helpers."""

    # Public logging methods
    @staticmethod
    def debug(msg: str) -> None:
        _logger.debug(msg)

    @staticmethod
    def info(msg: str) -> None:
        _logger.info(msg)

    @staticmethod
    def warning(msg: str) -> None:
        _logger.warning(msg)

    @staticmethod
    def error(msg: str) -> None:
        _logger.error(msg)

    @staticmethod
    def metric(tag, value, unit=""):
        """
        Record a metric (timing, counts).
        Example: Get suggestions: 3[ms]
        """
        _logger.info("%s: %s%s", tag, value, unit)

    @staticmethod
    def time_block(label):
        """
        Helper for measuring execution time of a code block.
        To use:
            with Log.time_block("index dictionary"):
                do_some_work()
        """
        return _Timer(label)


class _Timer:
    """Context manager used internally to measure time for a code block."""
    def __init__(self, label):
        self.label = label
        self.start = time.perf_counter()
        self.elapsed_ms = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed_ms = (time.perf_counter() - self.start) * 1000
        Log.metric(self.label, round(self.elapsed_ms), "[ms]")
