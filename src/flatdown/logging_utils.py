"""Centralized logging utilities for flatdown entry points."""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from typing import Generator, Optional

from flatdown.constants import LOG_FORMAT, TRACE_DATE_FORMAT, TRACE_LOG_FORMAT


def configure_logging(level: int, log_file: Optional[str] = None, trace_mode: bool = False) -> None:
    """Send flatdown's log records to stderr and, optionally, a file.

    Parameters
    ----------
    level : int
        Logging level for the root logger
    log_file : str, optional
        File that receives a copy of the log output
    trace_mode : bool, default False
        Prefix records with a timestamp and the logger name

    """
    if trace_mode:
        formatter = logging.Formatter(TRACE_LOG_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(LOG_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if file_error is not None:
        root_logger.warning("Could not open log file %s: %s", log_file, file_error)


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Time a block and log the elapsed time at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the operation being timed (e.g., "Tokenizing")

    Examples
    --------
        >>> logger = logging.getLogger(__name__)
        >>> with debug_timer(logger, "Rendering"):
        ...     result = renderer.render(tokens)
        ... # Logs: "Rendering completed in 0.01s" at DEBUG level

    Notes
    -----
    Only measures time when the logger has DEBUG enabled.

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
    else:
        yield
