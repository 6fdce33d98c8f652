"""
Logging configuration for Trinity.

Validation progress goes through the ``trinity`` logger on stderr, so a JSON
or HTML report on stdout stays machine readable. The console report itself
is rendered by the reporter, not logged.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "trinity"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(verbose: bool = False, quiet: bool = False) -> int:
    """Terminal log level; ``quiet`` wins over ``verbose``."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``trinity`` logger with a rich handler on stderr.

    Only the ``trinity`` logger is touched, never the root logger. Calling
    this again replaces the handlers, which lets the CLI raise the level
    once a project's ``reporting.verbose_logging`` is known.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file that also receives INFO records, whatever
            the terminal level

    Returns:
        Configured logger instance for trinity
    """
    level = resolve_level(verbose, quiet)
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.setLevel(min(level, logging.INFO))
        logger.addHandler(file_handler)

    logger.setLevel(min(h.level for h in logger.handlers))
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'trinity.scoring')
              If None, returns the root trinity logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
