"""
Logging setup for SBOM Dependents.

Log records go to stderr through rich, so the dependents listing on
stdout stays clean for piping.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "sbom_dependents"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Log at DEBUG level instead of WARNING.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
