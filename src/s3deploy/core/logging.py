"""Diagnostic logging for s3deploy.

Diagnostics always go to stderr: stdout carries the workflow commands and
output lines the pipeline parses. aws command lines are logged under their
own ``s3deploy.aws`` namespace so they can be raised to debug independently.
"""

import logging
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "s3deploy"
COMMAND_LOGGER = f"{ROOT_LOGGER}.aws"


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def level_for_verbosity(verbose: int, quiet: bool, default: LogLevel) -> LogLevel:
    """Map -v/-q flags to a log level; flags win over the configured default."""
    if verbose >= 3:
        return LogLevel.DEBUG
    if verbose >= 1:
        return LogLevel.INFO
    if quiet:
        return LogLevel.ERROR
    return default


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    rich_output: bool = True,
) -> logging.Logger:
    """Attach a single stderr handler to the s3deploy logger.

    Args:
        level: The logging level
        rich_output: Render with Rich instead of plain timestamped lines

    Returns:
        The s3deploy root logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if rich_output:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.value.upper()))
    # Keep s3deploy lines out of any handler the host application installed
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the s3deploy namespace."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_command_logger() -> logging.Logger:
    """Logger for the aws command lines that are run."""
    return logging.getLogger(COMMAND_LOGGER)


class StructuredLogger:
    """Logger that appends bound key=value context, such as the run state."""

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = get_logger(name)
        self._context = dict(context or {})

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Return a logger carrying additional context."""
        return StructuredLogger(self._logger.name, {**self._context, **kwargs})

    def format(self, message: str, **kwargs: Any) -> str:
        context = {**self._context, **kwargs}
        if not context:
            return message
        return f"{message} [{' '.join(f'{k}={v}' for k, v in context.items())}]"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self.format(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self.format(message, **kwargs))
