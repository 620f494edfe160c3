"""
Loguru configuration for the plugin.

This module configures loguru with:
- The identity under evaluation in each log line
- Configurable level and format from settings
- Output on stderr only (stdout carries the Munin protocol)
- Redirection of standard library logs (httpx, httpcore) to loguru
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

from pgp_expiration.core.identity_context import identity_context

if TYPE_CHECKING:
    from pgp_expiration.config import Settings

DEFAULT_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | identity={extra[identity]} | "
    "{name}:{function}:{line} - {message}"
)


def add_identity(record: dict[str, Any]) -> bool:
    """
    Adds the identity to the log record.

    The identity is obtained from the current task context,
    allowing tracking of logs from the same evaluation.

    Args:
        record: Loguru record

    Returns:
        True to indicate that the filter passed
    """
    identity = identity_context.get()
    record["extra"]["identity"] = identity if identity else "N/A"
    return True


def configure_logger(settings: "Settings | None" = None) -> None:
    """
    Configures loguru with plugin settings.

    This function:
    1. Removes default loguru handlers
    2. Adds handler to stderr with custom configuration
    3. Configures level, format, etc.

    Args:
        settings: Plugin settings; WARNING level and the default format
                  are used when omitted.
    """
    level = settings.log_level.upper() if settings else "WARNING"
    log_format = settings.log_format if settings else DEFAULT_LOG_FORMAT

    # Remove default configuration
    logger.remove()

    # Add configured handler
    logger.add(
        sink=sys.stderr,
        level=level,
        format=log_format,
        filter=add_identity,
        colorize=None,  # Only colorize when stderr is a terminal
        serialize=False,
        backtrace=False,
        diagnose=False,
    )


__all__ = ["logger", "InterceptHandler", "configure_logger", "intercept_standard_logging"]


class InterceptHandler(logging.Handler):
    """
    Handler to redirect standard logging logs to loguru.

    This allows capturing logs from libraries that use standard logging
    (like httpx and httpcore) and process them with loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """
        Redirects a standard logging record to loguru.

        Args:
            record: logging.LogRecord record
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Get loguru logger with appropriate depth
        loguru_logger = logger.opt(depth=6, exception=record.exc_info)

        # Redirect the log to loguru
        loguru_logger.log(level, record.getMessage())


def intercept_standard_logging() -> None:
    """
    Configures redirection of standard logging to loguru.

    Intercepts logs from:
    - httpx (HTTP client)
    - httpcore (HTTP transport)

    Call this function once at process entry, after configure_logger().
    """
    for logger_name in ["httpx", "httpcore"]:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False
