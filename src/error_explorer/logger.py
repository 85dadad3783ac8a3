"""Drop-in Python logging handler for Error Explorer."""

from __future__ import annotations

import logging
from typing import Any

from error_explorer.levels import LogLevel

_LEVEL_MAP = (
    (logging.CRITICAL, LogLevel.CRITICAL),
    (logging.ERROR, LogLevel.ERROR),
    (logging.WARNING, LogLevel.WARNING),
    (logging.INFO, LogLevel.INFO),
)


def map_level(levelno: int) -> LogLevel:
    for threshold, level in _LEVEL_MAP:
        if levelno >= threshold:
            return level
    return LogLevel.DEBUG


class ErrorExplorerHandler(logging.Handler):
    """Logging handler that reports records to Error Explorer.

    Records carrying exception info are reported as errors; everything
    else becomes a custom message at the mapped level. The reporter's
    ``minimum_level`` still applies to messages.
    """

    def __init__(self, environment: str = "prod", level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.environment = environment

    def emit(self, record: logging.LogRecord) -> None:
        import error_explorer

        reporter = error_explorer._reporter
        if reporter is None:
            return
        # Records about our own delivery must not loop back into it.
        if record.name.startswith("error_explorer"):
            return

        try:
            if record.exc_info and record.exc_info[1] is not None:
                reporter.report_error(record.exc_info[1], self.environment)
                return

            context: dict[str, Any] = {
                "logger": record.name,
                "filename": record.filename,
                "lineno": record.lineno,
            }
            reporter.report_message(
                self.format(record),
                self.environment,
                level=map_level(record.levelno),
                context=context,
            )
        except Exception:
            self.handleError(record)
