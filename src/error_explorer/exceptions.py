"""Automatic capture of unhandled exceptions."""

from __future__ import annotations

import sys
from types import TracebackType

_previous_excepthook = None
_environment = "prod"


def install(environment: str = "prod") -> None:
    """Install a global exception hook that reports unhandled exceptions."""
    global _previous_excepthook, _environment
    _environment = environment
    if _previous_excepthook is None:
        _previous_excepthook = sys.excepthook
        sys.excepthook = _error_explorer_excepthook


def uninstall() -> None:
    """Restore the exception hook that was active before ``install``."""
    global _previous_excepthook
    if _previous_excepthook is not None:
        sys.excepthook = _previous_excepthook
        _previous_excepthook = None


def _error_explorer_excepthook(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_tb: TracebackType | None,
) -> None:
    """Exception hook that reports to Error Explorer, then calls the previous hook."""
    capture(exc_value)
    previous = _previous_excepthook or sys.__excepthook__
    previous(exc_type, exc_value, exc_tb)


def capture(exc: BaseException) -> None:
    """Manually report an exception through the configured reporter."""
    import error_explorer

    if error_explorer._reporter is None:
        return
    error_explorer._reporter.report_error(exc, _environment)
