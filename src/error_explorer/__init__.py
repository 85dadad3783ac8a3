"""Error Explorer Python SDK - error capture and webhook delivery."""

from __future__ import annotations

__version__ = "0.1.0"

import logging
from typing import TYPE_CHECKING, Any

from error_explorer.breadcrumbs import BreadcrumbTrail
from error_explorer.levels import BreadcrumbCategory, LogLevel

if TYPE_CHECKING:
    from error_explorer.config import ReporterConfig
    from error_explorer.reporter import ErrorReporter
    from error_explorer.request import RequestInfo

_logger = logging.getLogger("error_explorer")

_NOT_INITIALIZED = (
    "ErrorReporter: Service not initialized. "
    "Call error_explorer.init() or error_explorer.configure() at startup."
)

# Set once at startup; reads are unsynchronised.
_reporter: ErrorReporter | None = None
_trail = BreadcrumbTrail()


def init(config: ReporterConfig | None = None, **settings: Any) -> ErrorReporter:
    """Build a reporter from configuration and install it process-wide.

    Must be called once at startup, before any reporting call. Invalid
    settings raise ``pydantic.ValidationError``.
    """
    from error_explorer.config import ReporterConfig
    from error_explorer.reporter import ErrorReporter

    if config is None:
        config = ReporterConfig(**settings)

    _trail.set_capacity(config.breadcrumbs.max_breadcrumbs)
    reporter = ErrorReporter(config, breadcrumbs=_trail)
    configure(reporter)
    return reporter


def configure(reporter: ErrorReporter) -> None:
    """Install an already-built reporter as the process-wide instance."""
    global _reporter, _trail
    _reporter = reporter
    _trail = reporter.breadcrumbs


def is_configured() -> bool:
    return _reporter is not None


def get_reporter() -> ErrorReporter | None:
    return _reporter


def get_breadcrumb_trail() -> BreadcrumbTrail:
    return _trail


def shutdown() -> None:
    """Close the installed reporter's HTTP client and uninstall it."""
    global _reporter
    if _reporter is not None:
        _reporter.close()
        _reporter = None


def reset() -> None:
    """Uninstall the reporter and start a fresh breadcrumb trail (for testing)."""
    global _reporter, _trail
    _reporter = None
    _trail = BreadcrumbTrail()


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

def report_error(
    exception: BaseException,
    environment: str = "prod",
    http_status: int | None = None,
    request: RequestInfo | None = None,
) -> None:
    if _reporter is None:
        _logger.warning(_NOT_INITIALIZED)
        return
    _reporter.report_error(exception, environment, http_status, request)


def report(exception: BaseException) -> None:
    report_error(exception)


def report_with_context(
    exception: BaseException,
    environment: str = "prod",
    http_status: int | None = None,
) -> None:
    report_error(exception, environment, http_status)


def report_message(
    message: str,
    environment: str = "prod",
    http_status: int | None = None,
    request: RequestInfo | None = None,
    level: LogLevel | str = LogLevel.ERROR,
    context: dict[str, Any] | None = None,
) -> None:
    if _reporter is None:
        _logger.warning(_NOT_INITIALIZED)
        return
    _reporter.report_message(message, environment, http_status, request, level, context)


def report_debug(message: str, context: dict[str, Any] | None = None) -> None:
    report_message(message, level=LogLevel.DEBUG, context=context)


def report_info(message: str, context: dict[str, Any] | None = None) -> None:
    report_message(message, level=LogLevel.INFO, context=context)


def report_warning(message: str, context: dict[str, Any] | None = None) -> None:
    report_message(message, level=LogLevel.WARNING, context=context)


def report_critical(message: str, context: dict[str, Any] | None = None) -> None:
    report_message(message, level=LogLevel.CRITICAL, context=context)


def report_alert(message: str, context: dict[str, Any] | None = None) -> None:
    report_message(message, level=LogLevel.ALERT, context=context)


def report_emergency(message: str, context: dict[str, Any] | None = None) -> None:
    report_message(message, level=LogLevel.EMERGENCY, context=context)


# ---------------------------------------------------------------------------
# Breadcrumbs
# ---------------------------------------------------------------------------

def add_breadcrumb(
    message: str,
    category: BreadcrumbCategory | str = BreadcrumbCategory.CUSTOM,
    level: LogLevel | str = LogLevel.INFO,
    data: dict[str, Any] | None = None,
) -> None:
    """Add a breadcrumb to the process-wide trail.

    An unknown category or level string drops the breadcrumb with a warning.
    """
    try:
        _trail.add(message, category, level, data)
    except ValueError as e:
        _logger.warning("Dropped breadcrumb %r: %s", message, e)


def log_navigation(from_: str, to: str, data: dict[str, Any] | None = None) -> None:
    _trail.log_navigation(from_, to, data)


def log_user_action(action: str, data: dict[str, Any] | None = None) -> None:
    _trail.log_user_action(action, data)


def log_http_request(
    method: str,
    url: str,
    status_code: int | None = None,
    data: dict[str, Any] | None = None,
) -> None:
    _trail.log_http_request(method, url, status_code, data)


def log_query(query: str, duration_ms: float | None = None, data: dict[str, Any] | None = None) -> None:
    _trail.log_query(query, duration_ms, data)


def log_performance(metric: str, value: float, unit: str = "ms") -> None:
    _trail.log_performance(metric, value, unit)


def log_security(
    event: str,
    level: LogLevel | str = LogLevel.WARNING,
    data: dict[str, Any] | None = None,
) -> None:
    try:
        _trail.log_security(event, level, data)
    except ValueError as e:
        _logger.warning("Dropped security breadcrumb %r: %s", event, e)


def clear_breadcrumbs() -> None:
    _trail.clear()


def set_max_breadcrumbs(capacity: int) -> None:
    """Resize the trail; raises ``ValueError`` outside [10, 100]."""
    _trail.set_capacity(capacity)


def get_max_breadcrumbs() -> int:
    return _trail.capacity


def get_breadcrumb_count() -> int:
    return len(_trail)


def get_breadcrumbs() -> list[dict[str, Any]]:
    return _trail.to_list()
