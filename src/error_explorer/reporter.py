"""Capture pipeline: filter, fingerprint, build and deliver reports."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from error_explorer.breadcrumbs import BreadcrumbTrail
from error_explorer.client import WebhookClient
from error_explorer.config import ReporterConfig
from error_explorer.events import ExceptionEvent, MessageEvent, type_name
from error_explorer.ignore import should_ignore
from error_explorer.levels import LogLevel
from error_explorer.payload import PayloadBuilder
from error_explorer.request import RequestInfo

logger = logging.getLogger("error_explorer.reporter")


class ErrorReporter:
    """Reports exceptions and messages to Error Explorer.

    Reporting never raises: anything that goes wrong while building or
    delivering a payload is logged on ``error_explorer.reporter`` and
    dropped.
    """

    def __init__(
        self,
        config: ReporterConfig,
        client: WebhookClient | None = None,
        breadcrumbs: BreadcrumbTrail | None = None,
        request_provider: Callable[[], RequestInfo | None] | None = None,
    ) -> None:
        self.config = config
        self.client = client if client is not None else WebhookClient.from_config(config)
        if breadcrumbs is None:
            breadcrumbs = BreadcrumbTrail(config.breadcrumbs.max_breadcrumbs)
        self.breadcrumbs = breadcrumbs
        self.builder = PayloadBuilder(
            config.project_name,
            include_breadcrumbs=config.breadcrumbs.enabled,
        )
        self._request_provider = request_provider

    def report_error(
        self,
        exception: BaseException,
        environment: str = "prod",
        http_status: int | None = None,
        request: RequestInfo | None = None,
    ) -> bool:
        """Report an exception. Returns True when it was delivered."""
        if not self.config.enabled or should_ignore(exception, self.config.ignore_exceptions):
            return False

        try:
            event = ExceptionEvent(
                exception=exception,
                environment=environment,
                http_status=http_status,
                request=request or self._current_request(),
            )
            payload = self.builder.build_for_exception(event, self.breadcrumbs)
            return self.client.send(payload)
        except Exception as e:
            logger.error(
                "Failed to report error to Error Explorer: %s", e,
                exc_info=True,
                extra={"error_explorer": {
                    "exception": str(e),
                    "original_error": str(exception),
                    "exception_class": type_name(type(exception)),
                }},
            )
            return False

    def report_message(
        self,
        message: str,
        environment: str = "prod",
        http_status: int | None = None,
        request: RequestInfo | None = None,
        level: LogLevel | str = LogLevel.ERROR,
        context: dict[str, Any] | None = None,
    ) -> bool:
        """Report a custom message at ``level``. Returns True when delivered."""
        if not self.config.enabled:
            return False

        try:
            log_level = LogLevel.parse(level)
            if log_level.priority < self.config.minimum_level.priority:
                return False

            event = MessageEvent(
                message=message,
                environment=environment,
                http_status=http_status,
                request=request or self._current_request(),
                level=log_level,
                context=dict(context or {}),
            )
            payload = self.builder.build_for_message(event, self.breadcrumbs)
            return self.client.send(payload)
        except Exception as e:
            logger.error(
                "Failed to report message to Error Explorer: %s", e,
                exc_info=True,
                extra={"error_explorer": {
                    "exception": str(e),
                    "original_message": message,
                }},
            )
            return False

    def close(self) -> None:
        self.client.close()

    def _current_request(self) -> RequestInfo | None:
        if self._request_provider is None:
            return None
        return self._request_provider()
