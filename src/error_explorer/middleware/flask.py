"""Flask extension for Error Explorer."""

from __future__ import annotations

from typing import Any


class ErrorExplorerFlask:
    """Flask extension that records request breadcrumbs and reports exceptions."""

    def __init__(self, app: Any = None, environment: str | None = None) -> None:
        self._app = app
        self._environment = environment
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Any) -> None:
        """Register hooks with a Flask app."""
        self._app = app
        if self._environment is None:
            self._environment = "dev" if app.debug else "prod"
        app.before_request(self._before_request)
        app.teardown_request(self._teardown_request)

    @property
    def environment(self) -> str:
        return self._environment or "prod"

    def _before_request(self) -> None:
        from flask import request

        import error_explorer

        error_explorer.log_http_request(request.method, request.path)

    def _teardown_request(self, exc: BaseException | None) -> None:
        if exc is None:
            return

        from flask import request

        import error_explorer
        from error_explorer.events import determine_http_status
        from error_explorer.request import RequestInfo

        error_explorer.report_error(
            exc,
            self.environment,
            determine_http_status(exc),
            RequestInfo.from_flask(request),
        )
