"""ASGI middleware (FastAPI, Starlette) for Error Explorer."""

from __future__ import annotations

from typing import Any


class ErrorExplorerMiddleware:
    """ASGI middleware that records request breadcrumbs and reports exceptions."""

    def __init__(self, app: Any, environment: str = "prod") -> None:
        self.app = app
        self.environment = environment

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        import error_explorer
        from error_explorer.events import determine_http_status
        from error_explorer.request import RequestInfo

        method = scope.get("method", "")
        path = scope.get("path", "")
        error_explorer.log_http_request(method, path)

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            error_explorer.report_error(
                exc,
                self.environment,
                determine_http_status(exc),
                RequestInfo.from_asgi_scope(scope),
            )
            raise
