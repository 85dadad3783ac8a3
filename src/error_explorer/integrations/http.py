"""HTTP breadcrumbs for httpx."""

from __future__ import annotations

from typing import Any

_original_sync_send: Any = None
_original_async_send: Any = None


def _is_own_request(request: Any) -> bool:
    from error_explorer.client import USER_AGENT

    return request.headers.get("user-agent") == USER_AGENT


def _record(request: Any, status_code: int | None, duration_ms: float) -> None:
    import error_explorer

    error_explorer.log_http_request(
        str(request.method),
        str(request.url),
        status_code,
        {"duration_ms": duration_ms},
    )


def patch_httpx() -> None:
    """Monkey-patch httpx to add a breadcrumb for every outgoing request."""
    global _original_sync_send, _original_async_send

    try:
        import httpx
    except ImportError:
        return

    if _original_sync_send is not None:
        return  # Already patched

    import time

    _original_sync_send = httpx.Client.send
    _original_async_send = httpx.AsyncClient.send

    def _patched_sync_send(self: Any, request: Any, **kwargs: Any) -> Any:
        if _is_own_request(request):
            return _original_sync_send(self, request, **kwargs)

        start = time.monotonic()
        status_code = None
        try:
            response = _original_sync_send(self, request, **kwargs)
            status_code = response.status_code
            return response
        finally:
            _record(request, status_code, round((time.monotonic() - start) * 1000, 2))

    async def _patched_async_send(self: Any, request: Any, **kwargs: Any) -> Any:
        if _is_own_request(request):
            return await _original_async_send(self, request, **kwargs)

        start = time.monotonic()
        status_code = None
        try:
            response = await _original_async_send(self, request, **kwargs)
            status_code = response.status_code
            return response
        finally:
            _record(request, status_code, round((time.monotonic() - start) * 1000, 2))

    httpx.Client.send = _patched_sync_send  # type: ignore[assignment]
    httpx.AsyncClient.send = _patched_async_send  # type: ignore[assignment]


def unpatch_httpx() -> None:
    """Restore original httpx methods."""
    global _original_sync_send, _original_async_send

    if _original_sync_send is None:
        return

    try:
        import httpx
    except ImportError:
        return

    httpx.Client.send = _original_sync_send  # type: ignore[assignment]
    httpx.AsyncClient.send = _original_async_send  # type: ignore[assignment]
    _original_sync_send = None
    _original_async_send = None
