"""Assembles the JSON payload sent to Error Explorer."""

from __future__ import annotations

import os
import platform
import traceback
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import psutil

from error_explorer.events import ExceptionEvent, MessageEvent, type_name
from error_explorer.fingerprint import CUSTOM_MESSAGE, Fingerprint, exception_origin
from error_explorer.levels import LogLevel
from error_explorer.request import RequestInfo

if TYPE_CHECKING:
    from error_explorer.breadcrumbs import BreadcrumbTrail

REDACTED = "[REDACTED]"

_SENSITIVE_KEYS = ("password", "token", "secret", "key", "api_key", "authorization")
_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

try:
    import resource
except ImportError:  # Windows
    resource = None  # type: ignore[assignment]


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def is_sensitive_key(key: str) -> bool:
    lowered = str(key).lower()
    return any(fragment in lowered for fragment in _SENSITIVE_KEYS)


def sanitize_parameters(parameters: Mapping[str, Any]) -> dict[str, Any]:
    """Redact every parameter whose name contains a sensitive fragment."""
    return {
        key: REDACTED if is_sensitive_key(key) else value
        for key, value in parameters.items()
    }


def sanitize_headers(headers: Mapping[str, Any]) -> dict[str, Any]:
    """Redact credential-bearing headers, keeping list values as lists."""
    sanitized: dict[str, Any] = {}
    for key, value in headers.items():
        if str(key).lower() in _SENSITIVE_HEADERS:
            sanitized[key] = [REDACTED] if isinstance(value, list | tuple) else REDACTED
        else:
            sanitized[key] = value
    return sanitized


def build_request_context(request: RequestInfo) -> dict[str, Any]:
    return {
        "url": request.url,
        "method": request.method,
        "route": request.route,
        "ip": request.ip,
        "user_agent": request.user_agent,
        "parameters": sanitize_parameters(request.parameters),
        "query": sanitize_parameters(request.query),
        "headers": sanitize_headers(request.headers),
    }


def build_server_context() -> dict[str, Any]:
    """Informational runtime stats for the reporting process."""
    rss = psutil.Process().memory_info().rss
    peak = rss
    if resource is not None:
        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # ru_maxrss is in kilobytes on Linux, bytes on macOS
        if platform.system() != "Darwin":
            max_rss *= 1024
        peak = max(peak, max_rss)

    return {
        "runtime_version": platform.python_version(),
        "memory_usage": rss,
        "memory_peak": peak,
        "server_time": _now(),
    }


def caller_stack_trace() -> str:
    """Format the current call stack, leaving out frames from this SDK."""
    frames = [
        frame for frame in traceback.extract_stack()
        if not os.path.abspath(frame.filename).startswith(_PACKAGE_DIR)
    ]
    frames.reverse()
    return "\n".join(
        f"#{i} {frame.filename}({frame.lineno}): {frame.name}()"
        for i, frame in enumerate(frames)
    )


class PayloadBuilder:
    """Turns reportable events into wire payloads for a project."""

    def __init__(self, project_name: str, include_breadcrumbs: bool = True) -> None:
        self.project_name = project_name
        self.include_breadcrumbs = include_breadcrumbs

    def build_for_exception(
        self,
        event: ExceptionEvent,
        trail: BreadcrumbTrail | None = None,
    ) -> dict[str, Any]:
        exc = event.exception
        file, line = exception_origin(exc)
        exception_class = type_name(type(exc))
        fingerprint = Fingerprint.from_exception(exception_class, file, line)

        payload: dict[str, Any] = {
            "message": str(exc),
            "exception_class": exception_class,
            "stack_trace": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            "file": file,
            "line": line,
            "project": self.project_name,
            "environment": event.environment,
            "timestamp": _now(),
            "fingerprint": fingerprint.value,
            "level": LogLevel.ERROR.value,
        }
        self._attach_context(payload, event.http_status, event.request, trail)
        return payload

    def build_for_message(
        self,
        event: MessageEvent,
        trail: BreadcrumbTrail | None = None,
    ) -> dict[str, Any]:
        level = LogLevel.parse(event.level)
        fingerprint = Fingerprint.from_message(event.message, level.value)

        payload: dict[str, Any] = {
            "message": event.message,
            "exception_class": CUSTOM_MESSAGE,
            "stack_trace": caller_stack_trace(),
            "file": None,
            "line": None,
            "project": self.project_name,
            "environment": event.environment,
            "timestamp": _now(),
            "fingerprint": fingerprint.value,
            "level": level.value,
            "context": dict(event.context),
        }
        self._attach_context(payload, event.http_status, event.request, trail)
        return payload

    def _attach_context(
        self,
        payload: dict[str, Any],
        http_status: int | None,
        request: RequestInfo | None,
        trail: BreadcrumbTrail | None,
    ) -> None:
        if http_status is not None:
            payload["http_status"] = http_status

        if request is not None:
            payload["request"] = build_request_context(request)

        payload["server"] = build_server_context()

        if self.include_breadcrumbs and trail is not None:
            crumbs = trail.to_list()
            if crumbs:
                payload["breadcrumbs"] = crumbs
