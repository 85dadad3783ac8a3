"""Reportable event definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from error_explorer.levels import LogLevel


@dataclass
class ExceptionEvent:
    """An exception caught at a reporting boundary."""

    exception: BaseException
    environment: str = "prod"
    http_status: int | None = None
    request: Any = None


@dataclass
class MessageEvent:
    """A custom message reported without an exception."""

    message: str
    environment: str = "prod"
    http_status: int | None = None
    request: Any = None
    level: LogLevel = LogLevel.ERROR
    context: dict[str, Any] = field(default_factory=dict)


def type_name(cls: type) -> str:
    """Dotted name used to identify an exception type on the wire.

    Builtins are reported by their bare name (``ValueError``), everything
    else as ``module.QualName``.
    """
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


_STATUS_BY_NAME = (
    ("NotFound", 404),
    ("AccessDenied", 403),
    ("Forbidden", 403),
    ("Unauthorized", 401),
    ("BadRequest", 400),
    ("MethodNotAllowed", 405),
    ("TooManyRequests", 429),
    ("Conflict", 409),
    ("UnprocessableEntity", 422),
)


def determine_http_status(exc: BaseException) -> int:
    """Resolve the HTTP status a framework would answer for ``exc``."""
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and 100 <= value <= 599:
            return value

    name = type(exc).__name__
    for fragment, status in _STATUS_BY_NAME:
        if fragment in name:
            return status
    return 500
