"""Breadcrumb trail for error context."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from error_explorer.levels import BreadcrumbCategory, LogLevel

DEFAULT_MAX_BREADCRUMBS = 50
MIN_BREADCRUMBS = 10
MAX_BREADCRUMBS = 100


@dataclass(frozen=True)
class Breadcrumb:
    """A single recorded application event."""

    message: str
    category: BreadcrumbCategory = BreadcrumbCategory.CUSTOM
    level: LogLevel = LogLevel.INFO
    data: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "message": self.message,
            "category": self.category.value,
            "level": self.level.value,
            "data": dict(self.data),
            "icon": self.category.icon,
        }


def _validate_capacity(capacity: int) -> int:
    if capacity < MIN_BREADCRUMBS or capacity > MAX_BREADCRUMBS:
        raise ValueError(
            f"Max breadcrumbs must be between {MIN_BREADCRUMBS} and {MAX_BREADCRUMBS}"
        )
    return capacity


class BreadcrumbTrail:
    """Bounded, ordered trail of recent events shared across threads.

    The oldest breadcrumb is evicted once the trail grows past its
    capacity. All reads and writes go through a single lock so that
    concurrent writers never push the trail over capacity and a
    snapshot never sees a half-evicted state.
    """

    def __init__(self, capacity: int = DEFAULT_MAX_BREADCRUMBS) -> None:
        self._capacity = _validate_capacity(capacity)
        self._crumbs: deque[Breadcrumb] = deque()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._crumbs)

    def add(
        self,
        message: str,
        category: BreadcrumbCategory | str = BreadcrumbCategory.CUSTOM,
        level: LogLevel | str = LogLevel.INFO,
        data: dict[str, Any] | None = None,
    ) -> Breadcrumb:
        """Append a breadcrumb, evicting the oldest one on overflow."""
        crumb = Breadcrumb(
            message=message,
            category=BreadcrumbCategory.parse(category),
            level=LogLevel.parse(level),
            data=data or {},
        )
        with self._lock:
            self._crumbs.append(crumb)
            if len(self._crumbs) > self._capacity:
                self._crumbs.popleft()
        return crumb

    def snapshot(self) -> list[Breadcrumb]:
        """Return the current breadcrumbs, oldest first."""
        with self._lock:
            return list(self._crumbs)

    def to_list(self) -> list[dict[str, Any]]:
        return [crumb.to_dict() for crumb in self.snapshot()]

    def clear(self) -> None:
        with self._lock:
            self._crumbs.clear()

    def set_capacity(self, capacity: int) -> None:
        """Change the capacity, trimming the oldest entries right away."""
        _validate_capacity(capacity)
        with self._lock:
            self._capacity = capacity
            while len(self._crumbs) > capacity:
                self._crumbs.popleft()

    # ------------------------------------------------------------------
    # Convenience writers
    # ------------------------------------------------------------------

    def log_navigation(self, from_: str, to: str, data: dict[str, Any] | None = None) -> Breadcrumb:
        return self.add(
            f"Navigation: {from_} → {to}",
            BreadcrumbCategory.NAVIGATION,
            LogLevel.INFO,
            {**(data or {}), "from": from_, "to": to},
        )

    def log_user_action(self, action: str, data: dict[str, Any] | None = None) -> Breadcrumb:
        return self.add(
            f"User action: {action}",
            BreadcrumbCategory.USER_ACTION,
            LogLevel.INFO,
            {**(data or {}), "action": action},
        )

    def log_http_request(
        self,
        method: str,
        url: str,
        status_code: int | None = None,
        data: dict[str, Any] | None = None,
    ) -> Breadcrumb:
        if status_code is None:
            level = LogLevel.INFO
        elif status_code >= 500:
            level = LogLevel.ERROR
        elif status_code >= 400:
            level = LogLevel.WARNING
        else:
            level = LogLevel.INFO

        message = f"HTTP {method} {url}"
        if status_code is not None:
            message += f" [{status_code}]"

        return self.add(
            message,
            BreadcrumbCategory.HTTP_REQUEST,
            level,
            {**(data or {}), "method": method, "url": url, "status_code": status_code},
        )

    def log_query(
        self,
        query: str,
        duration_ms: float | None = None,
        data: dict[str, Any] | None = None,
    ) -> Breadcrumb:
        if duration_ms is None:
            level = LogLevel.INFO
        elif duration_ms > 5000:
            level = LogLevel.ERROR
        elif duration_ms > 1000:
            level = LogLevel.WARNING
        else:
            level = LogLevel.INFO

        shown = query[:100] + "..." if len(query) > 100 else query
        message = f"Query: {shown}"
        if duration_ms is not None:
            message += f" ({duration_ms}ms)"

        return self.add(
            message,
            BreadcrumbCategory.DATABASE,
            level,
            {**(data or {}), "query": query, "duration_ms": duration_ms},
        )

    def log_performance(self, metric: str, value: float, unit: str = "ms") -> Breadcrumb:
        if unit == "ms":
            level = LogLevel.WARNING if value > 1000 else LogLevel.INFO
        elif unit == "mb":
            level = LogLevel.WARNING if value > 100 else LogLevel.INFO
        else:
            level = LogLevel.INFO

        return self.add(
            f"Performance: {metric} = {value}{unit}",
            BreadcrumbCategory.PERFORMANCE,
            level,
            {"metric": metric, "value": value, "unit": unit},
        )

    def log_security(
        self,
        event: str,
        level: LogLevel | str = LogLevel.WARNING,
        data: dict[str, Any] | None = None,
    ) -> Breadcrumb:
        return self.add(
            f"Security: {event}",
            BreadcrumbCategory.SECURITY,
            level,
            {**(data or {}), "event": event},
        )
