"""Severity levels and breadcrumb categories."""

from __future__ import annotations

from enum import StrEnum

_PRIORITIES = {
    "debug": 100,
    "info": 200,
    "warning": 300,
    "error": 400,
    "critical": 500,
    "alert": 550,
    "emergency": 600,
}


class LogLevel(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    ALERT = "alert"
    EMERGENCY = "emergency"

    @property
    def priority(self) -> int:
        return _PRIORITIES[self.value]

    @classmethod
    def parse(cls, value: LogLevel | str) -> LogLevel:
        """Coerce a level or its string value, rejecting unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(level.value for level in cls)
            raise ValueError(f'Invalid log level "{value}". Must be one of: {valid}') from None


_ICONS = {
    "navigation": "🧭",
    "user": "👤",
    "http": "🌐",
    "query": "🗄️",
    "system": "⚙️",
    "custom": "🏷️",
    "performance": "⚡",
    "security": "🔒",
    "business": "💼",
}


class BreadcrumbCategory(StrEnum):
    NAVIGATION = "navigation"
    USER_ACTION = "user"
    HTTP_REQUEST = "http"
    DATABASE = "query"
    SYSTEM = "system"
    CUSTOM = "custom"
    PERFORMANCE = "performance"
    SECURITY = "security"
    BUSINESS_LOGIC = "business"

    @property
    def icon(self) -> str:
        return _ICONS[self.value]

    @classmethod
    def parse(cls, value: BreadcrumbCategory | str) -> BreadcrumbCategory:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(category.value for category in cls)
            raise ValueError(f'Invalid breadcrumb category "{value}". Must be one of: {valid}') from None
