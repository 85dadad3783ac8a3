"""Query breadcrumbs for psycopg2.

Usage::

    from error_explorer.integrations.database import breadcrumb_cursor_factory

    conn = psycopg2.connect(dsn, cursor_factory=breadcrumb_cursor_factory())
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

_cursor_class: Any = None


def record_query(execute: Callable[..., Any], query: Any, vars: Any = None) -> Any:
    """Run ``execute(query, vars)`` and add a query breadcrumb with its duration."""
    import error_explorer

    start = time.monotonic()
    error_msg = None
    try:
        return execute(query, vars)
    except Exception as exc:
        error_msg = str(exc)
        raise
    finally:
        duration_ms = round((time.monotonic() - start) * 1000, 2)
        query_str = query if isinstance(query, str) else str(query)
        data = {"error": error_msg} if error_msg else None
        error_explorer.log_query(query_str, duration_ms, data)


def breadcrumb_cursor_factory() -> Any:
    """Return a psycopg2 cursor class that records every executed query."""
    global _cursor_class

    if _cursor_class is None:
        import psycopg2.extensions

        class BreadcrumbCursor(psycopg2.extensions.cursor):
            def execute(self, query: Any, vars: Any = None) -> Any:
                return record_query(super().execute, query, vars)

        _cursor_class = BreadcrumbCursor
    return _cursor_class
