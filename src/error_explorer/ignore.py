"""Decide which exception types are exempt from reporting."""

from __future__ import annotations

from collections.abc import Iterable

from error_explorer.events import type_name


def should_ignore(exception: BaseException | type | str, ignored: Iterable[str]) -> bool:
    """Return True when ``exception`` matches an entry of ``ignored``.

    Exceptions and exception classes match on their own type name or the
    name of any base class, so ignoring ``"Exception"`` ignores every
    subclass of it. A bare type-name string can only be compared exactly.
    """
    names = set(ignored)
    if not names:
        return False

    if isinstance(exception, str):
        return exception in names

    cls = exception if isinstance(exception, type) else type(exception)
    return any(type_name(base) in names for base in cls.__mro__)
