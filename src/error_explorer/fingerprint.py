"""Stable deduplication keys for reported errors and messages."""

from __future__ import annotations

import hashlib
import traceback
from dataclasses import dataclass

from error_explorer.events import type_name

CUSTOM_MESSAGE = "CustomMessage"


def _md5(value: str) -> str:
    return hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()


@dataclass(frozen=True)
class Fingerprint:
    """Opaque 32-character hex key identifying an error or message."""

    value: str
    exception_class: str
    file: str
    line: int

    @classmethod
    def from_exception(cls, exception_class: str, file: str, line: int) -> Fingerprint:
        return cls(
            value=_md5(f"{exception_class}:{file}:{line}"),
            exception_class=exception_class,
            file=file,
            line=line,
        )

    @classmethod
    def from_message(cls, message: str, level: str = "error") -> Fingerprint:
        """Fingerprint a custom message.

        The message is hashed on its own first so the identity string stays
        short however long the message is.
        """
        return cls(
            value=_md5(f"{CUSTOM_MESSAGE}:{level}:{_md5(message)}"),
            exception_class=CUSTOM_MESSAGE,
            file="N/A",
            line=0,
        )

    @classmethod
    def for_exception(cls, exc: BaseException) -> Fingerprint:
        file, line = exception_origin(exc)
        return cls.from_exception(type_name(type(exc)), file, line)

    def __str__(self) -> str:
        return self.value


def exception_origin(exc: BaseException) -> tuple[str, int]:
    """Return the file and line where ``exc`` was raised."""
    if exc.__traceback__ is None:
        return "N/A", 0
    frame = traceback.extract_tb(exc.__traceback__)[-1]
    return frame.filename, frame.lineno or 0
