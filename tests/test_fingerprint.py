"""Tests for error fingerprints."""

from __future__ import annotations

import hashlib

from error_explorer.fingerprint import Fingerprint


def test_from_exception_is_deterministic():
    a = Fingerprint.from_exception("ValueError", "/app/views.py", 42)
    b = Fingerprint.from_exception("ValueError", "/app/views.py", 42)

    assert a == b
    assert str(a) == a.value


def test_from_exception_value():
    fp = Fingerprint.from_exception("ValueError", "/app/views.py", 42)

    assert fp.value == hashlib.md5(b"ValueError:/app/views.py:42").hexdigest()
    assert fp.exception_class == "ValueError"
    assert fp.file == "/app/views.py"
    assert fp.line == 42


def test_from_exception_varies_with_each_field():
    base = Fingerprint.from_exception("ValueError", "/app/views.py", 42).value

    assert Fingerprint.from_exception("KeyError", "/app/views.py", 42).value != base
    assert Fingerprint.from_exception("ValueError", "/app/models.py", 42).value != base
    assert Fingerprint.from_exception("ValueError", "/app/views.py", 43).value != base


def test_from_message_two_stage_hash():
    inner = hashlib.md5(b"Payment gateway timeout").hexdigest()
    expected = hashlib.md5(f"CustomMessage:warning:{inner}".encode()).hexdigest()

    fp = Fingerprint.from_message("Payment gateway timeout", "warning")

    assert fp.value == expected
    assert fp.exception_class == "CustomMessage"
    assert fp.file == "N/A"
    assert fp.line == 0


def test_from_message_defaults_to_error_level():
    assert Fingerprint.from_message("msg") == Fingerprint.from_message("msg", "error")


def test_from_message_depends_on_level_and_content():
    base = Fingerprint.from_message("msg", "error").value

    assert Fingerprint.from_message("msg", "info").value != base
    assert Fingerprint.from_message("msg2", "error").value != base


def test_fingerprint_is_fixed_length_hex():
    for fp in (
        Fingerprint.from_exception("E", "f", 1),
        Fingerprint.from_message("x" * 10_000),
    ):
        assert len(fp.value) == 32
        int(fp.value, 16)


def test_for_exception_uses_raise_site():
    try:
        raise KeyError("missing")
    except KeyError as exc:
        fp = Fingerprint.for_exception(exc)

    assert fp.exception_class == "KeyError"
    assert fp.file == __file__
    assert fp.line > 0


def test_for_exception_never_raised():
    fp = Fingerprint.for_exception(RuntimeError("not raised"))

    assert fp.file == "N/A"
    assert fp.line == 0
    assert fp == Fingerprint.from_exception("RuntimeError", "N/A", 0)
