"""Tests for payload assembly and redaction."""

from __future__ import annotations

import os
from datetime import datetime

import pytest

from error_explorer.breadcrumbs import BreadcrumbTrail
from error_explorer.events import ExceptionEvent, MessageEvent
from error_explorer.fingerprint import Fingerprint
from error_explorer.levels import LogLevel
from error_explorer.payload import (
    REDACTED,
    PayloadBuilder,
    build_request_context,
    build_server_context,
    sanitize_headers,
    sanitize_parameters,
)
from error_explorer.request import RequestInfo


def _raised(exc: BaseException) -> BaseException:
    try:
        raise exc
    except BaseException as caught:
        return caught


def _request() -> RequestInfo:
    return RequestInfo(
        url="https://shop.example.com/checkout?coupon=SPRING",
        method="POST",
        route="checkout",
        ip="203.0.113.7",
        user_agent="Mozilla/5.0",
        parameters={"email": "a@example.com", "password": "hunter2"},
        query={"coupon": "SPRING", "access_token": "abc"},
        headers={"Authorization": "Bearer xyz", "Content-Type": "application/json"},
    )


# ---- Redaction ----


def test_sensitive_parameter_redacted():
    result = sanitize_parameters({"user_password": "secret123", "normal_param": "value"})

    assert result["user_password"] == REDACTED
    assert result["normal_param"] == "value"


@pytest.mark.parametrize(
    "key",
    ["password", "PASSWORD", "api_token", "client_secret", "user_api_key", "apiKey", "Authorization", "monkey"],
)
def test_parameter_substring_match(key):
    assert sanitize_parameters({key: "v"})[key] == REDACTED


def test_parameters_keep_order():
    result = sanitize_parameters({"b": 1, "token": 2, "a": 3})
    assert list(result) == ["b", "token", "a"]


@pytest.mark.parametrize("name", ["Authorization", "authorization", "AUTHORIZATION", "Cookie", "X-Api-Key", "x-auth-token"])
def test_sensitive_header_redacted(name):
    assert sanitize_headers({name: "credential"})[name] == REDACTED


def test_header_list_shape_preserved():
    result = sanitize_headers({"cookie": ["a=1", "b=2"], "accept": ["text/html"]})

    assert result["cookie"] == [REDACTED]
    assert result["accept"] == ["text/html"]


def test_header_exact_match_only():
    result = sanitize_headers({"Content-Type": "application/json", "X-Authorization-Hint": "none"})

    assert result["Content-Type"] == "application/json"
    assert result["X-Authorization-Hint"] == "none"


def test_request_context():
    ctx = build_request_context(_request())

    assert ctx["url"] == "https://shop.example.com/checkout?coupon=SPRING"
    assert ctx["method"] == "POST"
    assert ctx["route"] == "checkout"
    assert ctx["ip"] == "203.0.113.7"
    assert ctx["user_agent"] == "Mozilla/5.0"
    assert ctx["parameters"] == {"email": "a@example.com", "password": REDACTED}
    assert ctx["query"] == {"coupon": "SPRING", "access_token": REDACTED}
    assert ctx["headers"] == {"Authorization": REDACTED, "Content-Type": "application/json"}


# ---- Server context ----


def test_server_context():
    ctx = build_server_context()

    assert set(ctx) == {"runtime_version", "memory_usage", "memory_peak", "server_time"}
    assert ctx["memory_usage"] > 0
    assert ctx["memory_peak"] >= ctx["memory_usage"]
    datetime.fromisoformat(ctx["server_time"])


# ---- Exception payload ----


def test_exception_payload_shape():
    exc = _raised(ValueError("Invalid quantity"))
    builder = PayloadBuilder("test-project")

    payload = builder.build_for_exception(ExceptionEvent(exc, environment="staging"))

    assert payload["message"] == "Invalid quantity"
    assert payload["exception_class"] == "ValueError"
    assert "ValueError: Invalid quantity" in payload["stack_trace"]
    assert payload["file"] == __file__
    assert isinstance(payload["line"], int)
    assert payload["project"] == "test-project"
    assert payload["environment"] == "staging"
    assert payload["level"] == "error"
    assert payload["fingerprint"] == Fingerprint.for_exception(exc).value
    assert datetime.fromisoformat(payload["timestamp"]).tzinfo is not None
    assert "server" in payload
    assert "http_status" not in payload
    assert "request" not in payload
    assert "breadcrumbs" not in payload
    assert "context" not in payload


def test_exception_payload_optional_sections():
    trail = BreadcrumbTrail()
    trail.log_navigation("/cart", "/checkout")
    exc = _raised(RuntimeError("boom"))

    payload = PayloadBuilder("p").build_for_exception(
        ExceptionEvent(exc, http_status=502, request=_request()), trail,
    )

    assert payload["http_status"] == 502
    assert payload["request"]["parameters"]["password"] == REDACTED
    assert len(payload["breadcrumbs"]) == 1
    assert payload["breadcrumbs"][0]["message"] == "Navigation: /cart → /checkout"
    assert payload["breadcrumbs"][0]["icon"] == "🧭"


def test_empty_trail_omits_breadcrumbs():
    payload = PayloadBuilder("p").build_for_exception(
        ExceptionEvent(_raised(RuntimeError())), BreadcrumbTrail(),
    )
    assert "breadcrumbs" not in payload


def test_breadcrumbs_disabled():
    trail = BreadcrumbTrail()
    trail.add("something")

    payload = PayloadBuilder("p", include_breadcrumbs=False).build_for_exception(
        ExceptionEvent(_raised(RuntimeError())), trail,
    )
    assert "breadcrumbs" not in payload


def test_building_does_not_consume_trail():
    trail = BreadcrumbTrail()
    trail.add("kept")
    PayloadBuilder("p").build_for_exception(ExceptionEvent(_raised(RuntimeError())), trail)

    assert len(trail) == 1


def test_unraised_exception_payload():
    payload = PayloadBuilder("p").build_for_exception(ExceptionEvent(KeyError("k")))

    assert payload["file"] == "N/A"
    assert payload["line"] == 0
    assert payload["exception_class"] == "KeyError"


# ---- Message payload ----


def test_message_payload_shape():
    event = MessageEvent(
        "Payment gateway slow",
        level=LogLevel.WARNING,
        context={"gateway": "stripe"},
    )

    payload = PayloadBuilder("p").build_for_message(event)

    assert payload["message"] == "Payment gateway slow"
    assert payload["exception_class"] == "CustomMessage"
    assert payload["file"] is None
    assert payload["line"] is None
    assert payload["level"] == "warning"
    assert payload["environment"] == "prod"
    assert payload["context"] == {"gateway": "stripe"}
    assert payload["fingerprint"] == Fingerprint.from_message("Payment gateway slow", "warning").value
    assert "http_status" not in payload
    assert "request" not in payload


def test_message_stack_trace_starts_at_caller():
    payload = PayloadBuilder("p").build_for_message(MessageEvent("hello"))
    trace = payload["stack_trace"]

    assert trace.startswith("#0 ")
    assert "test_message_stack_trace_starts_at_caller" in trace.splitlines()[0]
    assert os.path.join("error_explorer", "payload.py") not in trace


def test_message_level_from_string():
    payload = PayloadBuilder("p").build_for_message(MessageEvent("m", level="critical"))
    assert payload["level"] == "critical"
