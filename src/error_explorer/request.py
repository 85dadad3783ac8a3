"""Framework-neutral view of the HTTP request being served."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl


@dataclass
class RequestInfo:
    """The parts of an incoming request attached to a report.

    ``headers`` values may be plain strings or lists of strings; lists are
    kept as lists when redacted.
    """

    url: str = ""
    method: str = ""
    route: str | None = None
    ip: str | None = None
    user_agent: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_flask(cls, request: Any) -> RequestInfo:
        """Build from a ``flask.Request`` (or any werkzeug request)."""
        rule = getattr(request, "url_rule", None)
        return cls(
            url=request.url,
            method=request.method,
            route=getattr(request, "endpoint", None) or (rule.rule if rule else None),
            ip=request.remote_addr,
            user_agent=request.headers.get("User-Agent"),
            parameters=_flatten(request.form.to_dict(flat=False)),
            query=_flatten(request.args.to_dict(flat=False)),
            headers={key: value for key, value in request.headers.items()},
        )

    @classmethod
    def from_asgi_scope(cls, scope: dict[str, Any]) -> RequestInfo:
        """Build from an ASGI HTTP scope.

        The body is not read here; ``parameters`` stays empty.
        """
        headers: dict[str, Any] = {}
        for raw_key, raw_value in scope.get("headers", []):
            key = raw_key.decode("latin-1")
            value = raw_value.decode("latin-1")
            if key in headers:
                existing = headers[key]
                headers[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
            else:
                headers[key] = value

        scheme = scope.get("scheme", "http")
        host = headers.get("host")
        if isinstance(host, list):
            host = host[0]
        if not host and scope.get("server"):
            server_host, server_port = scope["server"]
            host = f"{server_host}:{server_port}"
        path = scope.get("root_path", "") + scope.get("path", "")
        query_string = scope.get("query_string", b"").decode("latin-1")
        url = f"{scheme}://{host or 'localhost'}{path}"
        if query_string:
            url += f"?{query_string}"

        route = scope.get("route")
        client = scope.get("client")
        user_agent = headers.get("user-agent")
        return cls(
            url=url,
            method=scope.get("method", ""),
            route=getattr(route, "path", None) if route is not None else None,
            ip=client[0] if client else None,
            user_agent=user_agent[0] if isinstance(user_agent, list) else user_agent,
            query=_flatten(_group(parse_qsl(query_string, keep_blank_values=True))),
            headers=headers,
        )


def _group(pairs: list[tuple[str, str]]) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for key, value in pairs:
        grouped.setdefault(key, []).append(value)
    return grouped


def _flatten(multi: dict[str, list[Any]]) -> dict[str, Any]:
    """Collapse single-valued multidict entries to scalars."""
    return {key: values[0] if len(values) == 1 else values for key, values in multi.items()}
