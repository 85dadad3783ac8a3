"""HTTP client that delivers error payloads to the Error Explorer webhook."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from error_explorer.config import ReporterConfig

logger = logging.getLogger("error_explorer.client")

_DEFAULT_TIMEOUT = 5
_DEFAULT_MAX_RETRIES = 3
_BACKOFF_STEP = 0.1

FailureSink = Callable[[BaseException, dict[str, Any]], None]


def _get_version() -> str:
    try:
        from error_explorer import __version__
        return __version__
    except ImportError:
        return "0.1.0"


USER_AGENT = f"ErrorExplorer-SDK/{_get_version()}-python"


def log_delivery_failure(error: BaseException, summary: dict[str, Any]) -> None:
    """Default failure sink: record the dropped event on the SDK logger."""
    logger.error(
        "Failed to deliver %s to Error Explorer after %d attempts: %s",
        summary.get("exception_class", "event"),
        summary.get("attempts", 0),
        error,
        extra={"error_explorer": {"exception": str(error), **summary}},
    )


class WebhookClient:
    """Synchronous webhook delivery with linear backoff.

    Each attempt is a single POST with the configured timeout. Failed
    attempts are retried ``max_retries`` times, sleeping
    ``0.1s * attempt`` in between. A delivery that exhausts its attempts is
    handed to the failure sink and never raises.
    """

    def __init__(
        self,
        webhook_url: str,
        token: str,
        timeout: float = _DEFAULT_TIMEOUT,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        http_client: httpx.Client | None = None,
        failure_sink: FailureSink | None = None,
    ) -> None:
        self._webhook_url = webhook_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._max_retries = max_retries
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(verify=verify_ssl)
        self._failure_sink = failure_sink or log_delivery_failure

    @classmethod
    def from_config(
        cls,
        config: ReporterConfig,
        http_client: httpx.Client | None = None,
        failure_sink: FailureSink | None = None,
    ) -> WebhookClient:
        return cls(
            webhook_url=config.webhook_url,
            token=config.token,
            timeout=config.http_client.timeout,
            max_retries=config.http_client.max_retries,
            verify_ssl=config.http_client.verify_ssl,
            http_client=http_client,
            failure_sink=failure_sink,
        )

    @property
    def endpoint(self) -> str:
        return f"{self._webhook_url}/webhook/error/{self._token}"

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    def send(self, payload: dict[str, Any]) -> bool:
        """POST ``payload``; returns True once any attempt completes."""
        # Values JSON cannot encode natively (Decimal, datetime, UUID) go out as str.
        body = json.dumps(payload, default=str)
        last_error: BaseException | None = None

        for attempt in range(1, self.max_attempts + 1):
            headers = {
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
                "X-Attempt": str(attempt),
                "X-Max-Attempts": str(self.max_attempts),
            }
            try:
                resp = self._http.post(
                    self.endpoint, content=body, headers=headers, timeout=self._timeout,
                )
            except Exception as e:
                last_error = e
                logger.debug("Error Explorer delivery attempt %d failed: %s", attempt, e)
                if attempt < self.max_attempts:
                    time.sleep(_BACKOFF_STEP * attempt)
                continue

            status = getattr(resp, "status_code", None)
            if isinstance(status, int) and status >= 400:
                logger.warning("Error Explorer webhook returned %d", status)
            return True

        self._failure_sink(last_error or RuntimeError("Webhook failed without exception"), {
            "attempts": self.max_attempts,
            "message": payload.get("message"),
            "exception_class": payload.get("exception_class"),
            "fingerprint": payload.get("fingerprint"),
        })
        return False

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> WebhookClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
