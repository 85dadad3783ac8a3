"""Error Explorer configuration using pydantic-settings with YAML support."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from error_explorer.levels import LogLevel

_IDENTIFIER = re.compile(r"^[a-zA-Z0-9_-]+$")

DEFAULT_IGNORED_EXCEPTIONS = (
    "werkzeug.exceptions.Forbidden",
    "werkzeug.exceptions.NotFound",
)


class HttpClientConfig(BaseModel):
    """Webhook transport settings."""

    model_config = ConfigDict(frozen=True)

    timeout: int = Field(default=5, ge=1, le=30, description="HTTP timeout in seconds")
    max_retries: int = Field(default=3, ge=0, le=5, description="Retries after the first attempt")
    verify_ssl: bool = True


class BreadcrumbsConfig(BaseModel):
    """Breadcrumb collection settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    max_breadcrumbs: int = Field(default=50, ge=10, le=100)


class ReporterConfig(BaseSettings):
    """Root configuration for the error reporter."""

    model_config = SettingsConfigDict(
        env_prefix="ERROR_EXPLORER_",
        env_nested_delimiter="__",
        frozen=True,
    )

    webhook_url: str = Field(description="The Error Explorer webhook URL")
    token: str = Field(description="The unique project token for authentication")
    project_name: str = Field(description="The project name identifier")
    enabled: bool = True
    minimum_level: LogLevel = LogLevel.ERROR
    ignore_exceptions: tuple[str, ...] = Field(
        default=DEFAULT_IGNORED_EXCEPTIONS,
        description="Exception type names that are never reported",
    )
    http_client: HttpClientConfig = Field(default_factory=HttpClientConfig)
    breadcrumbs: BreadcrumbsConfig = Field(default_factory=BreadcrumbsConfig)

    @field_validator("webhook_url")
    @classmethod
    def _validate_webhook_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("webhook_url must be a valid URL")
        return value

    @field_validator("token")
    @classmethod
    def _validate_token(cls, value: str) -> str:
        if len(value) < 10:
            raise ValueError("token must be at least 10 characters long")
        if not _IDENTIFIER.match(value):
            raise ValueError(
                "token must contain only alphanumeric characters, hyphens and underscores"
            )
        return value

    @field_validator("project_name")
    @classmethod
    def _validate_project_name(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("project_name must be at least 2 characters long")
        if not _IDENTIFIER.match(value):
            raise ValueError(
                "project_name must contain only alphanumeric characters, hyphens and underscores"
            )
        return value

    @field_validator("minimum_level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    def is_production_ready(self) -> bool:
        return (
            self.enabled
            and self.webhook_url.startswith("https://")
            and len(self.token) >= 10
            and self.http_client.verify_ssl
        )


def load_config(config_path: str | Path | None = None, **overrides: Any) -> ReporterConfig:
    """Load configuration from a YAML file and environment variables.

    Keyword overrides win over YAML values, which win over
    ``ERROR_EXPLORER_*`` environment variables, which win over defaults.
    The YAML document may nest everything under an ``error_explorer`` key.
    """
    yaml_data: dict[str, Any] = {}

    if config_path is None:
        candidates = [
            Path("error_explorer.yaml"),
            Path("error_explorer.yml"),
            Path("/etc/error_explorer/error_explorer.yaml"),
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = candidate
                break

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}
            if isinstance(yaml_data.get("error_explorer"), dict):
                yaml_data = yaml_data["error_explorer"]

    return ReporterConfig(**{**yaml_data, **overrides})
