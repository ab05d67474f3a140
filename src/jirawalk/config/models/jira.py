"""Top-level configuration model for a Jira connection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, SecretStr, field_validator

from jirawalk.config.models.http import HTTPClientConfig
from jirawalk.core.logger import LogFormat
from jirawalk.core.pagination.cursor import PaginationProtocol

__all__ = ["JiraConfig", "LoggingConfig"]


class LoggingConfig(BaseModel):
    """Logging section of the configuration file."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO")
    format: LogFormat = Field(default=LogFormat.JSON)

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()


class JiraConfig(BaseModel):
    """Connection, search and transport settings for one Jira instance."""

    model_config = ConfigDict(extra="forbid")

    endpoint: str = Field(..., description="Base URL of the Jira instance.")
    username: str | None = Field(default=None)
    api_token: SecretStr | None = Field(default=None)
    search_protocol: PaginationProtocol = Field(
        default=PaginationProtocol.TOKEN,
        description="Pagination protocol of the search endpoint used for first pages.",
    )
    page_size: PositiveInt = Field(default=50)
    http: HTTPClientConfig = Field(default_factory=HTTPClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("endpoint")
    @classmethod
    def _normalize_endpoint(cls, value: str) -> str:
        endpoint = value.strip().rstrip("/")
        if not endpoint.startswith(("http://", "https://")):
            msg = f"endpoint must be an http(s) URL, got {value!r}"
            raise ValueError(msg)
        return endpoint

    @property
    def credentials(self) -> tuple[str, str] | None:
        """Return ``(username, token)`` for basic auth, or ``None``."""

        if self.username is None or self.api_token is None:
            return None
        return (self.username, self.api_token.get_secret_value())
