"""HTTP client configuration models."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt

StatusCode = Annotated[int, Field(ge=100, le=599)]


class RetryConfig(BaseModel):
    """Retry policy for HTTP clients."""

    model_config = ConfigDict(extra="forbid")

    total: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Total number of retry attempts (excluding the first call).",
    )
    backoff_multiplier: PositiveFloat = Field(
        default=2.0,
        description="Multiplier applied between retry attempts for exponential backoff.",
    )
    backoff_max: PositiveFloat = Field(
        default=30.0,
        description="Maximum delay in seconds between retry attempts.",
    )
    statuses: tuple[StatusCode, ...] = Field(
        default=(408, 429, 500, 502, 503, 504),
        description="HTTP status codes that should trigger a retry.",
    )


class RateLimitConfig(BaseModel):
    """Client-side token bucket rate limiting."""

    model_config = ConfigDict(extra="forbid")

    max_calls: PositiveInt = Field(
        default=10,
        description="Maximum number of calls allowed within the configured period.",
    )
    period: PositiveFloat = Field(
        default=1.0,
        description="Time window in seconds for the rate limit.",
    )
    jitter: bool = Field(
        default=True,
        description="Whether to add jitter to rate limited calls.",
    )


class HTTPClientConfig(BaseModel):
    """Configuration for the HTTP transport talking to one Jira instance."""

    model_config = ConfigDict(extra="forbid")

    connect_timeout_sec: PositiveFloat = Field(
        default=10.0,
        description="Connection timeout in seconds.",
    )
    read_timeout_sec: PositiveFloat = Field(
        default=60.0,
        description="Socket read timeout in seconds.",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verify the server certificate.",
    )
    retries: RetryConfig = Field(default_factory=RetryConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    headers: Mapping[str, str] = Field(
        default_factory=lambda: {
            "User-Agent": "jirawalk/0.1 (UnifiedAPIClient)",
            "Accept": "application/json",
            "Content-Type": "application/json;charset=UTF-8",
        },
        description="Default headers that will be sent with each request.",
    )
