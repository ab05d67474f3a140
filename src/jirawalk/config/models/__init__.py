"""Pydantic models describing jirawalk configuration."""

from .http import HTTPClientConfig, RateLimitConfig, RetryConfig
from .jira import JiraConfig, LoggingConfig

__all__ = [
    "HTTPClientConfig",
    "JiraConfig",
    "LoggingConfig",
    "RateLimitConfig",
    "RetryConfig",
]
