"""Configuration models and loaders for jirawalk."""

from .environment import EnvironmentSettings, load_environment_settings
from .loader import load_config, load_raw_config
from .models import HTTPClientConfig, JiraConfig, LoggingConfig, RateLimitConfig, RetryConfig

__all__ = [
    "EnvironmentSettings",
    "HTTPClientConfig",
    "JiraConfig",
    "LoggingConfig",
    "RateLimitConfig",
    "RetryConfig",
    "load_config",
    "load_environment_settings",
    "load_raw_config",
]
