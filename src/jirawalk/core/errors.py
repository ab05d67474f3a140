"""Common domain-specific exceptions for jirawalk."""

from __future__ import annotations

__all__ = [
    "JiraWalkError",
    "NotConfiguredError",
    "InvalidArgumentError",
    "ConfigError",
]


class JiraWalkError(Exception):
    """Base class for jirawalk domain errors."""


class NotConfiguredError(JiraWalkError, RuntimeError):
    """Raised when an object is used before its mandatory configuration step."""


class InvalidArgumentError(JiraWalkError, TypeError, ValueError):
    """Raised when a caller passes an argument of the wrong kind or value."""


class ConfigError(JiraWalkError):
    """Raised when configuration files or environment values cannot be loaded."""
