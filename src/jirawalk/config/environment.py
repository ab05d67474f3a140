"""Environment-driven configuration helpers for jirawalk.

Responsibilities:

- reading ``.env`` / process environment through :class:`EnvironmentSettings`;
- turning the short ``JIRAWALK_*`` variables into a nested override mapping
  that :func:`jirawalk.config.loader.load_config` merges over the YAML payload.
"""

from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "EnvironmentSettings",
    "load_environment_settings",
    "build_env_override_mapping",
]

# (settings attribute, path inside the JiraConfig payload)
_ENV_OVERRIDE_SPECS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("endpoint", ("endpoint",)),
    ("username", ("username",)),
    ("api_token", ("api_token",)),
    ("page_size", ("page_size",)),
    ("search_protocol", ("search_protocol",)),
    ("log_level", ("logging", "level")),
    ("log_format", ("logging", "format")),
)


class EnvironmentSettings(BaseSettings):
    """Typed view of ``JIRAWALK_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JIRAWALK_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    endpoint: str | None = Field(default=None)
    username: str | None = Field(default=None)
    api_token: SecretStr | None = Field(default=None)
    page_size: int | None = Field(default=None)
    search_protocol: str | None = Field(default=None)
    log_level: str | None = Field(default=None)
    log_format: str | None = Field(default=None)

    @field_validator("endpoint", "username", "search_protocol", "log_level", "log_format")
    @classmethod
    def _blank_as_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None


def load_environment_settings(*, env_file: Path | None = None) -> EnvironmentSettings:
    """Load and validate jirawalk environment settings.

    Parameters
    ----------
    env_file:
        Optional path to a ``.env`` file. When omitted, the default search order
        from :class:`EnvironmentSettings` is used.
    """

    init_kwargs: dict[str, Any] = {}
    if env_file is not None:
        init_kwargs["_env_file"] = env_file
    return EnvironmentSettings(**init_kwargs)


def build_env_override_mapping(settings: EnvironmentSettings) -> dict[str, Any]:
    """Return nested overrides derived from short environment variables."""

    overrides: dict[str, Any] = {}
    for attr, path in _ENV_OVERRIDE_SPECS:
        value = _extract_plain_value(getattr(settings, attr))
        if value is None:
            continue
        _assign_nested_override(overrides, path, value)
    return overrides


def _extract_plain_value(value: object) -> object | None:
    if isinstance(value, SecretStr):
        plain = value.get_secret_value().strip()
        return plain or None
    return value


def _assign_nested_override(
    target: MutableMapping[str, Any],
    path: Iterable[str],
    value: object,
) -> None:
    current: MutableMapping[str, Any] = target
    parts = tuple(path)
    for part in parts[:-1]:
        existing = current.get(part)
        if not isinstance(existing, MutableMapping):
            existing = {}
            current[part] = existing
        current = existing
    current[parts[-1]] = value
