"""Configuration loading utilities."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError

from jirawalk.core.errors import ConfigError
from jirawalk.core.logger import UnifiedLogger
from jirawalk.core.logging.log_events import LogEvents

from .environment import (
    EnvironmentSettings,
    build_env_override_mapping,
    load_environment_settings,
)
from .models import JiraConfig

__all__ = ["load_config", "load_raw_config"]


def load_raw_config(path: Path) -> dict[str, Any]:
    """Read a YAML configuration file into a plain mapping."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        msg = f"Cannot read configuration file {path}: {exc}"
        raise ConfigError(msg) from exc
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in configuration file {path}: {exc}"
        raise ConfigError(msg) from exc

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        msg = f"Configuration root in {path} must be a mapping, got {type(payload).__name__}"
        raise ConfigError(msg)
    return dict(payload)


def load_config(
    path: Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    environment: EnvironmentSettings | None = None,
) -> JiraConfig:
    """Build a validated :class:`JiraConfig`.

    Layers are merged in order: YAML file, ``JIRAWALK_*`` environment, explicit
    ``overrides`` (for example CLI options).
    """

    log = UnifiedLogger.get(__name__).bind(component="config.loader")

    payload: dict[str, Any] = {}
    if path is not None:
        payload = load_raw_config(path)
        log.debug(LogEvents.CONFIG_FILE_LOADED, path=str(path))

    settings = environment if environment is not None else load_environment_settings()
    env_overrides = build_env_override_mapping(settings)
    if env_overrides:
        payload = _deep_merge(payload, env_overrides)
        log.debug(LogEvents.CONFIG_ENV_APPLIED, keys=sorted(env_overrides))

    if overrides:
        payload = _deep_merge(payload, overrides)

    try:
        return JiraConfig.model_validate(payload)
    except ValidationError as exc:
        msg = f"Invalid jirawalk configuration: {exc}"
        raise ConfigError(msg) from exc


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(existing, MutableMapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(cast(Mapping[str, Any], existing), value)
        else:
            merged[key] = value
    return merged
