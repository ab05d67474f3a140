"""Utilities for configuring the project wide structured logger.

Every entry point (library callers, the CLI, tests) goes through
:class:`UnifiedLogger` so that log lines share one processor chain and one
renderer. Context is bound explicitly, either per logger via ``bind`` or
globally through structlog context variables.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, MutableMapping, Sequence
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Final, cast

import structlog
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    unbind_contextvars,
)
from structlog.exceptions import DropEvent
from structlog.stdlib import BoundLogger

__all__ = [
    "LogFormat",
    "LogConfig",
    "DEFAULT_LOG_LEVEL",
    "configure_logging",
    "bind_global_context",
    "reset_global_context",
    "get_logger",
    "UnifiedLogger",
]


class LogFormat(str, Enum):
    """Supported output formats for the renderer."""

    JSON = "json"
    KEY_VALUE = "key_value"


DEFAULT_LOG_LEVEL = logging.INFO

_DEFAULT_LOGGER_NAME: Final[str] = "jirawalk"
_REDACTED: Final[str] = "***REDACTED***"
_LOG_METHOD_TO_LEVEL: Mapping[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "exception": logging.ERROR,
    "fatal": logging.CRITICAL,
}

_KEY_ORDER: Sequence[str] = (
    "timestamp",
    "level",
    "component",
    "message",
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """User configurable logging parameters."""

    level: int | str = DEFAULT_LOG_LEVEL
    format: LogFormat = LogFormat.JSON
    redact_fields: Sequence[str] = ("api_token", "password", "authorization")


def _coerce_log_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    mapped_level = logging.getLevelNamesMapping().get(level.upper())
    if isinstance(mapped_level, int):
        return mapped_level
    raise ValueError(f"Unsupported log level: {level}")


def _redact_sensitive_values(
    _: Any,
    __: str,
    event_dict: MutableMapping[str, Any],
    *,
    redact_fields: Iterable[str],
) -> MutableMapping[str, Any]:
    for field in redact_fields:
        if field in event_dict:
            event_dict[field] = _REDACTED
    return event_dict


def _plain_event_name(
    _: Any,
    __: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    event = event_dict.get("event")
    if isinstance(event, Enum):
        event_dict["event"] = str(event.value)
    return event_dict


def _shared_processors(config: LogConfig) -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _plain_event_name,
        structlog.processors.EventRenamer("message"),
        partial(
            _redact_sensitive_values,
            redact_fields=config.redact_fields,
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer_for(format: LogFormat) -> Any:
    if format is LogFormat.KEY_VALUE:
        return structlog.processors.KeyValueRenderer(
            key_order=_KEY_ORDER,
            sort_keys=False,
            drop_missing=True,
        )
    return structlog.processors.JSONRenderer(sort_keys=True, ensure_ascii=False)


def _safe_filter_by_level(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Drop events that do not satisfy the active logging level."""

    effective_logger = logger or logging.getLogger(_DEFAULT_LOGGER_NAME)
    level = _LOG_METHOD_TO_LEVEL.get(method_name.lower(), logging.INFO)
    if effective_logger.isEnabledFor(level):
        return event_dict
    raise DropEvent


def configure_logging(
    config: LogConfig | None = None,
    *,
    additional_processors: Sequence[Any] | None = None,
) -> None:
    """Initialise logging based on the supplied configuration."""

    cfg = config or LogConfig()
    shared_processors = _shared_processors(cfg)
    if additional_processors:
        shared_processors = [*shared_processors, *additional_processors]
    renderer = _renderer_for(cfg.format)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*shared_processors, _safe_filter_by_level],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # stderr keeps stdout free for command output.
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    logging.basicConfig(handlers=[handler], level=_coerce_log_level(cfg.level), force=True)

    structlog.configure(
        processors=[
            *shared_processors,
            _safe_filter_by_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def bind_global_context(**kwargs: Any) -> None:
    """Bind context that should appear on every log line going forward."""

    bind_contextvars(**kwargs)


def reset_global_context() -> None:
    """Clear previously bound global context."""

    clear_contextvars()


def _configure_library_defaults() -> None:
    """Route structlog through stdlib logging without touching its handlers.

    Used until ``configure_logging`` runs: events obey the host application's
    stdlib levels and handlers (stderr via ``logging.lastResort`` when none are
    installed) instead of structlog's stdout printer.
    """

    structlog.configure(
        processors=[
            *_shared_processors(LogConfig()),
            _safe_filter_by_level,
            _renderer_for(LogFormat.JSON),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = _DEFAULT_LOGGER_NAME) -> BoundLogger:
    """Return a configured bound logger."""

    if not structlog.is_configured():
        _configure_library_defaults()
    logger = structlog.get_logger(name)
    if hasattr(logger, "bind") and callable(getattr(logger, "bind", None)):
        return cast(BoundLogger, logger)
    raise TypeError("structlog.get_logger returned unexpected logger type")


class UnifiedLogger:
    """Facade that exposes a minimal, documented logging API."""

    _default_logger_name = _DEFAULT_LOGGER_NAME

    @staticmethod
    def configure(
        config: LogConfig | None = None,
        *,
        additional_processors: Sequence[Any] | None = None,
    ) -> None:
        """Configure the underlying structured logger."""

        configure_logging(config, additional_processors=additional_processors)

    @staticmethod
    def get(name: str | None = None) -> BoundLogger:
        """Return a configured bound logger."""

        return get_logger(name or UnifiedLogger._default_logger_name)

    @staticmethod
    def bind(**context: Any) -> None:
        """Bind context that should be included with all subsequent log events."""

        bind_global_context(**context)

    @staticmethod
    def reset() -> None:
        """Reset all bound context variables."""

        reset_global_context()

    @staticmethod
    def scoped(**context: Any) -> AbstractContextManager[None]:
        """Return a context manager that temporarily overrides bound context."""

        @contextmanager
        def _scope() -> Iterator[None]:
            existing = get_contextvars()
            previous = {key: existing[key] for key in context if key in existing}
            bind_contextvars(**context)
            try:
                yield None
            finally:
                unbind_contextvars(*context.keys())
                if previous:
                    bind_contextvars(**previous)

        return _scope()
