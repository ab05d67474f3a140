"""Registry of structured logging event identifiers."""

from __future__ import annotations

from enum import Enum, auto

__all__ = ["LogEvents"]


class LogEvents(str, Enum):
    """Strongly typed registry of UnifiedLogger events.

    Member names follow ``<NAMESPACE>_<ACTION...>_<SUFFIX>`` and are rendered
    as dotted identifiers, e.g. ``WALKER_PAGE_FETCHED`` -> ``walker.page.fetched``.
    """

    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, _last_values: list[str]) -> str:
        parts = name.lower().split("_")
        namespace = parts[0] if parts else "event"
        suffix = parts[-1] if len(parts) > 1 else "event"
        action_parts = parts[1:-1] if len(parts) > 2 else []
        if not action_parts:
            action_parts = ["event"]
        action = ".".join(action_parts)
        return ".".join((namespace, action, suffix))

    CLI_RUN_START = auto()
    CLI_RUN_FINISH = auto()
    CLI_RUN_ERROR = auto()
    CONFIG_FILE_LOADED = auto()
    CONFIG_ENV_APPLIED = auto()
    HTTP_RATE_LIMITER_WAIT = auto()
    HTTP_REQUEST_COMPLETED = auto()
    HTTP_REQUEST_EXCEPTION = auto()
    HTTP_REQUEST_FAILED = auto()
    HTTP_REQUEST_RETRY = auto()
    HTTP_REQUEST_UNAUTHORIZED = auto()
    HTTP_RESOLVE_URL = auto()
    JIRA_SEARCH_REQUESTED = auto()
    WALKER_QUERY_PUSHED = auto()
    WALKER_PASS_STARTED = auto()
    WALKER_PAGE_FETCHED = auto()
    WALKER_PASS_EXHAUSTED = auto()
    WALKER_FETCH_FAILED = auto()
    WALKER_FETCH_UNAUTHORIZED = auto()
