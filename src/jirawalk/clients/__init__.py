"""HTTP clients for the Jira REST API.

Submodules are resolved lazily so that ``jirawalk.core.api_client`` can import
``jirawalk.clients.client_exceptions`` without pulling in the clients that
depend on it.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from jirawalk.clients.client_exceptions import JiraApiError, UnauthorizedError
    from jirawalk.clients.jira import JiraApi, SearchExecutor
    from jirawalk.clients.result import Result

__all__ = [
    "JiraApi",
    "JiraApiError",
    "Result",
    "SearchExecutor",
    "UnauthorizedError",
]

_ATTR_MAP: Final[dict[str, tuple[str, str]]] = {
    "JiraApi": ("jirawalk.clients.jira", "JiraApi"),
    "SearchExecutor": ("jirawalk.clients.jira", "SearchExecutor"),
    "Result": ("jirawalk.clients.result", "Result"),
    "JiraApiError": ("jirawalk.clients.client_exceptions", "JiraApiError"),
    "UnauthorizedError": ("jirawalk.clients.client_exceptions", "UnauthorizedError"),
}


def __getattr__(name: str) -> Any:
    """Lazily resolve client symbols to avoid import-time cycles."""
    try:
        module_path, attr_name = _ATTR_MAP[name]
    except KeyError as exc:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from exc

    module = import_module(module_path)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
