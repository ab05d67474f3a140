"""Client-side walking of paginated Jira searches.

Typical use::

    from jirawalk import JiraApi, Walker, load_config

    api = JiraApi.from_config(load_config())
    walker = Walker(api, per_page=100)
    walker.push("project = PRJ ORDER BY created", ["summary", "status"])
    for issue in walker:
        ...
"""

from __future__ import annotations

from jirawalk.clients.client_exceptions import JiraApiError, UnauthorizedError
from jirawalk.clients.jira import JiraApi, SearchExecutor
from jirawalk.clients.result import Result
from jirawalk.config import JiraConfig, load_config
from jirawalk.core.errors import (
    ConfigError,
    InvalidArgumentError,
    JiraWalkError,
    NotConfiguredError,
)
from jirawalk.core.logging import CollectingDiagnosticSink, DiagnosticSink, UnifiedLogger
from jirawalk.core.pagination import PaginationProtocol
from jirawalk.issues import SearchQuery, Walker, WalkerState

__version__ = "0.1.0"

__all__ = [
    "CollectingDiagnosticSink",
    "ConfigError",
    "DiagnosticSink",
    "InvalidArgumentError",
    "JiraApi",
    "JiraApiError",
    "JiraConfig",
    "JiraWalkError",
    "NotConfiguredError",
    "PaginationProtocol",
    "Result",
    "SearchExecutor",
    "SearchQuery",
    "UnauthorizedError",
    "UnifiedLogger",
    "Walker",
    "WalkerState",
    "load_config",
]
