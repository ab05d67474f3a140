"""Public HTTP client exceptions exposed by jirawalk.

Upper layers (the walker, the CLI) import network exceptions only from here,
never from ``requests`` directly.
"""

from __future__ import annotations

from requests.exceptions import ConnectionError as _RequestsConnectionError
from requests.exceptions import HTTPError as _RequestsHTTPError
from requests.exceptions import RequestException as _RequestsRequestException
from requests.exceptions import Timeout as _RequestsTimeout

__all__ = [
    "RequestException",
    "HTTPError",
    "Timeout",
    "ConnectionError",
    "JiraApiError",
    "UnauthorizedError",
]

RequestException = _RequestsRequestException
HTTPError = _RequestsHTTPError
Timeout = _RequestsTimeout
ConnectionError = _RequestsConnectionError


class JiraApiError(_RequestsRequestException):
    """Raised when the Jira REST server returns an unexpected result."""


class UnauthorizedError(JiraApiError):
    """Raised when the Jira REST server answers with HTTP 401."""
