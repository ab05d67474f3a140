"""Jira REST client exposing the search contract consumed by the walker."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from structlog.stdlib import BoundLogger

from jirawalk.clients.client_exceptions import JiraApiError
from jirawalk.clients.result import Result
from jirawalk.config.models.jira import JiraConfig
from jirawalk.core.api_client import UnifiedAPIClient
from jirawalk.core.logger import UnifiedLogger
from jirawalk.core.logging.log_events import LogEvents
from jirawalk.core.pagination.cursor import PaginationProtocol

__all__ = ["JiraApi", "SearchExecutor", "Fields", "normalize_fields"]

Fields = str | Sequence[str] | None

OFFSET_SEARCH_PATH = "/rest/api/2/search"
TOKEN_SEARCH_PATH = "/rest/api/3/search/jql"
ALL_NAVIGABLE_FIELDS = "*navigable"


@runtime_checkable
class SearchExecutor(Protocol):
    """Anything able to fetch one page of search results."""

    def search(
        self,
        jql: str,
        cursor: int | str | None,
        page_size: int,
        fields: Fields,
    ) -> Result: ...


def normalize_fields(fields: Fields) -> str:
    """Render a field selector as the comma separated ``fields`` parameter."""

    if fields is None:
        return ALL_NAVIGABLE_FIELDS
    if isinstance(fields, str):
        return fields.strip() or ALL_NAVIGABLE_FIELDS
    names = [str(name).strip() for name in fields if name is not None and str(name).strip()]
    return ",".join(dict.fromkeys(names)) or ALL_NAVIGABLE_FIELDS


class JiraApi:
    """Thin Jira REST wrapper around :class:`UnifiedAPIClient`.

    Parameters
    ----------
    client:
        Configured HTTP client whose ``base_url`` is the Jira endpoint.
    protocol:
        Search endpoint used for first pages (``cursor=None``). Later pages
        follow the cursor type: an ``int`` offset always targets the legacy
        ``/rest/api/2/search`` endpoint, a ``str`` token the enhanced
        ``/rest/api/3/search/jql`` endpoint.
    """

    def __init__(
        self,
        client: UnifiedAPIClient,
        *,
        protocol: PaginationProtocol = PaginationProtocol.TOKEN,
        logger: BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._protocol = PaginationProtocol(protocol)
        self._log = logger or UnifiedLogger.get(__name__).bind(component="clients.jira")

    @classmethod
    def from_config(cls, config: JiraConfig) -> JiraApi:
        client = UnifiedAPIClient(
            config.http,
            base_url=config.endpoint,
            auth=config.credentials,
        )
        return cls(client, protocol=config.search_protocol)

    @property
    def client(self) -> UnifiedAPIClient:
        return self._client

    @property
    def protocol(self) -> PaginationProtocol:
        return self._protocol

    @property
    def endpoint(self) -> str:
        return self._client.base_url

    def close(self) -> None:
        self._client.close()

    def search(
        self,
        jql: str,
        cursor: int | str | None = None,
        page_size: int = 20,
        fields: Fields = None,
    ) -> Result:
        """Fetch one page of issues matching ``jql``."""

        if isinstance(cursor, bool):
            msg = f"cursor must be an int offset, a str token or None, got {cursor!r}"
            raise TypeError(msg)

        protocol = self._protocol_for(cursor)
        params: dict[str, Any] = {
            "jql": jql,
            "maxResults": page_size,
            "fields": normalize_fields(fields),
        }
        if protocol is PaginationProtocol.OFFSET:
            path = OFFSET_SEARCH_PATH
            params["startAt"] = cursor if isinstance(cursor, int) else 0
        else:
            path = TOKEN_SEARCH_PATH
            if isinstance(cursor, str) and cursor:
                params["nextPageToken"] = cursor

        self._log.debug(
            LogEvents.JIRA_SEARCH_REQUESTED,
            path=path,
            protocol=protocol.value,
            cursor=cursor,
            page_size=page_size,
        )
        result = self.api("GET", path, params=params)
        if result is None:
            raise JiraApiError("JIRA Rest server returns unexpected result.")
        return result

    def get_issue(self, issue_key: str, expand: str = "") -> Result:
        """Fetch a single issue by key."""

        params = {"expand": expand} if expand else None
        result = self.api("GET", f"/rest/api/2/issue/{issue_key}", params=params)
        if result is None:
            raise JiraApiError("JIRA Rest server returns unexpected result.")
        return result

    def api(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
    ) -> Result | None:
        """Send one request and wrap the decoded body; ``None`` for no content."""

        payload = self._client.request_json(method, path, params=params, json=json)
        if payload is None:
            return None
        if not isinstance(payload, Mapping):
            msg = f"Expected mapping payload from {path}, received {type(payload).__name__}"
            raise JiraApiError(msg)
        return Result(payload)

    def _protocol_for(self, cursor: int | str | None) -> PaginationProtocol:
        if isinstance(cursor, int):
            return PaginationProtocol.OFFSET
        if isinstance(cursor, str):
            return PaginationProtocol.TOKEN
        return self._protocol
