"""Lazy, restartable iteration over every issue matching a JQL query."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from structlog.stdlib import BoundLogger

from jirawalk.clients.client_exceptions import UnauthorizedError
from jirawalk.clients.jira import SearchExecutor
from jirawalk.core.errors import InvalidArgumentError, NotConfiguredError
from jirawalk.core.logger import UnifiedLogger
from jirawalk.core.logging.diagnostics import DiagnosticSink, StructlogDiagnosticSink
from jirawalk.core.logging.log_events import LogEvents
from jirawalk.core.pagination.cursor import FirstPageCursor, PaginationCursor

__all__ = ["SearchQuery", "Walker", "WalkerState", "DEFAULT_PER_PAGE"]

DEFAULT_PER_PAGE = 50

Delegate = Callable[[Any], Any]


class WalkerState(str, Enum):
    """Lifecycle of a walker; ``EXHAUSTED``/``FAILED_AUTH`` end one pass only."""

    UNCONFIGURED = "unconfigured"
    READY = "ready"
    FETCHING = "fetching"
    EMITTING = "emitting"
    EXHAUSTED = "exhausted"
    FAILED_AUTH = "failed_auth"


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """JQL text plus an optional field selector (``None`` = all navigable fields)."""

    jql: str
    fields: str | tuple[str, ...] | None = None

    @classmethod
    def create(cls, jql: object, fields: str | Sequence[str] | None = None) -> SearchQuery:
        if not isinstance(jql, str) or not jql.strip():
            msg = f"jql must be a non-empty string, got {jql!r}"
            raise InvalidArgumentError(msg)
        if fields is None or isinstance(fields, str):
            return cls(jql=jql, fields=fields)
        return cls(jql=jql, fields=tuple(fields))


class Walker:
    """Walk all pages of a Jira search as one lazy sequence of issues.

    Each iteration pass starts from the first page; pages are fetched one at a
    time, only after the consumer has pulled every issue of the previous page.

    Failure policy: :class:`UnauthorizedError` from the executor propagates and
    ends the pass. Any other executor error is written to the diagnostic sink
    and ends the pass as if the results were exhausted, so a consumer cannot
    tell a truncated walk from a complete one by looking at the items alone;
    compare against :meth:`count` or inspect the sink. Errors raised by the
    delegate are not caught.

    ``state`` settles on ``EXHAUSTED`` or ``FAILED_AUTH`` once a pass ends,
    including when the consumer closes the iterator early or the delegate
    raises. An abandoned iterator that is never closed stays ``EMITTING``.

    Parameters
    ----------
    api:
        Search executor, usually a :class:`jirawalk.clients.jira.JiraApi`.
    per_page:
        Issues requested per page; defaults to 50.
    diagnostics:
        Receives the message of every swallowed fetch error. Defaults to a
        sink writing structured warnings.
    """

    def __init__(
        self,
        api: SearchExecutor,
        per_page: int | None = None,
        *,
        diagnostics: DiagnosticSink | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        if per_page is None:
            per_page = DEFAULT_PER_PAGE
        elif isinstance(per_page, bool) or not isinstance(per_page, int) or per_page <= 0:
            msg = f"per_page must be a positive integer, got {per_page!r}"
            raise InvalidArgumentError(msg)

        self._api = api
        self._per_page = per_page
        self._query: SearchQuery | None = None
        self._delegate: Delegate | None = None
        self._diagnostics: DiagnosticSink = (
            diagnostics if diagnostics is not None else StructlogDiagnosticSink()
        )
        self._log = logger or UnifiedLogger.get(__name__).bind(component="issues.walker")
        self.state = WalkerState.UNCONFIGURED

    @property
    def per_page(self) -> int:
        return self._per_page

    @property
    def query(self) -> SearchQuery | None:
        return self._query

    @property
    def delegate(self) -> Delegate | None:
        return self._delegate

    def push(self, jql: str, fields: str | Sequence[str] | None = None) -> None:
        """Set the query walked by subsequent iterations."""

        self._query = SearchQuery.create(jql, fields)
        self.state = WalkerState.READY
        self._log.debug(LogEvents.WALKER_QUERY_PUSHED, jql=jql, fields=self._query.fields)

    def set_delegate(self, delegate: Delegate) -> None:
        """Register a transform applied to every issue before it is yielded."""

        if not callable(delegate):
            raise InvalidArgumentError("passed argument is not callable")
        self._delegate = delegate

    def __iter__(self) -> Iterator[Any]:
        return self.iterate()

    def iterate(self) -> Iterator[Any]:
        """Return a fresh pass over all matching issues.

        Raises
        ------
        NotConfiguredError
            When :meth:`push` was never called; raised here, before any fetch.
        """

        query = self._require_query()
        return self._walk(query)

    def count(self) -> int:
        """Return the number of issues matching the query.

        Uses the ``total`` reported with the first page when the server sends
        one; otherwise counts that page and walks the remaining ones. Errors of
        the first fetch propagate; later fetch errors go to the diagnostic sink
        and the partial count is returned.
        """

        query = self._require_query()
        first = FirstPageCursor()
        page = self._api.search(query.jql, first.value, self._per_page, query.fields)
        if page.total is not None:
            return page.total
        counted = page.issues_count
        if counted == 0:
            return 0
        cursor = first.advance(page, page_size=self._per_page)
        if cursor is None:
            return counted
        return counted + sum(1 for _ in self._walk(query, transform=False, start=cursor))

    def _require_query(self) -> SearchQuery:
        if self._query is None:
            raise NotConfiguredError(
                "you have to call Walker.push(jql, fields) at first"
            )
        return self._query

    def _walk(
        self,
        query: SearchQuery,
        *,
        transform: bool = True,
        start: PaginationCursor | None = None,
    ) -> Iterator[Any]:
        cursor: PaginationCursor | None = start if start is not None else FirstPageCursor()
        page_index = 0 if start is None else 1
        emitted = 0
        self._log.debug(LogEvents.WALKER_PASS_STARTED, jql=query.jql, per_page=self._per_page)

        while cursor is not None:
            self.state = WalkerState.FETCHING
            try:
                page = self._api.search(query.jql, cursor.value, self._per_page, query.fields)
            except UnauthorizedError:
                self.state = WalkerState.FAILED_AUTH
                self._log.error(
                    LogEvents.WALKER_FETCH_UNAUTHORIZED,
                    jql=query.jql,
                    page_index=page_index,
                )
                raise
            except Exception as exc:
                self.state = WalkerState.EXHAUSTED
                self._diagnostics.write(str(exc))
                return

            issues = page.issues
            self._log.debug(
                LogEvents.WALKER_PAGE_FETCHED,
                page_index=page_index,
                cursor=cursor.value,
                issues_count=len(issues),
                protocol=page.protocol.value,
            )
            if not issues:
                break

            self.state = WalkerState.EMITTING
            try:
                for issue in issues:
                    delegate = self._delegate if transform else None
                    yield delegate(issue) if delegate is not None else issue
                    emitted += 1
            except BaseException:
                # Consumer closed the pass early or the delegate raised.
                self.state = WalkerState.EXHAUSTED
                raise

            cursor = cursor.advance(page, page_size=self._per_page)
            page_index += 1

        self.state = WalkerState.EXHAUSTED
        self._log.debug(LogEvents.WALKER_PASS_EXHAUSTED, pages=page_index, emitted=emitted)
