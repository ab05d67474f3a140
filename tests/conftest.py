"""Shared pytest fixtures for jirawalk tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog

from jirawalk.clients.jira import JiraApi
from jirawalk.clients.result import Result
from jirawalk.core.logging import CollectingDiagnosticSink

SearchKey = tuple[str, Any, int, Any]


def _issue(project_key: str, number: int) -> dict[str, Any]:
    issue_id = number + 1000
    return {
        "expand": "operations,versionedRepresentations,editmeta,changelog,transitions,renderedFields",
        "id": str(issue_id),
        "self": f"http://jira.company.com/rest/api/2/issue/{issue_id}",
        "key": f"{project_key}-{issue_id}",
        "fields": {"description": f"description {number}"},
    }


def build_offset_page(project_key: str, issue_count: int, total: int | None = None) -> Result:
    """Legacy ``/rest/api/2/search`` response; issues are numbered downwards."""

    issues = [_issue(project_key, number) for number in range(issue_count, 0, -1)]
    return Result(
        {
            "expand": "schema,names",
            "startAt": 0,
            "maxResults": len(issues),
            "total": issue_count if total is None else total,
            "issues": issues,
        }
    )


def build_token_page(
    project_key: str,
    issue_count: int,
    *,
    next_page_token: str | None = None,
    is_last: bool = True,
) -> Result:
    """Enhanced ``/rest/api/3/search/jql`` response."""

    payload: dict[str, Any] = {
        "issues": [_issue(project_key, number) for number in range(issue_count, 0, -1)],
        "isLast": is_last,
    }
    if next_page_token is not None:
        payload["nextPageToken"] = next_page_token
    return Result(payload)


@pytest.fixture
def offset_page() -> Callable[..., Result]:
    return build_offset_page


@pytest.fixture
def token_page() -> Callable[..., Result]:
    return build_token_page


@pytest.fixture
def search_api() -> Callable[[Mapping[SearchKey, Result | BaseException]], MagicMock]:
    """Return a factory for a ``JiraApi`` mock scripted per search arguments.

    Calls whose arguments are not scripted raise ``AssertionError`` so that a
    test never silently passes on an unexpected fetch.
    """

    def factory(script: Mapping[SearchKey, Result | BaseException]) -> MagicMock:
        api = MagicMock(spec=JiraApi)

        def search(jql: str, cursor: Any, page_size: int, fields: Any) -> Result:
            key = (jql, cursor, page_size, fields)
            if key not in script:
                raise AssertionError(f"unexpected search call {key!r}")
            outcome = script[key]
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome

        api.search.side_effect = search
        return api

    return factory


@pytest.fixture
def diagnostics() -> CollectingDiagnosticSink:
    return CollectingDiagnosticSink()


@pytest.fixture(autouse=True)
def reset_structlog() -> Any:
    """Keep structlog configuration from leaking between tests."""

    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
