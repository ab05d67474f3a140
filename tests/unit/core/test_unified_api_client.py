"""Retry, authentication and decoding behaviour of :class:`UnifiedAPIClient`."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from jirawalk.clients.client_exceptions import HTTPError, JiraApiError, UnauthorizedError
from jirawalk.config.models.http import HTTPClientConfig
from jirawalk.core.api_client import TokenBucketLimiter, UnifiedAPIClient, _parse_retry_after


def _response(status_code: int, content: bytes = b"", headers: dict[str, str] | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.url = "https://jira.example.com/rest/api/2/search"
    response.headers = CaseInsensitiveDict(headers or {})
    return response


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []
    monkeypatch.setattr(UnifiedAPIClient, "_sleep", staticmethod(recorded.append))
    return recorded


@pytest.fixture
def session() -> MagicMock:
    mock = MagicMock(spec=requests.Session)
    mock.headers = {}
    return mock


def _client(session: MagicMock, **config: Any) -> UnifiedAPIClient:
    http_config = HTTPClientConfig.model_validate(
        {
            "rate_limit": {"max_calls": 1000, "period": 1.0, "jitter": False},
            "retries": {"total": 2, "backoff_multiplier": 2.0, "backoff_max": 5.0},
            **config,
        }
    )
    return UnifiedAPIClient(
        http_config,
        base_url="https://jira.example.com/",
        auth=("bot", "token"),
        session=session,
    )


def test_request_resolves_url_and_passes_transport_options(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(200, b'{"issues": []}')
    client = _client(session, verify_tls=False, connect_timeout_sec=3.0, read_timeout_sec=7.0)

    payload = client.request_json("GET", "/rest/api/2/search", params={"jql": "x"})

    assert payload == {"issues": []}
    session.request.assert_called_once_with(
        "GET",
        "https://jira.example.com/rest/api/2/search",
        params={"jql": "x"},
        json=None,
        headers=None,
        timeout=(3.0, 7.0),
        verify=False,
    )
    assert session.auth == ("bot", "token")
    assert session.headers["Accept"] == "application/json"
    assert sleeps == []


def test_unauthorized_is_never_retried(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(401)
    client = _client(session)

    with pytest.raises(UnauthorizedError) as excinfo:
        client.get("/rest/api/2/search")

    assert str(excinfo.value) == "Unauthorized"
    assert excinfo.value.response.status_code == 401
    assert session.request.call_count == 1
    assert sleeps == []


def test_retryable_status_is_retried(session: MagicMock, sleeps: list[float]) -> None:
    session.request.side_effect = [_response(503), _response(200, b'{"ok": true}')]
    client = _client(session)

    assert client.request_json("GET", "/rest/api/2/search") == {"ok": True}
    assert session.request.call_count == 2
    assert sleeps == [1.0]


def test_retry_after_header_caps_backoff(session: MagicMock, sleeps: list[float]) -> None:
    session.request.side_effect = [
        _response(429, headers={"Retry-After": "120"}),
        _response(200, b"{}"),
    ]
    client = _client(session)

    client.get("/rest/api/2/search")

    assert sleeps == [5.0]


def test_retryable_status_exhausts_attempts(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(502)
    client = _client(session)

    with pytest.raises(HTTPError):
        client.get("/rest/api/2/search")

    assert session.request.call_count == 3
    assert sleeps == [1.0, 2.0]


def test_client_error_is_not_retried(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(400, b'{"errorMessages": ["bad jql"]}')
    client = _client(session)

    with pytest.raises(HTTPError):
        client.get("/rest/api/2/search")

    assert session.request.call_count == 1


def test_transport_errors_are_retried_then_raised(session: MagicMock, sleeps: list[float]) -> None:
    session.request.side_effect = requests.ConnectionError("connection refused")
    client = _client(session)

    with pytest.raises(requests.ConnectionError, match="connection refused"):
        client.get("/rest/api/2/search")

    assert session.request.call_count == 3


def test_no_content_decodes_to_none(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(204)
    client = _client(session)

    assert client.request_json("DELETE", "/rest/api/2/issue/PRJ-1") is None


def test_empty_body_is_unexpected(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(200)
    client = _client(session)

    with pytest.raises(JiraApiError, match="JIRA Rest server returns unexpected result."):
        client.request_json("GET", "/rest/api/2/search")


def test_invalid_json_is_reported(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(200, b"<html>maintenance</html>")
    client = _client(session)

    with pytest.raises(JiraApiError, match="Unable to decode JSON"):
        client.request_json("GET", "/rest/api/2/search")


def test_absolute_urls_bypass_base_url(session: MagicMock, sleeps: list[float]) -> None:
    session.request.return_value = _response(200, b"{}")
    client = _client(session)

    client.get("https://other.example.com/rest/api/2/myself")

    assert session.request.call_args.args[1] == "https://other.example.com/rest/api/2/myself"


def test_context_manager_closes_session(session: MagicMock) -> None:
    with _client(session):
        pass

    session.close.assert_called_once_with()


@pytest.mark.parametrize(
    ("header", "expected"),
    [(None, None), ("", None), ("  ", None), ("15", 15.0), ("soon", None)],
)
def test_parse_retry_after(header: str | None, expected: float | None) -> None:
    assert _parse_retry_after(header) == expected


def test_parse_retry_after_http_date_in_the_past() -> None:
    assert _parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0


def test_token_bucket_limiter_validates_arguments() -> None:
    with pytest.raises(ValueError):
        TokenBucketLimiter(0, 1.0)
    with pytest.raises(ValueError):
        TokenBucketLimiter(1, 0)


def test_token_bucket_limiter_does_not_wait_under_limit() -> None:
    limiter = TokenBucketLimiter(3, 60.0, jitter=False)

    assert [limiter.acquire() for _ in range(3)] == [0.0, 0.0, 0.0]
