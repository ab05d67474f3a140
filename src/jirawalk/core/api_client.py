"""Unified HTTP client with retries, timeouts, and rate limiting."""

from __future__ import annotations

import random
import threading
import time
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any
from urllib.parse import urljoin
from uuid import uuid4

import requests
from requests import Response

from jirawalk.clients.client_exceptions import (
    HTTPError,
    JiraApiError,
    RequestException,
    UnauthorizedError,
)
from jirawalk.config.models.http import HTTPClientConfig
from jirawalk.core.logger import UnifiedLogger
from jirawalk.core.logging.log_events import LogEvents

__all__ = [
    "TokenBucketLimiter",
    "UnifiedAPIClient",
]

_NO_CONTENT = 204
_UNAUTHORIZED = 401


@dataclass(slots=True, frozen=True)
class _RetryState:
    attempt: int
    response: Response | None = None
    error: RequestException | None = None
    retry_after: float | None = None


class TokenBucketLimiter:
    """Simple token bucket limiter enforcing max calls per period."""

    def __init__(self, max_calls: int, period: float, *, jitter: bool = True) -> None:
        if max_calls <= 0:
            msg = "max_calls must be > 0"
            raise ValueError(msg)
        if period <= 0:
            msg = "period must be > 0"
            raise ValueError(msg)
        self.max_calls = max_calls
        self.period = period
        self.jitter = jitter
        self._timestamps: deque[float] = deque()
        self._lock = threading.Lock()
        self._jitter_max = period / max_calls

    def acquire(self) -> float:
        """Block until a token is available and return wait seconds."""

        waited = 0.0
        while True:
            with self._lock:
                now = time.monotonic()
                while self._timestamps and now - self._timestamps[0] >= self.period:
                    self._timestamps.popleft()
                if len(self._timestamps) < self.max_calls:
                    self._timestamps.append(now)
                    return waited
                sleep_for = self.period - (now - self._timestamps[0])
            if self.jitter:
                sleep_for += random.uniform(0.0, self._jitter_max)
            if sleep_for > 0:
                time.sleep(sleep_for)
                waited += sleep_for


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isdigit():
        return float(value)
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    delta = (parsed - datetime.now(timezone.utc)).total_seconds()
    return max(delta, 0.0)


class UnifiedAPIClient:
    """HTTP client providing retries, timeouts, and rate limiting.

    HTTP 401 is never retried and surfaces as :class:`UnauthorizedError`;
    every other failure surfaces as a ``requests`` exception.
    """

    def __init__(
        self,
        config: HTTPClientConfig,
        *,
        base_url: str | None = None,
        auth: tuple[str, str] | None = None,
        name: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.base_url = base_url.rstrip("/") if base_url else ""
        self.name = name or "jira"
        self._session = session or requests.Session()
        self._session.headers.update(dict(config.headers))
        if auth is not None:
            self._session.auth = auth
        self._timeout = (config.connect_timeout_sec, config.read_timeout_sec)
        self._retry_total = int(config.retries.total)
        self._retry_statuses = set(config.retries.statuses)
        self._backoff_multiplier = float(config.retries.backoff_multiplier)
        self._backoff_max = float(config.retries.backoff_max)
        self._jitter = config.rate_limit.jitter
        self._rate_limiter = TokenBucketLimiter(
            config.rate_limit.max_calls,
            config.rate_limit.period,
            jitter=config.rate_limit.jitter,
        )
        self._logger = UnifiedLogger.get(__name__).bind(
            component="http_client",
            http_client=self.name,
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> UnifiedAPIClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Request execution
    # ------------------------------------------------------------------

    def get(
        self,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return self.request("GET", endpoint, params=params, headers=headers)

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        url = self._resolve_url(endpoint)
        request_id = str(uuid4())
        max_attempts = self._retry_total + 1
        attempt = 0

        while True:
            attempt += 1
            wait_seconds = self._rate_limiter.acquire()
            if wait_seconds:
                self._logger.debug(
                    LogEvents.HTTP_RATE_LIMITER_WAIT,
                    wait_seconds=wait_seconds,
                    endpoint=url,
                    attempt=attempt,
                    request_id=request_id,
                )
            start = time.perf_counter()
            try:
                response = self._session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=dict(headers) if headers else None,
                    timeout=self._timeout,
                    verify=self.config.verify_tls,
                )
            except RequestException as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                self._logger.warning(
                    LogEvents.HTTP_REQUEST_EXCEPTION,
                    endpoint=url,
                    attempt=attempt,
                    duration_ms=duration_ms,
                    request_id=request_id,
                    error=str(exc),
                )
                if attempt >= max_attempts:
                    raise
                self._sleep(self._compute_backoff(_RetryState(attempt=attempt, error=exc)))
                continue

            duration_ms = (time.perf_counter() - start) * 1000
            status_code = response.status_code

            if status_code == _UNAUTHORIZED:
                self._logger.error(
                    LogEvents.HTTP_REQUEST_UNAUTHORIZED,
                    endpoint=url,
                    attempt=attempt,
                    request_id=request_id,
                )
                raise UnauthorizedError("Unauthorized", response=response)

            if status_code in self._retry_statuses and attempt < max_attempts:
                retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                self._logger.warning(
                    LogEvents.HTTP_REQUEST_RETRY,
                    endpoint=url,
                    attempt=attempt,
                    duration_ms=duration_ms,
                    status_code=status_code,
                    retry_after=retry_after,
                    request_id=request_id,
                )
                self._sleep(
                    self._compute_backoff(
                        _RetryState(attempt=attempt, response=response, retry_after=retry_after)
                    )
                )
                continue

            if status_code >= 400:
                self._logger.error(
                    LogEvents.HTTP_REQUEST_FAILED,
                    endpoint=url,
                    attempt=attempt,
                    duration_ms=duration_ms,
                    status_code=status_code,
                    request_id=request_id,
                )
                response.raise_for_status()
                # raise_for_status may be a no-op for unusual status codes.
                raise HTTPError(f"{status_code} error for url: {url}", response=response)

            self._logger.info(
                LogEvents.HTTP_REQUEST_COMPLETED,
                endpoint=url,
                attempt=attempt,
                duration_ms=duration_ms,
                status_code=status_code,
                request_id=request_id,
            )
            return response

    def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Execute a request and decode its JSON body.

        Returns ``None`` for an empty body answered with ``204 No Content``.
        """

        response = self.request(method, endpoint, params=params, json=json, headers=headers)
        if not response.content:
            if response.status_code == _NO_CONTENT:
                return None
            raise JiraApiError("JIRA Rest server returns unexpected result.", response=response)
        try:
            return response.json()
        except ValueError as exc:
            msg = f"Unable to decode JSON response from {response.url!s}"
            raise JiraApiError(msg, response=response) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _resolve_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        if not self.base_url:
            return endpoint
        resolved = urljoin(self.base_url + "/", endpoint.lstrip("/"))
        self._logger.debug(
            LogEvents.HTTP_RESOLVE_URL,
            endpoint=endpoint,
            base_url=self.base_url,
            resolved=resolved,
        )
        return resolved

    def _compute_backoff(self, state: _RetryState) -> float:
        if state.retry_after is not None:
            return min(state.retry_after, self._backoff_max)
        attempt_index = max(state.attempt - 1, 0)
        delay = min(self._backoff_multiplier**attempt_index, self._backoff_max)
        if self._jitter and delay > 0:
            delay += random.uniform(0.0, min(delay, 1.0))
        return delay

    @staticmethod
    def _sleep(duration: float) -> None:
        if duration <= 0:
            return
        time.sleep(duration)
