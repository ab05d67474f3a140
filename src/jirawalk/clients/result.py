"""Read-only view over one decoded Jira REST response."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from jirawalk.core.pagination.cursor import PaginationProtocol

__all__ = ["Result"]

_TOKEN_PROTOCOL_KEYS: tuple[str, ...] = ("isLast", "nextPageToken")


class Result:
    """Decoded response of a Jira REST call.

    For search responses the result exposes the issue list and the
    continuation data of whichever pagination protocol the endpoint speaks:
    ``startAt``/``total`` for the offset protocol, ``isLast``/``nextPageToken``
    for the token protocol.
    """

    __slots__ = ("_payload",)

    def __init__(self, payload: Mapping[str, Any] | None) -> None:
        self._payload: Mapping[str, Any] = payload if payload is not None else {}

    def __repr__(self) -> str:
        return (
            f"Result(protocol={self.protocol.value!r}, issues={self.issues_count}, "
            f"total={self.total!r}, is_last={self.is_last!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return dict(self._payload) == dict(other._payload)

    __hash__ = None  # type: ignore[assignment]

    @property
    def raw(self) -> Mapping[str, Any]:
        """Return the decoded payload as received."""

        return self._payload

    @property
    def issues(self) -> list[Any]:
        """Return issues in server order (empty list when absent)."""

        issues = self._payload.get("issues")
        if isinstance(issues, Sequence) and not isinstance(issues, (str, bytes, bytearray)):
            return list(issues)
        return []

    @property
    def issues_count(self) -> int:
        return len(self.issues)

    @property
    def total(self) -> int | None:
        """Total number of matching issues, when the server reports it."""

        total = self._payload.get("total")
        if isinstance(total, bool) or not isinstance(total, int):
            return None
        return total

    @property
    def start_at(self) -> int | None:
        start_at = self._payload.get("startAt")
        if isinstance(start_at, bool) or not isinstance(start_at, int):
            return None
        return start_at

    @property
    def is_last(self) -> bool | None:
        """``isLast`` flag of the token protocol, ``None`` when absent."""

        is_last = self._payload.get("isLast")
        if isinstance(is_last, bool):
            return is_last
        return None

    @property
    def next_page_token(self) -> str | None:
        token = self._payload.get("nextPageToken")
        if isinstance(token, str) and token:
            return token
        return None

    @property
    def protocol(self) -> PaginationProtocol:
        """Pagination protocol the response signals."""

        if any(key in self._payload for key in _TOKEN_PROTOCOL_KEYS):
            return PaginationProtocol.TOKEN
        return PaginationProtocol.OFFSET

    def get(self, key: str, default: Any = None) -> Any:
        return self._payload.get(key, default)
