"""Pagination cursors for the two Jira search protocols.

A cursor is a small immutable value whose ``value`` is handed to the search
executor and whose ``advance`` computes the cursor for the following page (or
``None`` when the page was the last one). The walker loop only ever calls
``advance``; it never branches on the protocol itself.

``FirstPageCursor`` is protocol-neutral: its ``value`` is ``None`` and its
``advance`` commits to the protocol signalled by the first response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:
    from jirawalk.clients.result import Result

__all__ = [
    "PaginationProtocol",
    "PaginationCursor",
    "FirstPageCursor",
    "OffsetCursor",
    "TokenCursor",
    "cursor_for",
]


class PaginationProtocol(str, Enum):
    """Pagination protocols spoken by Jira search endpoints."""

    OFFSET = "offset"
    TOKEN = "token"


class PaginationCursor(Protocol):
    """Position marker understood by the walker."""

    @property
    def value(self) -> int | str | None: ...

    def advance(self, page: Result, *, page_size: int) -> PaginationCursor | None: ...


@dataclass(frozen=True, slots=True)
class OffsetCursor:
    """Absolute ``startAt`` offset of the legacy search endpoint."""

    offset: int = 0

    protocol: ClassVar[PaginationProtocol] = PaginationProtocol.OFFSET

    def __post_init__(self) -> None:
        if self.offset < 0:
            msg = f"offset must be non-negative, got {self.offset}"
            raise ValueError(msg)

    @property
    def value(self) -> int:
        return self.offset

    def advance(self, page: Result, *, page_size: int) -> OffsetCursor | None:
        received = page.issues_count
        if received == 0:
            return None
        next_offset = self.offset + received
        total = page.total
        if total is not None:
            return OffsetCursor(next_offset) if next_offset < total else None
        # Without a total a short page is the last one.
        return OffsetCursor(next_offset) if received >= page_size else None


@dataclass(frozen=True, slots=True)
class TokenCursor:
    """Opaque ``nextPageToken`` of the enhanced search endpoint."""

    token: str | None = None

    protocol: ClassVar[PaginationProtocol] = PaginationProtocol.TOKEN

    @property
    def value(self) -> str | None:
        return self.token

    def advance(self, page: Result, *, page_size: int) -> TokenCursor | None:
        if page.is_last:
            return None
        token = page.next_page_token
        if not token:
            return None
        return TokenCursor(token)


@dataclass(frozen=True, slots=True)
class FirstPageCursor:
    """Cursor of a walk that has not seen any response yet."""

    @property
    def value(self) -> None:
        return None

    def advance(self, page: Result, *, page_size: int) -> OffsetCursor | TokenCursor | None:
        return cursor_for(page.protocol).advance(page, page_size=page_size)


def cursor_for(protocol: PaginationProtocol) -> OffsetCursor | TokenCursor:
    """Return the first-page cursor of ``protocol``."""

    if protocol is PaginationProtocol.TOKEN:
        return TokenCursor()
    return OffsetCursor()
