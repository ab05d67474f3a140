"""Pagination cursors shared by the search executor and the issue walker."""

from __future__ import annotations

from .cursor import (
    FirstPageCursor,
    OffsetCursor,
    PaginationCursor,
    PaginationProtocol,
    TokenCursor,
    cursor_for,
)

__all__ = [
    "FirstPageCursor",
    "OffsetCursor",
    "PaginationCursor",
    "PaginationProtocol",
    "TokenCursor",
    "cursor_for",
]
