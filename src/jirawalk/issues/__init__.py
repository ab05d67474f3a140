"""Issue-level helpers built on top of the search executor."""

from __future__ import annotations

from .walker import DEFAULT_PER_PAGE, SearchQuery, Walker, WalkerState

__all__ = ["DEFAULT_PER_PAGE", "SearchQuery", "Walker", "WalkerState"]
