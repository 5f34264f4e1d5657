"""Catalog source protocols and the fetch error shared by all upstream clients."""

from __future__ import annotations

from typing import Protocol

from predfinder.models import Event, Market, Tag, Trade


class FetchError(Exception):
    """Transport, HTTP status or JSON decode failure for one upstream call."""

    def __init__(self, path: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message
        self.status_code = status_code


class CatalogSource(Protocol):
    """Read-only market catalog (Gamma API or a test double)."""

    async def list_markets(self, limit: int = 20, closed: bool = False) -> list[Market]: ...

    async def market_by_slug(self, slug: str) -> list[Market]: ...

    async def list_events(
        self,
        *,
        active: bool | None = True,
        closed: bool | None = False,
        order: str | None = None,
        ascending: bool = False,
        limit: int = 100,
        offset: int | None = None,
        tag_id: str | None = None,
        related_tags: bool | None = None,
    ) -> list[Event]: ...

    async def event_by_slug(self, slug: str) -> list[Event]: ...

    async def public_search(self, q: str, limit_per_type: int = 50) -> list[Event]: ...

    async def list_tags(self) -> list[Tag]: ...


class TradeSource(Protocol):
    """Trade history for a condition."""

    async def trades(self, condition_id: str, limit: int = 200) -> list[Trade]: ...
