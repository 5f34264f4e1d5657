"""Polymarket Gamma API client - markets, events, tags and full-text search."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from predfinder.catalog.base import FetchError
from predfinder.catalog.normalize import parse_events, parse_markets, parse_tags
from predfinder.models import Event, Market, Tag

log = structlog.get_logger(__name__)

GAMMA_API_BASE = "https://gamma-api.polymarket.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; predfinder/0.1)"


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _as_list(data: Any) -> list[Any]:
    """Slug endpoints return either one object or an array; listings may wrap in {data: [...]}."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        inner = data.get("data")
        if isinstance(inner, list):
            return inner
        return [data]
    return []


async def get_json(
    client: httpx.AsyncClient, base_url: str, path: str, params: dict[str, Any] | None = None
) -> Any:
    """GET base_url + path and decode JSON. Any failure is raised as FetchError."""
    url = base_url.rstrip("/") + path
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPStatusError as e:
        raise FetchError(path, f"HTTP {e.response.status_code}", e.response.status_code) from e
    except httpx.HTTPError as e:
        raise FetchError(path, f"{type(e).__name__}: {e}") from e
    except ValueError as e:
        raise FetchError(path, "invalid JSON") from e


class GammaClient:
    """Async client for the Gamma catalog. Methods return canonical models or raise FetchError."""

    def __init__(
        self,
        base_url: str = GAMMA_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": user_agent}
        )

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        data = await get_json(self._client, self.base_url, path, params)
        log.debug("gamma_get", path=path, params=params)
        return data

    async def list_markets(self, limit: int = 20, closed: bool = False) -> list[Market]:
        data = await self._get("/markets", {"limit": limit, "closed": _bool_param(closed)})
        return parse_markets(_as_list(data))

    async def market_by_slug(self, slug: str) -> list[Market]:
        data = await self._get(f"/markets/slug/{slug}")
        return parse_markets(_as_list(data))

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
    ) -> list[Event]:
        params: dict[str, Any] = {"limit": limit, "ascending": _bool_param(ascending)}
        if active is not None:
            params["active"] = _bool_param(active)
        if closed is not None:
            params["closed"] = _bool_param(closed)
        if order:
            params["order"] = order
        if offset is not None:
            params["offset"] = offset
        if tag_id is not None:
            params["tag_id"] = tag_id
        if related_tags is not None:
            params["related_tags"] = _bool_param(related_tags)
        data = await self._get("/events", params)
        return parse_events(_as_list(data))

    async def event_by_slug(self, slug: str) -> list[Event]:
        data = await self._get(f"/events/slug/{slug}")
        return parse_events(_as_list(data))

    async def public_search(self, q: str, limit_per_type: int = 50) -> list[Event]:
        params = {
            "q": q,
            "events_status": "active",
            "limit_per_type": limit_per_type,
            "search_tags": "false",
            "page": 1,
            "sort": "volume",
            "ascending": "false",
        }
        data = await self._get("/public-search", params)
        events = data.get("events") if isinstance(data, dict) else None
        return parse_events(events or [])

    async def list_tags(self) -> list[Tag]:
        return parse_tags(_as_list(await self._get("/tags")))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GammaClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
