"""Trending and recent market selection with at most one market per event."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import structlog

from predfinder.catalog.base import CatalogSource, FetchError
from predfinder.models import Event, Market

log = structlog.get_logger(__name__)

MIN_EVENT_FETCH = 20
MIN_LIQUIDITY = 5000.0
PRICE_BAND = (0.05, 0.95)


class TrendingSelector:
    """Picks high-activity and newly listed markets from the live event listing."""

    def __init__(
        self,
        catalog: CatalogSource,
        *,
        min_event_fetch: int = MIN_EVENT_FETCH,
        min_liquidity: float = MIN_LIQUIDITY,
        price_band: tuple[float, float] = PRICE_BAND,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.catalog = catalog
        self.min_event_fetch = min_event_fetch
        self.min_liquidity = min_liquidity
        self.price_band = price_band
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def _events(self, order: str, limit: int) -> list[Event]:
        try:
            return await self.catalog.list_events(
                active=True,
                closed=False,
                order=order,
                ascending=False,
                limit=max(self.min_event_fetch, 2 * limit),
            )
        except FetchError as e:
            log.warning("events_fetch_failed", order=order, path=e.path, error=e.message)
            return []

    def is_tradeable(self, market: Market) -> bool:
        """Question-bearing, accepting orders, liquid enough, and not priced as already decided."""
        if not market.question or not market.accepting_orders:
            return False
        if market.has_liquidity and market.liquidity < self.min_liquidity:
            return False
        low, high = self.price_band
        return any(low <= p <= high for p in market.outcome_prices)

    async def trending(self, limit: int = 10) -> list[Market]:
        """Highest-volume tradeable market of each of the busiest events."""
        if limit <= 0:
            return []
        selected: list[Market] = []
        seen: set[str] = set()
        for event in await self._events("volume24hr", limit):
            candidates = [m for m in event.markets if m.id not in seen and self.is_tradeable(m)]
            if not candidates:
                continue
            best = max(candidates, key=lambda m: m.popularity_volume)
            selected.append(best)
            seen.add(best.id)
            if len(selected) >= limit:
                break
        log.debug("trending_selected", count=len(selected), limit=limit)
        return selected[:limit]

    async def recent(self, limit: int = 10) -> list[Market]:
        """First live market of each newest event."""
        if limit <= 0:
            return []
        now = self._clock()
        selected: list[Market] = []
        seen: set[str] = set()
        for event in await self._events("startDate", limit):
            for market in event.markets:
                if market.question and market.id not in seen and market.is_live(now):
                    selected.append(market)
                    seen.add(market.id)
                    break
            if len(selected) >= limit:
                break
        return selected[:limit]
