"""MarketService - the object consumers hold: resolve, trending, recent, history."""

from __future__ import annotations

from typing import Any

import structlog

from predfinder.catalog.base import CatalogSource, TradeSource
from predfinder.catalog.data_api import DataApiClient
from predfinder.catalog.gamma import GammaClient
from predfinder.config import Settings
from predfinder.models import Market, PricePoint
from predfinder.search.history import PriceHistorySampler
from predfinder.search.resolver import MarketResolver
from predfinder.search.tags import TagCache, TagResolver
from predfinder.search.trending import TrendingSelector

log = structlog.get_logger(__name__)


class MarketService:
    """Wires catalog clients to the resolver, selectors and sampler. Never raises for missing data."""

    def __init__(
        self,
        catalog: CatalogSource,
        trades: TradeSource,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self.settings = settings
        self.catalog = catalog
        self.trade_source = trades
        self.tag_cache = TagCache(catalog.list_tags)
        self.resolver = MarketResolver(
            catalog,
            TagResolver(self.tag_cache),
            public_domain=settings.public_domain,
            search_limit_per_type=settings.search_limit_per_type,
            tag_event_limit=settings.tag_event_limit,
            scan_page_size=settings.scan_page_size,
            scan_max_pages=settings.scan_max_pages,
            scan_early_stop_factor=settings.scan_early_stop_factor,
            loose_match_factor=settings.loose_match_factor,
        )
        self.selector = TrendingSelector(
            catalog,
            min_event_fetch=settings.trending_min_event_fetch,
            min_liquidity=settings.trending_min_liquidity,
            price_band=settings.trending_price_band,
        )
        self.sampler = PriceHistorySampler(
            trades,
            fetch_limit=settings.trade_fetch_limit,
            stride=settings.trade_sample_stride,
            max_points=settings.history_max_points,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> MarketService:
        """Service backed by the live Gamma and data APIs."""
        gamma = GammaClient(
            settings.gamma_api_base,
            timeout=settings.http_timeout_sec,
            user_agent=settings.user_agent,
        )
        data = DataApiClient(
            settings.data_api_base,
            timeout=settings.http_timeout_sec,
            user_agent=settings.user_agent,
        )
        return cls(gamma, data, settings)

    def _limit(self, limit: int | None) -> int:
        return self.settings.default_limit if limit is None else limit

    async def resolve(self, query: str, limit: int | None = None) -> list[Market]:
        return await self.resolver.resolve(query, self._limit(limit))

    async def resolve_one(self, query: str) -> Market | None:
        return await self.resolver.resolve_one(query)

    async def trending(self, limit: int | None = None) -> list[Market]:
        return await self.selector.trending(self._limit(limit))

    async def recent(self, limit: int | None = None) -> list[Market]:
        return await self.selector.recent(self._limit(limit))

    async def history(self, condition_id: str | None) -> list[PricePoint]:
        return await self.sampler.history(condition_id)

    async def view(self, query: str) -> tuple[Market, list[PricePoint]] | None:
        """Best match for query plus its chart series, or None."""
        market = await self.resolve_one(query)
        if market is None:
            return None
        return market, await self.history(market.condition_id)

    async def aclose(self) -> None:
        for client in (self.catalog, self.trade_source):
            close = getattr(client, "aclose", None)
            if close is not None:
                await close()

    async def __aenter__(self) -> MarketService:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
