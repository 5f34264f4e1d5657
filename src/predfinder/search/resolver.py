"""Tiered market resolver: slug lookup -> full-text search -> tag -> paginated scan.

Tiers run in priority order and the first non-empty result wins. A tier whose
upstream call fails yields no candidates and the next tier is tried.
"""

from __future__ import annotations

from contextlib import aclosing
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable, Iterable

import structlog

from predfinder.catalog.base import CatalogSource, FetchError
from predfinder.models import Market, ScoredCandidate
from predfinder.search.scoring import score_market
from predfinder.search.tags import TagCache, TagResolver
from predfinder.search.text import DEFAULT_PUBLIC_DOMAIN, extract_slug, sanitize, tokens

log = structlog.get_logger(__name__)

Tier = Callable[[str, int], Awaitable[list[Market]]]

SCAN_PAGE_SIZE = 100
SCAN_MAX_PAGES = 20
SCAN_EARLY_STOP_FACTOR = 3
LOOSE_MATCH_FACTOR = 0.7
SEARCH_LIMIT_PER_TYPE = 50
TAG_EVENT_LIMIT = 100


def dedupe(markets: Iterable[Market]) -> list[Market]:
    """Drop repeated ids; the first occurrence wins."""
    seen: set[str] = set()
    out = []
    for m in markets:
        if m.id in seen:
            continue
        seen.add(m.id)
        out.append(m)
    return out


def rank(markets: Iterable[Market], keyword: str) -> list[Market]:
    """Sort by score, highest first. Ties keep catalog order."""
    scored = [ScoredCandidate(m, score_market(m, keyword)) for m in markets]
    scored.sort(key=lambda c: c.score, reverse=True)
    return [c.market for c in scored]


class MarketResolver:
    """Find the best-matching markets for a free-text, slug or URL query."""

    def __init__(
        self,
        catalog: CatalogSource,
        tag_resolver: TagResolver | None = None,
        *,
        public_domain: str = DEFAULT_PUBLIC_DOMAIN,
        search_limit_per_type: int = SEARCH_LIMIT_PER_TYPE,
        tag_event_limit: int = TAG_EVENT_LIMIT,
        scan_page_size: int = SCAN_PAGE_SIZE,
        scan_max_pages: int = SCAN_MAX_PAGES,
        scan_early_stop_factor: int = SCAN_EARLY_STOP_FACTOR,
        loose_match_factor: float = LOOSE_MATCH_FACTOR,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.catalog = catalog
        self.tag_resolver = tag_resolver or TagResolver(TagCache(catalog.list_tags))
        self.public_domain = public_domain
        self.search_limit_per_type = search_limit_per_type
        self.tag_event_limit = tag_event_limit
        self.scan_page_size = scan_page_size
        self.scan_max_pages = scan_max_pages
        self.scan_early_stop_factor = scan_early_stop_factor
        self.loose_match_factor = loose_match_factor
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.tiers: list[tuple[str, Tier]] = [
            ("slug", self.slug_tier),
            ("search", self.search_tier),
            ("tag", self.tag_tier),
            ("scan", self.scan_tier),
        ]

    async def resolve(self, query: str, limit: int = 10) -> list[Market]:
        """Ranked, de-duplicated markets for query. Empty list when nothing matches."""
        text = (query or "").strip()
        if not text or limit <= 0:
            return []
        for name, tier in self.tiers:
            markets = dedupe(await tier(text, limit))[:limit]
            log.debug("resolver_tier", tier=name, query=text, count=len(markets))
            if markets:
                log.info("resolved", tier=name, query=text, count=len(markets))
                return markets
        log.info("resolve_no_match", query=text)
        return []

    async def resolve_one(self, query: str) -> Market | None:
        markets = await self.resolve(query, limit=1)
        return markets[0] if markets else None

    async def _fetch(self, tier: str, call: Awaitable[list]) -> list:
        try:
            return await call
        except FetchError as e:
            log.warning("tier_fetch_failed", tier=tier, path=e.path, error=e.message)
            return []

    def _live(self, markets: Iterable[Market], now: datetime) -> list[Market]:
        return [m for m in markets if m.is_live(now)]

    async def slug_tier(self, query: str, limit: int) -> list[Market]:
        slug = extract_slug(sanitize(query), self.public_domain) or extract_slug(
            query, self.public_domain
        )
        if not slug:
            return []
        candidates = await self._fetch("slug", self.catalog.market_by_slug(slug))
        if not candidates:
            events = await self._fetch("slug", self.catalog.event_by_slug(slug))
            candidates = [m for e in events for m in e.markets]
        candidates = dedupe(m for m in candidates if m.question)
        if len(candidates) <= 1:
            return candidates
        return rank(candidates, slug.replace("-", " "))[:limit]

    async def search_tier(self, query: str, limit: int) -> list[Market]:
        keyword = sanitize(query)
        events = await self._fetch(
            "search",
            self.catalog.public_search(keyword, limit_per_type=self.search_limit_per_type),
        )
        markets = dedupe(m for e in events for m in e.markets if m.question)
        pool = self._live(markets, self._clock()) or markets
        return rank(pool, keyword)[:limit]

    async def tag_tier(self, query: str, limit: int) -> list[Market]:
        tag = await self.tag_resolver.resolve(sanitize(query))
        if tag is None:
            return []
        events = await self._fetch(
            "tag",
            self.catalog.list_events(
                active=True,
                closed=False,
                order="volume24hr",
                ascending=False,
                limit=self.tag_event_limit,
                tag_id=tag.id,
                related_tags=True,
            ),
        )
        now = self._clock()
        markets = dedupe(m for e in events for m in e.markets if m.question and m.is_live(now))
        log.debug("tag_matched", tag=tag.label, tag_id=tag.id, count=len(markets))
        return markets[:limit]

    async def _scan_markets(self) -> AsyncIterator[Market]:
        for page in range(self.scan_max_pages):
            events = await self._fetch(
                "scan",
                self.catalog.list_events(
                    active=True,
                    closed=False,
                    order="volume24hr",
                    ascending=False,
                    limit=self.scan_page_size,
                    offset=page * self.scan_page_size,
                ),
            )
            for event in events:
                for market in event.markets:
                    yield market
            if len(events) < self.scan_page_size:
                return

    async def scan_tier(self, query: str, limit: int) -> list[Market]:
        keyword = sanitize(query)
        key_tokens = tokens(keyword)
        if not key_tokens:
            return []
        stop_at = self.scan_early_stop_factor * limit
        now = self._clock()
        seen: set[str] = set()
        full: list[ScoredCandidate] = []
        loose: list[ScoredCandidate] = []
        async with aclosing(self._scan_markets()) as stream:
            async for market in stream:
                if not market.question or market.id in seen or not market.is_live(now):
                    continue
                haystack = set(tokens(f"{market.question} {market.context}"))
                matched = sum(1 for t in key_tokens if t in haystack)
                if not matched:
                    continue
                seen.add(market.id)
                s = score_market(market, keyword)
                if matched == len(key_tokens):
                    full.append(ScoredCandidate(market, s))
                    if len(full) >= stop_at:
                        break
                else:
                    loose.append(ScoredCandidate(market, s * self.loose_match_factor))
        pool = full or loose
        log.debug("scan_done", query=keyword, full=len(full), loose=len(loose))
        pool.sort(key=lambda c: c.score, reverse=True)
        return [c.market for c in pool[:limit]]
