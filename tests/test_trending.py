"""Trending and recent selection."""

import pytest

from predfinder.search.resolver import MarketResolver
from predfinder.search.trending import TrendingSelector

from factories import FakeCatalog, fixed_clock, raw_event, raw_market


def _events() -> list[dict]:
    return [
        raw_event("e1", "Fed", [
            raw_market("m1", "Fed cuts 25bps?", volume24hr=100, outcomePrices='["0.5", "0.5"]'),
            raw_market("m2", "Fed holds?", volume24hr=500),
        ]),
        raw_event("e2", "Decided", [raw_market("m3", "Already done?", outcomePrices='["0.99", "0.01"]')]),
        raw_event("e3", "Thin", [
            raw_market("m4", "Illiquid?", liquidityNum=1000),
            raw_market("m5", "Paused?", acceptingOrders=False),
            raw_market("m6", "Liquid?", liquidityNum="6000"),
        ]),
        raw_event("e4", "Misc", [raw_market("m7", ""), raw_market("m8", "Rain in London?")]),
    ]


@pytest.mark.asyncio
async def test_trending_one_market_per_event_with_filters():
    catalog = FakeCatalog(events=_events())
    selector = TrendingSelector(catalog)
    assert [m.id for m in await selector.trending(5)] == ["m2", "m6", "m8"]
    call = catalog.called("list_events")[0]
    assert call["order"] == "volume24hr" and call["ascending"] is False
    assert call["limit"] == 20


@pytest.mark.asyncio
async def test_trending_stops_at_limit_and_scales_fetch():
    catalog = FakeCatalog(events=_events())
    selector = TrendingSelector(catalog)
    assert [m.id for m in await selector.trending(2)] == ["m2", "m6"]
    await selector.trending(15)
    assert catalog.called("list_events")[-1]["limit"] == 30


@pytest.mark.asyncio
async def test_trending_never_repeats_an_event():
    events = [
        raw_event(f"e{i}", f"Election {i}", [raw_market(f"{i}-{j}", f"Candidate {j} wins {i}?", volume="0", volume24hr=j) for j in range(6)])
        for i in range(8)
    ]
    markets = await TrendingSelector(FakeCatalog(events=events)).trending(5)
    assert len(markets) == 5
    assert len({m.event_title for m in markets}) == 5
    assert all(m.id.endswith("-5") for m in markets)


@pytest.mark.asyncio
async def test_trending_and_recent_degrade_on_fetch_failure():
    selector = TrendingSelector(FakeCatalog(fail={"list_events"}))
    assert await selector.trending(5) == []
    assert await selector.recent(5) == []
    assert await selector.trending(0) == []


@pytest.mark.asyncio
async def test_recent_takes_first_live_market_per_event():
    events = [
        raw_event("e1", "New", [raw_market("a", "Closed one?", closed=True), raw_market("b", "Open one?")]),
        raw_event("e2", "Newer", [raw_market("c", "Decided?", outcomePrices='["1", "0"]')]),
        raw_event("e3", "Ended", [raw_market("d", "Past?", endDate="2025-01-01T00:00:00Z")]),
    ]
    catalog = FakeCatalog(events=events)
    selector = TrendingSelector(catalog, clock=fixed_clock)
    assert [m.id for m in await selector.recent(10)] == ["b", "c"]
    assert catalog.called("list_events")[0]["order"] == "startDate"


@pytest.mark.asyncio
async def test_trending_question_resolves_back_to_same_market():
    events = _events()
    catalog = FakeCatalog(events=events)
    trending = await TrendingSelector(catalog).trending(3)
    resolver = MarketResolver(catalog, clock=fixed_clock)
    for market in trending:
        catalog.search[market.question] = events
        assert (await resolver.resolve_one(market.question)).id == market.id
