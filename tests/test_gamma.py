"""Gamma and data API clients against a mocked transport."""

import httpx
import pytest

from predfinder.catalog.base import FetchError
from predfinder.catalog.data_api import DataApiClient
from predfinder.catalog.gamma import GammaClient
from predfinder.catalog.normalize import parse_tags
from predfinder.search.resolver import MarketResolver

from factories import raw_event, raw_market


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_events_sends_filters_and_parses():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[raw_event("e1", "Fed Decision", [raw_market("1", "Cut?")])])

    async with GammaClient("https://gamma.test", client=_client(handler)) as gamma:
        events = await gamma.list_events(order="volume24hr", limit=100, offset=200, tag_id="21", related_tags=True)
    assert seen["path"] == "/events"
    assert seen["params"] == {
        "limit": "100",
        "ascending": "false",
        "active": "true",
        "closed": "false",
        "order": "volume24hr",
        "offset": "200",
        "tag_id": "21",
        "related_tags": "true",
    }
    assert events[0].markets[0].event_title == "Fed Decision"


@pytest.mark.asyncio
async def test_slug_endpoints_accept_object_or_array():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/markets/slug/one":
            return httpx.Response(200, json=raw_market("1", "One?"))
        return httpx.Response(200, json=[raw_event("e1", "Two", [raw_market("2", "Two?")])])

    gamma = GammaClient("https://gamma.test", client=_client(handler))
    markets = await gamma.market_by_slug("one")
    events = await gamma.event_by_slug("two")
    assert [m.id for m in markets] == ["1"]
    assert [m.id for m in events[0].markets] == ["2"]


@pytest.mark.asyncio
async def test_public_search_reads_events_key():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "bitcoin"
        assert request.url.params["events_status"] == "active"
        return httpx.Response(200, json={"events": [raw_event("e1", "BTC", [raw_market("1", "BTC 100k?")])]})

    gamma = GammaClient("https://gamma.test", client=_client(handler))
    events = await gamma.public_search("bitcoin")
    assert events[0].markets[0].question == "BTC 100k?"


@pytest.mark.asyncio
async def test_tags_and_markets():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/tags":
            return httpx.Response(200, json=[{"id": 2, "label": "Crypto", "slug": "crypto"}])
        assert request.url.params["closed"] == "false"
        return httpx.Response(200, json=[raw_market("1", "A?"), raw_market("2", "B?")])

    gamma = GammaClient("https://gamma.test", client=_client(handler))
    tags = await gamma.list_tags()
    assert tags[0].id == "2" and tags[0].label == "Crypto"
    assert len(await gamma.list_markets(limit=2)) == 2


@pytest.mark.asyncio
async def test_http_error_and_bad_json_raise_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/tags":
            return httpx.Response(200, content=b"<html>")
        return httpx.Response(404, json={"error": "not found"})

    gamma = GammaClient("https://gamma.test", client=_client(handler))
    with pytest.raises(FetchError) as exc:
        await gamma.market_by_slug("missing")
    assert exc.value.status_code == 404
    with pytest.raises(FetchError):
        await gamma.list_tags()


@pytest.mark.asyncio
async def test_transport_error_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    gamma = GammaClient("https://gamma.test", client=_client(handler))
    with pytest.raises(FetchError):
        await gamma.list_events()


@pytest.mark.asyncio
async def test_trades_parses_and_tolerates_non_list():
    rows = [
        {"outcomeIndex": 0, "timestamp": 100, "price": "0.4"},
        {"outcomeIndex": 1, "timestamp": 101, "price": "0.6"},
        {"outcomeIndex": 0, "timestamp": 102, "price": "bad"},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["condition_id"] in ("0xabc", "0xdef")
        assert request.url.params["limit"] == "200"
        if request.url.params["condition_id"] == "0xdef":
            return httpx.Response(200, json={"error": "nope"})
        return httpx.Response(200, json=rows)

    data = DataApiClient("https://data.test", client=_client(handler))
    trades = await data.trades("0xabc")
    assert [(t.outcome_index, t.timestamp) for t in trades] == [(0, 100), (1, 101)]
    assert await data.trades("0xdef") == []


@pytest.mark.asyncio
async def test_malformed_tag_rows_do_not_break_resolution():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/tags":
            return httpx.Response(200, json=[{"id": 1, "label": "Sports", "slug": 7}, "junk", {"id": 2, "label": "NBA"}])
        if request.url.path == "/public-search":
            return httpx.Response(200, json={"events": []})
        return httpx.Response(200, json=[])

    gamma = GammaClient("https://gamma.test", client=_client(handler))
    tags = await gamma.list_tags()
    assert [(t.id, t.slug) for t in tags] == [("1", "7"), ("2", None)]
    assert await MarketResolver(gamma).resolve("nba playoffs", 5) == []
    assert await MarketResolver(gamma).resolve("nba playoffs", 5) == []


def test_parse_tags_skips_non_dict_rows():
    assert [t.label for t in parse_tags([{"id": 3, "name": "Crypto"}, None, 5])] == ["Crypto"]
    assert parse_tags({"id": 3}) == []
