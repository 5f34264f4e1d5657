"""Gamma / data API payload parsing."""

from datetime import datetime, timezone

from predfinder.catalog.normalize import parse_event, parse_market, parse_markets, parse_trade

from factories import NOW, raw_market


def test_parse_market_fields():
    raw = raw_market(
        "7",
        "Will BTC hit 100k?",
        volume24hr=1234.5,
        volumeNum="2000",
        liquidityNum="8000.5",
        endDate="2026-12-31T00:00:00Z",
        acceptingOrders=False,
    )
    m = parse_market(raw)
    assert m.id == "7"
    assert m.condition_id == "0xcond7"
    assert m.outcome_prices == (0.6, 0.4)
    assert m.token_ids == ("71", "72")
    assert m.volume == 1000.0
    assert m.volume_24h == 1234.5
    assert m.volume_num == 2000.0
    assert m.popularity_volume == 1234.5
    assert m.liquidity == 8000.5 and m.has_liquidity
    assert m.accepting_orders is False
    assert m.end_date == datetime(2026, 12, 31, tzinfo=timezone.utc)
    assert m.is_live(NOW)


def test_malformed_fields_fall_back_to_defaults():
    m = parse_market(
        {
            "question": "Q?",
            "outcomePrices": "not json",
            "clobTokenIds": "[oops",
            "volume": "abc",
            "endDate": "someday",
        }
    )
    assert m.id == "Q?"
    assert m.outcome_prices == (0.5, 0.5)
    assert m.token_ids == ("", "")
    assert m.volume == 0.0
    assert m.liquidity == 0.0 and not m.has_liquidity
    assert m.end_date is None


def test_out_of_range_prices_default_per_entry():
    m = parse_market(raw_market("1", "Q?", outcomePrices=["0.3", "7"]))
    assert m.outcome_prices == (0.3, 0.5)
    m = parse_market(raw_market("1", "Q?", outcomePrices='["NaN"]'))
    assert m.outcome_prices == (0.5, 0.5)


def test_id_falls_back_to_condition_id():
    raw = raw_market("", "Q?")
    assert parse_market(raw).id == "0xcond"


def test_liveness():
    assert not parse_market(raw_market("1", "Q?", closed=True)).is_live(NOW)
    assert not parse_market(raw_market("1", "Q?", active=False)).is_live(NOW)
    assert not parse_market(raw_market("1", "Q?", endDate="2026-01-01T00:00:00Z")).is_live(NOW)
    assert parse_market(raw_market("1", "Q?", endDate="2026-01-01")).end_date.tzinfo is not None


def test_event_denormalizes_onto_markets():
    event = parse_event(
        {"id": "e1", "title": "Fed Decision", "slug": "fed-decision", "markets": [raw_market("1", "Cut 25bps?"), "junk"]}
    )
    assert event.title == "Fed Decision"
    assert len(event.markets) == 1
    m = event.markets[0]
    assert m.event_title == "Fed Decision"
    assert m.event_slug == "fed-decision"
    assert m.category == "Fed Decision"
    assert m.context == "Fed Decision fed-decision"


def test_market_row_uses_embedded_event():
    raw = raw_market("1", "Cut 25bps?", events=[{"id": "e1", "title": "Fed Decision", "slug": "fed"}])
    assert parse_market(raw).event_title == "Fed Decision"


def test_parse_markets_ignores_non_list():
    assert parse_markets({"error": "x"}) == []


def test_parse_trade():
    t = parse_trade({"outcomeIndex": 0, "timestamp": "1700000000", "price": "0.42", "size": 5, "side": "BUY"})
    assert t.outcome_index == 0 and t.timestamp == 1700000000 and t.price == 0.42
    assert parse_trade({"outcomeIndex": 0, "timestamp": 1, "price": 1.5}) is None
    assert parse_trade({"outcomeIndex": None, "timestamp": 1, "price": 0.5}) is None
