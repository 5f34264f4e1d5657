"""Gamma / data API JSON -> canonical Market, Event, Tag, Trade."""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any

import structlog

from predfinder.models import Event, Market, Tag, Trade

log = structlog.get_logger(__name__)

DEFAULT_PRICE = 0.5


def _float(s: str | float | None) -> float:
    if s is None:
        return 0.0
    try:
        value = float(s)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _json_list(value: str | list[Any] | None) -> list[Any] | None:
    """Gamma encodes some list fields as JSON strings. None when unparseable."""
    if isinstance(value, list):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, list) else None


def _price(value: Any) -> float:
    try:
        p = float(value)
    except (TypeError, ValueError):
        return DEFAULT_PRICE
    if not math.isfinite(p) or not 0 <= p <= 1:
        return DEFAULT_PRICE
    return p


def _parse_prices(prices_str: str | list[str] | None) -> tuple[float, float]:
    """Two probabilities in [0, 1]; 0.5 for each missing or malformed entry."""
    prices = _json_list(prices_str) or []
    yes = _price(prices[0]) if len(prices) > 0 else DEFAULT_PRICE
    no = _price(prices[1]) if len(prices) > 1 else DEFAULT_PRICE
    return (yes, no)


def _parse_token_ids(clob_token_ids_str: str | list[str] | None) -> tuple[str, str]:
    token_ids = [str(t) for t in (_json_list(clob_token_ids_str) or []) if t is not None]
    # Align length
    while len(token_ids) < 2:
        token_ids.append("")
    return (token_ids[0], token_ids[1])


def parse_datetime(value: Any) -> datetime | None:
    """ISO string or unix seconds -> aware UTC datetime. None when absent or invalid."""
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if isinstance(value, str):
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt
    except (ValueError, OverflowError, OSError):
        return None
    return None


def parse_market(raw: dict[str, Any], event: dict[str, Any] | None = None) -> Market:
    """Convert Gamma API market object to canonical Market. Event fields are denormalized onto it."""
    question = str(raw.get("question") or "").strip()
    condition_id = str(raw.get("conditionId") or raw.get("condition_id") or "") or None
    market_id = str(raw.get("id") or "") or condition_id or question
    liquidity_raw = raw.get("liquidityNum")
    if liquidity_raw is None:
        liquidity_raw = raw.get("liquidity")
    if event is None:
        # /markets rows embed their parent events
        parents = raw.get("events")
        if isinstance(parents, list) and parents and isinstance(parents[0], dict):
            event = parents[0]
    event_title = (event or {}).get("title") or None
    event_slug = (event or {}).get("slug") or None
    active = raw.get("active")
    return Market(
        id=market_id,
        question=question,
        slug=str(raw.get("slug") or ""),
        condition_id=condition_id,
        token_ids=_parse_token_ids(raw.get("clobTokenIds")),
        outcome_prices=_parse_prices(raw.get("outcomePrices")),
        volume=_float(raw.get("volume")),
        volume_24h=_float(raw.get("volume24hr")),
        volume_num=_float(raw.get("volumeNum")),
        liquidity=_float(liquidity_raw),
        has_liquidity=liquidity_raw is not None,
        active=True if active is None else bool(active),
        closed=bool(raw.get("closed", False)),
        accepting_orders=bool(raw.get("acceptingOrders", True)),
        end_date=parse_datetime(raw.get("endDate") or raw.get("endDateIso")),
        event_title=event_title,
        event_slug=event_slug,
        category=raw.get("category") or event_title,
        image=raw.get("image") or raw.get("icon") or None,
        description=raw.get("description") or None,
    )


def parse_markets(rows: Any, event: dict[str, Any] | None = None) -> list[Market]:
    """Parse a list of raw markets, skipping rows that fail validation."""
    if not isinstance(rows, list):
        return []
    markets = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            markets.append(parse_market(row, event))
        except Exception as e:
            log.warning("skip_market", market_id=row.get("id"), error=str(e))
    return markets


def parse_event(raw: dict[str, Any]) -> Event:
    """Convert Gamma API event object (with embedded markets[]) to canonical Event."""
    return Event(
        id=str(raw.get("id") or raw.get("slug") or ""),
        title=str(raw.get("title") or ""),
        slug=raw.get("slug") or None,
        markets=parse_markets(raw.get("markets"), raw),
    )


def parse_events(rows: Any) -> list[Event]:
    if not isinstance(rows, list):
        return []
    events = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            events.append(parse_event(row))
        except Exception as e:
            log.warning("skip_event", event_id=row.get("id"), error=str(e))
    return events


def parse_tag(raw: dict[str, Any]) -> Tag:
    slug = raw.get("slug")
    return Tag(
        id=str(raw.get("id") or ""),
        label=str(raw.get("label") or raw.get("name") or ""),
        slug=str(slug) if slug else None,
    )


def parse_tags(rows: Any) -> list[Tag]:
    """Parse a list of raw tags, skipping rows that fail validation."""
    if not isinstance(rows, list):
        return []
    tags = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            tags.append(parse_tag(row))
        except Exception as e:
            log.warning("skip_tag", tag_id=row.get("id"), error=str(e))
    return tags


def parse_trade(raw: dict[str, Any]) -> Trade | None:
    """Convert data API trade row to Trade. None if price/timestamp/outcome are unusable."""
    try:
        outcome_index = int(raw.get("outcomeIndex"))
        timestamp = int(float(raw.get("timestamp")))
        price = float(raw.get("price"))
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(price) or not 0 <= price <= 1:
        return None
    return Trade(
        condition_id=str(raw.get("conditionId") or ""),
        outcome_index=outcome_index,
        timestamp=timestamp,
        price=price,
        size=max(_float(raw.get("size")), 0.0),
        side=raw.get("side"),
    )
