"""Plain props for the market explorer / market view widgets and text summaries."""

from __future__ import annotations

from typing import Any

from predfinder.models import Market, PricePoint


def format_volume(volume: float) -> str:
    """$1.2M / $350.0K / $87."""
    if volume > 1_000_000:
        return f"${volume / 1_000_000:.1f}M"
    if volume > 1_000:
        return f"${volume / 1_000:.1f}K"
    return f"${volume:.0f}"


def cents(price: float) -> str:
    return f"{round(price * 100)}¢"


def display_volume(market: Market) -> float:
    return market.volume_num or market.volume


def summary_line(market: Market, index: int | None = None) -> str:
    """Two-line text entry used in search/trending listings."""
    head = f"{index}. {market.question}" if index is not None else market.question
    return f"{head}\n   YES: {cents(market.yes_price)} | Volume: {format_volume(display_volume(market))}"


def market_card(market: Market) -> dict[str, Any]:
    """Explorer widget entry."""
    return {
        "id": market.id,
        "question": market.question,
        "slug": market.slug or None,
        "conditionId": market.condition_id,
        "yesPrice": market.yes_price,
        "noPrice": market.no_price,
        "volume": format_volume(display_volume(market)),
        "category": market.category,
        "image": market.image,
        "description": market.description,
    }


def market_view(market: Market, history: list[PricePoint] | None = None) -> dict[str, Any]:
    """Market view widget props, including the chart series."""
    return {
        "title": market.question,
        "yesPrice": market.yes_price,
        "noPrice": market.no_price,
        "volume": format_volume(display_volume(market)),
        "conditionId": market.condition_id,
        "priceHistory": [p.model_dump() for p in history or []],
    }
