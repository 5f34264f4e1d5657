"""Canonical schema (Pydantic) - Market, Event, Tag, PricePoint, Trade."""

from predfinder.models.market import Event, Market, PricePoint, ScoredCandidate, Tag
from predfinder.models.trade import Trade

__all__ = [
    "Market",
    "Event",
    "Tag",
    "PricePoint",
    "ScoredCandidate",
    "Trade",
]
