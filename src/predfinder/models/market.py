"""Market, Event, Tag, PricePoint - canonical entities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class Tag(BaseModel):
    """Catalog topic tag (e.g. Crypto, Elections)."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    slug: str | None = None


class Market(BaseModel):
    """Single binary market snapshot from one catalog fetch."""

    model_config = ConfigDict(frozen=True)

    id: str
    question: str = ""
    slug: str = ""
    condition_id: str | None = None
    token_ids: tuple[str, str] = ("", "")
    outcome_prices: tuple[float, float] = (0.5, 0.5)
    volume: float = 0.0
    volume_24h: float = 0.0
    volume_num: float = 0.0
    liquidity: float = 0.0
    has_liquidity: bool = False
    active: bool = True
    closed: bool = False
    accepting_orders: bool = True
    end_date: datetime | None = None
    event_title: str | None = None
    event_slug: str | None = None
    category: str | None = None
    image: str | None = None
    description: str | None = None

    @property
    def yes_price(self) -> float:
        return self.outcome_prices[0]

    @property
    def no_price(self) -> float:
        return self.outcome_prices[1]

    @property
    def popularity_volume(self) -> float:
        """First non-empty of 24h, numeric and raw volume."""
        return self.volume_24h or self.volume_num or self.volume

    @property
    def context(self) -> str:
        """Parent event title and slug, used as scoring context."""
        return " ".join(p for p in (self.event_title, self.event_slug) if p)

    def is_live(self, now: datetime | None = None) -> bool:
        """Not closed, not inactive, and end date (if any) not yet passed."""
        if self.closed or not self.active:
            return False
        if self.end_date is not None:
            now = now or datetime.now(timezone.utc)
            if self.end_date <= now:
                return False
        return True


class Event(BaseModel):
    """Event grouping one or more markets (Polymarket event)."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    slug: str | None = None
    markets: list[Market] = Field(default_factory=list)


class PricePoint(BaseModel):
    """One chart point: unix seconds and YES price."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    price: float = Field(..., ge=0, le=1, description="Probability/price in [0, 1]")


class ScoredCandidate(NamedTuple):
    market: Market
    score: float
