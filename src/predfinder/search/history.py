"""Price history for charts: fixed-stride sampling of YES-side trades."""

from __future__ import annotations

import structlog

from predfinder.catalog.base import FetchError, TradeSource
from predfinder.models import PricePoint, Trade

log = structlog.get_logger(__name__)

YES_OUTCOME_INDEX = 0
TRADE_FETCH_LIMIT = 200
TRADE_SAMPLE_STRIDE = 4
MAX_POINTS = 50


def sample_trades(
    trades: list[Trade], stride: int = TRADE_SAMPLE_STRIDE, max_points: int = MAX_POINTS
) -> list[PricePoint]:
    """Every stride-th YES trade, oldest first, keeping the newest max_points."""
    yes = [t for t in trades if t.outcome_index == YES_OUTCOME_INDEX]
    points = [PricePoint(timestamp=t.timestamp, price=t.price) for t in yes[:: max(1, stride)]]
    points.sort(key=lambda p: p.timestamp)
    return points[-max_points:] if max_points > 0 else []


class PriceHistorySampler:
    def __init__(
        self,
        trades: TradeSource,
        *,
        fetch_limit: int = TRADE_FETCH_LIMIT,
        stride: int = TRADE_SAMPLE_STRIDE,
        max_points: int = MAX_POINTS,
    ) -> None:
        self.trades = trades
        self.fetch_limit = fetch_limit
        self.stride = stride
        self.max_points = max_points

    async def history(self, condition_id: str | None) -> list[PricePoint]:
        """Chart series for a condition; [] when there is no usable trade data."""
        if not condition_id:
            return []
        try:
            trades = await self.trades.trades(condition_id, limit=self.fetch_limit)
        except FetchError as e:
            log.warning("trades_fetch_failed", condition_id=condition_id, error=e.message)
            return []
        points = sample_trades(trades, self.stride, self.max_points)
        log.debug("history_sampled", condition_id=condition_id, trades=len(trades), points=len(points))
        return points
