"""Polymarket data API client - trade history for a condition."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from predfinder.catalog.gamma import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, get_json
from predfinder.catalog.normalize import parse_trade
from predfinder.models import Trade

log = structlog.get_logger(__name__)

DATA_API_BASE = "https://data-api.polymarket.com"


class DataApiClient:
    """Async client for /trades. Non-array bodies yield no trades."""

    def __init__(
        self,
        base_url: str = DATA_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": user_agent}
        )

    async def trades(self, condition_id: str, limit: int = 200) -> list[Trade]:
        data = await get_json(
            self._client, self.base_url, "/trades", {"condition_id": condition_id, "limit": limit}
        )
        if not isinstance(data, list):
            log.debug("trades_not_a_list", condition_id=condition_id, kind=type(data).__name__)
            return []
        trades = []
        for row in data:
            if not isinstance(row, dict):
                continue
            trade = parse_trade(row)
            if trade is not None:
                trades.append(trade)
        return trades

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> DataApiClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
