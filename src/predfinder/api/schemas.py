"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. no_match")


# --- Markets ---
class MarketCard(BaseModel):
    id: str
    question: str
    slug: str | None = None
    conditionId: str | None = None
    yesPrice: float
    noPrice: float
    volume: str = Field(..., description="Formatted trading volume")
    category: str | None = None
    image: str | None = None
    description: str | None = None


class MarketsResponse(BaseModel):
    markets: list[MarketCard]
    totalMarkets: int
    query: str | None = None


# --- Price history ---
class PricePointOut(BaseModel):
    timestamp: int = Field(..., description="Unix timestamp (seconds)")
    price: float = Field(..., description="YES price at this time (0-1)")


class HistoryResponse(BaseModel):
    conditionId: str
    priceHistory: list[PricePointOut]


class MarketViewResponse(BaseModel):
    title: str = Field(..., description="The market question")
    yesPrice: float
    noPrice: float
    volume: str
    conditionId: str | None = None
    priceHistory: list[PricePointOut] = Field(default_factory=list)
