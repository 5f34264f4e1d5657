"""FastAPI backend exposing resolve / trending / recent / history as plain JSON."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from predfinder.api.schemas import (
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    MarketCard,
    MarketsResponse,
    MarketViewResponse,
)
from predfinder.config import get_settings
from predfinder.config.settings import configure_logging
from predfinder.service import MarketService
from predfinder.views import market_card, market_view

# Set by run_api() so lifespan loads the same config as the CLI.
_config_profile: str | None = None
_config_dir: Path | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings(_config_profile, _config_dir)
    configure_logging(settings)
    service = MarketService.from_settings(settings)
    app.state.service = service
    yield
    await service.aclose()


app = FastAPI(title="predfinder API", version="0.1.0", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


def get_service(request: Request) -> MarketService:
    return request.app.state.service


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def _markets_response(markets: list, query: str | None = None) -> MarketsResponse:
    return MarketsResponse(
        markets=[MarketCard(**market_card(m)) for m in markets],
        totalMarkets=len(markets),
        query=query,
    )


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/markets/search", response_model=MarketsResponse)
async def markets_search(
    q: str = Query(..., min_length=1, description="Keyword, question, slug or URL"),
    limit: int = Query(10, ge=1, le=100),
    service: MarketService = Depends(get_service),
) -> MarketsResponse:
    """Ranked markets for a query. Empty list when nothing matches."""
    return _markets_response(await service.resolve(q, limit), query=q)


@app.get("/markets/trending", response_model=MarketsResponse)
async def markets_trending(
    limit: int = Query(10, ge=1, le=100),
    service: MarketService = Depends(get_service),
) -> MarketsResponse:
    return _markets_response(await service.trending(limit))


@app.get("/markets/recent", response_model=MarketsResponse)
async def markets_recent(
    limit: int = Query(10, ge=1, le=100),
    service: MarketService = Depends(get_service),
) -> MarketsResponse:
    return _markets_response(await service.recent(limit))


@app.get(
    "/markets/view",
    response_model=MarketViewResponse,
    responses={404: {"description": "No market matches the query", "model": ErrorResponse}},
)
async def markets_view(
    q: str = Query(..., min_length=1),
    service: MarketService = Depends(get_service),
):
    """Best match for q with its sampled price history. 404 if nothing matches."""
    result = await service.view(q)
    if result is None:
        return _error_json("no_match", f'No market found for "{q}"')
    market, history = result
    return MarketViewResponse(**market_view(market, history))


@app.get("/markets/{condition_id}/history", response_model=HistoryResponse)
async def market_history(
    condition_id: str,
    service: MarketService = Depends(get_service),
) -> HistoryResponse:
    """Sampled YES price series, oldest first. Empty when there are no trades."""
    points = await service.history(condition_id)
    return HistoryResponse(
        conditionId=condition_id,
        priceHistory=[p.model_dump() for p in points],
    )


def run_api(
    host: str = "127.0.0.1",
    port: int = 8000,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> None:
    global _config_profile, _config_dir
    _config_profile = profile
    _config_dir = config_dir
    import uvicorn
    uvicorn.run("predfinder.api.main:app", host=host, port=port, reload=False)
