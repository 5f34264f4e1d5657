"""Markets subcommand: search, view, trending, recent, history."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

import typer

from predfinder.config import Settings
from predfinder.service import MarketService
from predfinder.views import cents, display_volume, format_volume, summary_line

app = typer.Typer(help="Market search, trending lists and price history")

T = TypeVar("T")


def open_service(settings: Settings) -> MarketService:
    return MarketService.from_settings(settings)


def _run(ctx: typer.Context, call: Callable[[MarketService], Awaitable[T]]) -> T:
    settings = ctx.obj["settings"]

    async def _main() -> T:
        async with open_service(settings) as service:
            return await call(service)

    return asyncio.run(_main())


def _echo_markets(markets: list, heading: str) -> None:
    typer.echo(heading)
    typer.echo("")
    for i, m in enumerate(markets, start=1):
        typer.echo(summary_line(m, i))
        typer.echo("")


@app.command("search")
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Keyword, question, slug or polymarket.com URL"),
    limit: int = typer.Option(10, "--limit", "-n", help="Max results"),
) -> None:
    """Search markets with the tiered resolver."""
    markets = _run(ctx, lambda s: s.resolve(query, limit))
    if not markets:
        typer.echo(f'No markets found matching "{query}"')
        raise typer.Exit(1)
    plural = "" if len(markets) == 1 else "s"
    _echo_markets(markets, f'SEARCH RESULTS: "{query}"\nFound {len(markets)} market{plural}')


@app.command("view")
def view(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Keyword, question, slug or polymarket.com URL"),
) -> None:
    """Show the best match with its recent price history."""
    result = _run(ctx, lambda s: s.view(query))
    if result is None:
        typer.echo(f'No market found for "{query}"')
        raise typer.Exit(1)
    market, history = result
    typer.echo(market.question)
    typer.echo(f"YES: {cents(market.yes_price)} | NO: {cents(market.no_price)}")
    typer.echo(f"Volume: {format_volume(display_volume(market))}")
    if market.event_title and market.event_title != market.question:
        typer.echo(f"Event: {market.event_title}")
    typer.echo(f"Price history: {len(history)} points")
    for p in history[-10:]:
        typer.echo(f"  {p.timestamp}  {cents(p.price)}")


@app.command("trending")
def trending(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", help="Number of markets"),
) -> None:
    """Top markets by 24h volume, one per event."""
    markets = _run(ctx, lambda s: s.trending(limit))
    if not markets:
        typer.echo("Unable to fetch markets from Polymarket.")
        raise typer.Exit(1)
    _echo_markets(markets, "TOP TRENDING MARKETS")


@app.command("recent")
def recent(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", help="Number of markets"),
) -> None:
    """Newest live markets, one per event."""
    markets = _run(ctx, lambda s: s.recent(limit))
    if not markets:
        typer.echo("Unable to fetch markets from Polymarket.")
        raise typer.Exit(1)
    _echo_markets(markets, "RECENTLY LISTED MARKETS")


@app.command("history")
def history(
    ctx: typer.Context,
    condition_id: str = typer.Argument(..., help="Market condition id"),
) -> None:
    """Sampled YES price series for a condition."""
    points = _run(ctx, lambda s: s.history(condition_id))
    typer.echo(f"{len(points)} points")
    for p in points:
        typer.echo(f"  {p.timestamp}  {p.price:.3f}")
