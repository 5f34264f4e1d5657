"""Market resolution, relevance scoring, trending selection and price history sampling."""

from predfinder.search.history import PriceHistorySampler, sample_trades
from predfinder.search.resolver import MarketResolver
from predfinder.search.scoring import score, score_market
from predfinder.search.tags import TagCache, TagResolver
from predfinder.search.text import extract_slug, normalize, sanitize
from predfinder.search.trending import TrendingSelector

__all__ = [
    "MarketResolver",
    "PriceHistorySampler",
    "TagCache",
    "TagResolver",
    "TrendingSelector",
    "extract_slug",
    "normalize",
    "sample_trades",
    "sanitize",
    "score",
    "score_market",
]
