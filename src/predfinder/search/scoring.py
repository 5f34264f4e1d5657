"""Relevance scoring of a market question against a keyword.

Scores are additive: exact and prefix matches dominate, token overlap and
popularity break ties among partial matches. Scores are only comparable within
one ranking call.
"""

from __future__ import annotations

import math

from predfinder.models import Market
from predfinder.search.text import normalize

EXACT_BONUS = 1000.0
PREFIX_BONUS = 300.0
SUBSTRING_BONUS = 200.0
TOKEN_BONUS = 25.0
ALL_TOKENS_BONUS = 120.0


def popularity(volume: float) -> float:
    return math.log10(max(volume, 0.0) + 1)


def score(question: str, keyword: str, context: str = "", volume: float = 0.0) -> float:
    """Score one question (plus event context) against a keyword. Pure and total."""
    q = normalize(question)
    k = normalize(keyword)
    haystack = f"{q} {normalize(context)}".strip()
    total = popularity(volume)
    if not k:
        return total
    if q == k or haystack == k:
        total += EXACT_BONUS
    if q.startswith(k) or haystack.startswith(k):
        total += PREFIX_BONUS
    if k in q or k in haystack:
        total += SUBSTRING_BONUS
    hay_tokens = set(haystack.split())
    key_tokens = k.split()
    matched = sum(1 for t in key_tokens if t in hay_tokens)
    total += TOKEN_BONUS * matched
    if key_tokens and matched == len(key_tokens):
        total += ALL_TOKENS_BONUS
    return total


def score_market(market: Market, keyword: str) -> float:
    return score(market.question, keyword, market.context, market.popularity_volume)
