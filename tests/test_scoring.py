"""Relevance scoring."""

import math

from predfinder.models import Market
from predfinder.search.scoring import (
    ALL_TOKENS_BONUS,
    EXACT_BONUS,
    PREFIX_BONUS,
    SUBSTRING_BONUS,
    TOKEN_BONUS,
    score,
    score_market,
)


def test_exact_beats_prefix_beats_substring():
    keyword = "bitcoin above 100k"
    exact = score("Bitcoin above 100k?", keyword)
    prefix = score("Bitcoin above 100k by June?", keyword)
    substring = score("Will Bitcoin above 100k happen?", keyword)
    assert exact > prefix > substring > 0


def test_component_values():
    k = "fed rate cut"
    assert score("Fed rate cut", k) == EXACT_BONUS + PREFIX_BONUS + SUBSTRING_BONUS + 3 * TOKEN_BONUS + ALL_TOKENS_BONUS
    assert score("Will the fed cut rates?", k) == 2 * TOKEN_BONUS
    assert score("Unrelated", k) == 0


def test_context_counts_toward_tokens_and_prefix():
    # question alone misses "election" but the event title supplies it
    with_ctx = score("Will Newsom win?", "election newsom", context="2028 Election")
    without = score("Will Newsom win?", "election newsom")
    assert with_ctx - without == TOKEN_BONUS + ALL_TOKENS_BONUS


def test_popularity_breaks_ties():
    low = score("Will it rain?", "rain", volume=10)
    high = score("Will it rain?", "rain", volume=1_000_000)
    assert high > low
    assert math.isclose(high - low, math.log10(1_000_001) - math.log10(11))


def test_empty_keyword_scores_only_popularity():
    assert score("Anything", "", volume=99) == 2.0


def test_score_market_uses_first_nonempty_volume():
    m = Market(id="1", question="Will it rain?", volume=999, volume_num=0, volume_24h=9)
    assert score_market(m, "snow") == 1.0
    m2 = Market(id="2", question="Will it rain?", volume=99)
    assert score_market(m2, "snow") == 2.0
