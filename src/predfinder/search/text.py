"""Text normalization and query interpretation (conversational prefixes, slugs, URLs)."""

from __future__ import annotations

import re
from urllib.parse import urlparse

_NON_WORD = re.compile(r"\W+")
_PATH_SLUG = re.compile(r"(?:event|market)/([a-z0-9_-]+)", re.IGNORECASE)
_BARE_SLUG = re.compile(r"^[a-z0-9-]{4,}$", re.IGNORECASE)

# Most specific first; only the first match is stripped.
CONVERSATIONAL_PREFIXES = (
    "search markets for:",
    "search markets for",
    "search for:",
    "search for",
    "search markets:",
    "search markets",
    "show me",
    "find",
)

_QUOTE_PAIRS = {'"': '"', "'": "'", "“": "”", "‘": "’", "`": "`"}

MIN_QUERY_LENGTH = 2
DEFAULT_PUBLIC_DOMAIN = "polymarket.com"


def normalize(text: str | None) -> str:
    """Lower-case, collapse runs of non-word characters to one space, trim."""
    if not text:
        return ""
    return _NON_WORD.sub(" ", text.lower()).strip()


def tokens(text: str | None) -> list[str]:
    """Whitespace tokens of the normalized text."""
    return normalize(text).split()


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and _QUOTE_PAIRS.get(text[0]) == text[-1]:
        return text[1:-1].strip()
    return text


def _strip_prefix(text: str) -> str:
    lowered = text.lower()
    for prefix in CONVERSATIONAL_PREFIXES:
        if not lowered.startswith(prefix):
            continue
        rest = text[len(prefix):]
        # whole words only, so "show mexico" is left alone
        if prefix.endswith(":") or not rest or rest[0].isspace():
            return rest.strip()
    return text


def sanitize(query: str | None) -> str:
    """Reduce a conversational request to the search phrase.

    "search markets for: bitcoin" -> "bitcoin"; "Politics: Will X win?" -> "Will X win?".
    Falls back to the trimmed input when stripping leaves fewer than 2 characters.
    """
    original = (query or "").strip()
    text = _strip_prefix(_strip_quotes(original))
    colon = text.rfind(":")
    if 0 < colon < len(text) - 1:
        tail = text[colon + 1:].strip()
        if len(tail) >= MIN_QUERY_LENGTH:
            text = tail
    if len(text) < MIN_QUERY_LENGTH:
        return original
    return text


def _slug_from_url(text: str) -> str | None:
    candidate = text
    if candidate.startswith("//"):
        candidate = "https:" + candidate
    elif "://" not in candidate:
        candidate = "https://" + candidate
    segments = [s for s in urlparse(candidate).path.split("/") if s]
    for i, seg in enumerate(segments[:-1]):
        if seg.lower() in ("event", "market"):
            return segments[i + 1]
    return None


def extract_slug(query: str | None, public_domain: str = DEFAULT_PUBLIC_DOMAIN) -> str | None:
    """Slug from a catalog URL, an event/<slug> fragment, or a bare slug-like token."""
    text = (query or "").strip()
    if not text:
        return None
    if public_domain and public_domain in text.lower():
        try:
            slug = _slug_from_url(text)
        except ValueError:
            slug = None
        if slug:
            return slug
    match = _PATH_SLUG.search(text)
    if match:
        return match.group(1)
    if not any(c.isspace() for c in text) and _BARE_SLUG.match(text):
        return text.lower()
    return None
