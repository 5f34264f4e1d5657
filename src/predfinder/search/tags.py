"""Topic tag cache and fuzzy tag matching."""

from __future__ import annotations

from typing import Awaitable, Callable

import structlog

from predfinder.catalog.base import FetchError
from predfinder.models import Tag
from predfinder.search.text import normalize

log = structlog.get_logger(__name__)


class TagCache:
    """Read-through cache of the full tag list, filled once and never invalidated.

    Two concurrent first reads may both fetch; both results are equivalent.
    """

    def __init__(self, loader: Callable[[], Awaitable[list[Tag]]]) -> None:
        self._loader = loader
        self._tags: list[Tag] | None = None

    @property
    def loaded(self) -> bool:
        return self._tags is not None

    async def get(self) -> list[Tag]:
        if self._tags is None:
            try:
                tags = await self._loader()
            except FetchError as e:
                log.warning("tag_load_failed", error=str(e))
                return []
            self._tags = list(tags)
            log.info("tags_cached", count=len(self._tags))
        return self._tags


def match_tag(tags: list[Tag], keyword: str) -> Tag | None:
    """Exact normalized label wins; else first tag (catalog order) contained in keyword or vice versa."""
    k = normalize(keyword)
    if not k:
        return None
    labelled = [(normalize(t.label), t) for t in tags]
    for label, tag in labelled:
        if label and label == k:
            return tag
    for label, tag in labelled:
        if label and (label in k or k in label):
            return tag
    return None


class TagResolver:
    def __init__(self, cache: TagCache) -> None:
        self.cache = cache

    async def resolve(self, keyword: str) -> Tag | None:
        return match_tag(await self.cache.get(), keyword)
