"""
Trending Gifts — occasion/search filtering, sort modes, and category rollups
over the gift catalog.
"""

import logging
from typing import Literal, Optional

from giftly.agents.scoring import prior_score
from giftly.agents.state import GiftCandidate
from giftly.models.trends import TrendingCategory
from giftly.services.gift_loader import load_gifts

logger = logging.getLogger(__name__)

MAX_TRENDING_GIFTS = 20

SortMode = Literal["trending", "popular", "price-asc", "price-desc"]


def matches_occasion(gift: GiftCandidate, occasion: str) -> bool:
    """True for "all", otherwise when some tag contains the occasion."""
    if occasion == "all":
        return True
    needle = occasion.strip().lower()
    return any(needle in tag.lower() for tag in gift.tags)


def matches_query(gift: GiftCandidate, query: Optional[str]) -> bool:
    """Free-text search over the title and tags."""
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    if needle in gift.title.lower():
        return True
    return any(needle in tag.lower() for tag in gift.tags)


def sort_gifts(gifts: list[GiftCandidate], sort_by: SortMode) -> list[GiftCandidate]:
    """Return a new list in the requested order. Stable for equal keys."""
    if sort_by == "popular":
        return sorted(gifts, key=prior_score, reverse=True)
    if sort_by == "price-asc":
        return sorted(gifts, key=lambda g: g.price)
    if sort_by == "price-desc":
        return sorted(gifts, key=lambda g: g.price, reverse=True)
    return sorted(gifts, key=lambda g: (g.is_trending, prior_score(g)), reverse=True)


def select_trending(
    gifts: list[GiftCandidate],
    occasion: str = "all",
    query: Optional[str] = None,
    sort_by: SortMode = "trending",
    limit: int = MAX_TRENDING_GIFTS,
) -> list[GiftCandidate]:
    """Filter by occasion and query, sort, and cap at ``limit``."""
    kept = [
        g for g in gifts
        if matches_occasion(g, occasion) and matches_query(g, query)
    ]
    return sort_gifts(kept, sort_by)[:limit]


def trending_categories(gifts: list[GiftCandidate]) -> list[TrendingCategory]:
    """
    Roll the catalog up by category.

    Ordered by trending count, then item count (both descending),
    then name. Gifts without a category are left out.
    """
    counts: dict[str, list[int]] = {}
    for gift in gifts:
        if not gift.category:
            continue
        bucket = counts.setdefault(gift.category, [0, 0])
        bucket[0] += 1
        if gift.is_trending:
            bucket[1] += 1

    categories = [
        TrendingCategory(name=name, item_count=items, trending_count=trending)
        for name, (items, trending) in counts.items()
    ]
    categories.sort(key=lambda c: (-c.trending_count, -c.item_count, c.name))
    return categories


async def load_trending_gifts(
    occasion: str = "all",
    query: Optional[str] = None,
    sort_by: SortMode = "trending",
    limit: int = MAX_TRENDING_GIFTS,
) -> list[GiftCandidate]:
    """Load the catalog and pick the trending gifts from it."""
    gifts = select_trending(await load_gifts(), occasion, query, sort_by, limit)
    logger.info(
        "Selected %d trending gifts (occasion=%s, query=%r, sort_by=%s)",
        len(gifts), occasion, query, sort_by,
    )
    return gifts


async def load_trending_categories() -> list[TrendingCategory]:
    """Load the catalog and roll it up by category."""
    return trending_categories(await load_gifts())
