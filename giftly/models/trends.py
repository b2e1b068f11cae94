"""
Trend Models — Pydantic schemas for the Trends API.

- GET /api/v1/trends/gifts — Trending gifts by occasion/search/sort
- GET /api/v1/trends/categories — Category rollup of the catalog
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from giftly.agents.state import GiftCandidate


class TrendingCategory(BaseModel):
    """A catalog category with how many of its gifts are trending."""

    name: str
    item_count: int = 0
    trending_count: int = 0


class TrendingGiftsResponse(BaseModel):
    """Response from GET /api/v1/trends/gifts."""

    gifts: list[GiftCandidate] = Field(default_factory=list)
    count: int = 0
    occasion: str = "all"
    sort_by: str = "trending"


class TrendingCategoriesResponse(BaseModel):
    """Response from GET /api/v1/trends/categories."""

    categories: list[TrendingCategory] = Field(default_factory=list)
