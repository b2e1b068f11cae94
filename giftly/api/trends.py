"""
Trends API — Trending gifts and category rollups.

GET /api/v1/trends/gifts — Trending gifts (occasion, search, sort)
GET /api/v1/trends/categories — Categories ranked by trending gifts
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from giftly.core.security import get_current_user_id
from giftly.models.trends import TrendingCategoriesResponse, TrendingGiftsResponse
from giftly.services.trending import (
    MAX_TRENDING_GIFTS,
    SortMode,
    load_trending_categories,
    load_trending_gifts,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/trends", tags=["trends"])


@router.get("/gifts", response_model=TrendingGiftsResponse)
async def get_trending_gifts(
    occasion: str = "all",
    q: Optional[str] = None,
    sort_by: SortMode = "trending",
    limit: int = Query(default=MAX_TRENDING_GIFTS, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
) -> TrendingGiftsResponse:
    """
    List trending gifts.

    Returns:
        200: Matching gifts in the requested order.
        422: Unknown sort_by or out-of-range limit.
        500: Catalog could not be loaded.
    """
    try:
        gifts = await load_trending_gifts(
            occasion=occasion, query=q, sort_by=sort_by, limit=limit,
        )
    except Exception as exc:
        logger.error("Failed to load trending gifts: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load trending gifts.",
        )

    return TrendingGiftsResponse(
        gifts=gifts,
        count=len(gifts),
        occasion=occasion,
        sort_by=sort_by,
    )


@router.get("/categories", response_model=TrendingCategoriesResponse)
async def get_trending_categories(
    user_id: str = Depends(get_current_user_id),
) -> TrendingCategoriesResponse:
    """Roll the catalog up by category."""
    try:
        categories = await load_trending_categories()
    except Exception as exc:
        logger.error("Failed to load trending categories: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load trending categories.",
        )
    return TrendingCategoriesResponse(categories=categories)
