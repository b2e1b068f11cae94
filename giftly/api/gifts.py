"""
Gifts API — Read access to the gift catalog.

GET /api/v1/gifts — List all gifts
GET /api/v1/gifts/{gift_id} — Fetch one gift
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from giftly.agents.state import GiftCandidate
from giftly.core.security import get_current_user_id
from giftly.models.recommendations import GiftListResponse
from giftly.services.gift_loader import load_gift, load_gifts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/gifts", tags=["gifts"])


@router.get("", response_model=GiftListResponse)
async def list_gifts(
    user_id: str = Depends(get_current_user_id),
) -> GiftListResponse:
    """List the full catalog."""
    try:
        gifts = await load_gifts()
    except Exception as exc:
        logger.error("Failed to load gift catalog: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load gifts right now. Please try again.",
        )
    return GiftListResponse(gifts=gifts, count=len(gifts))


@router.get("/{gift_id}", response_model=GiftCandidate)
async def get_gift(
    gift_id: str,
    user_id: str = Depends(get_current_user_id),
) -> GiftCandidate:
    """
    Fetch a single gift.

    Returns:
        200: The gift.
        404: No gift with this ID.
        500: Catalog failure.
    """
    try:
        return await load_gift(gift_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gift not found.",
        )
    except Exception as exc:
        logger.error("Failed to load gift %s: %s", gift_id, exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load this gift right now. Please try again.",
        )
