"""
Recommendations API — Personalized gift recommendations.

POST /api/v1/recommendations — Rank catalog gifts for a recipient
POST /api/v1/recommendations/score — Rank caller-supplied gifts
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from giftly.agents.pipeline import run_recommendation_pipeline
from giftly.agents.scoring import score_gifts
from giftly.agents.state import RecipientContext, RecommendationState
from giftly.core.security import get_current_user_id
from giftly.models.recommendations import (
    RecommendationRequest,
    RecommendationResponse,
    ScoreRequest,
)
from giftly.services.recipient_loader import load_recipient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/recommendations", tags=["recommendations"])


async def _build_context(
    payload: RecommendationRequest,
    user_id: str,
) -> Optional[RecipientContext]:
    """
    Combine the request's interests with the recipient's gift history.

    A recipient that cannot be found only costs the history signal;
    the request still goes through with whatever interests were sent.
    """
    if not payload.include_personalization:
        return None

    if payload.recipient_id:
        try:
            recipient = await load_recipient(payload.recipient_id, user_id)
            return recipient.to_context(payload.interests)
        except ValueError:
            logger.warning(
                "Recipient %s not found for user %s; scoring without history",
                payload.recipient_id, user_id[:8],
            )
        except Exception as exc:
            logger.warning(
                "Failed to load recipient %s for user %s: %s; scoring without history",
                payload.recipient_id, user_id[:8], exc, exc_info=True,
            )

    if payload.interests:
        return RecipientContext(interests=payload.interests)
    return None


# ===================================================================
# POST /api/v1/recommendations: Generate Recommendations
# ===================================================================

@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=RecommendationResponse,
)
async def get_recommendations(
    payload: RecommendationRequest,
    user_id: str = Depends(get_current_user_id),
) -> RecommendationResponse:
    """
    Rank catalog gifts for the authenticated user.

    Processing steps:
    1. Load the recipient (if given) and build the scoring context
    2. Run the pipeline: budget-filtered candidates → personalization
    3. Return the ranked gifts

    Returns:
        200: Ranked gifts (possibly empty when nothing fits the budget).
        401: Missing or invalid authentication token.
        422: Validation error in the request payload.
        500: Catalog or pipeline failure.
    """
    context = await _build_context(payload, user_id)

    state = RecommendationState(
        budget=payload.budget,
        include_personalization=payload.include_personalization,
        context=context,
    )

    try:
        result = await run_recommendation_pipeline(state)
    except Exception as exc:
        logger.error(
            "Recommendation pipeline failed for user %s: %s",
            user_id[:8], exc, exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load recommendations right now. Please try again.",
        )

    recommendations = result.get("recommendations", [])

    return RecommendationResponse(
        recommendations=recommendations,
        count=len(recommendations),
        personalized=context is not None,
    )


# ===================================================================
# POST /api/v1/recommendations/score: Score Supplied Gifts
# ===================================================================

@router.post(
    "/score",
    status_code=status.HTTP_200_OK,
    response_model=RecommendationResponse,
)
async def score_supplied_gifts(
    payload: ScoreRequest,
    user_id: str = Depends(get_current_user_id),
) -> RecommendationResponse:
    """Rank the gifts in the request body against the optional context."""
    ranked = score_gifts(payload.gifts, payload.context)
    return RecommendationResponse(
        recommendations=ranked,
        count=len(ranked),
        personalized=payload.context is not None,
    )
