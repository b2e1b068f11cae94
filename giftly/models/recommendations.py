"""
Recommendation Models — Pydantic schemas for the Recommendations and Gifts APIs.

Defines request/response models for:
- POST /api/v1/recommendations — Personalized recommendations for a recipient
- POST /api/v1/recommendations/score — Score caller-supplied gifts
- GET /api/v1/gifts, GET /api/v1/gifts/{gift_id} — Catalog reads
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from giftly.agents.state import GiftCandidate, RecipientContext, ScoredGift


# ======================================================================
# Request Models
# ======================================================================

class RecommendationRequest(BaseModel):
    """
    Payload for POST /api/v1/recommendations.

    ``interests`` are the caller's current picks; the recipient record
    contributes only its gift history.
    """

    recipient_id: Optional[str] = None
    budget: Optional[float] = Field(default=None, gt=0)
    interests: list[str] = Field(default_factory=list)
    include_personalization: bool = True

    @field_validator("interests")
    @classmethod
    def strip_blank_interests(cls, v: list[str]) -> list[str]:
        return [i.strip() for i in v if i and i.strip()]


class ScoreRequest(BaseModel):
    """Payload for POST /api/v1/recommendations/score."""

    gifts: list[GiftCandidate]
    context: Optional[RecipientContext] = None


# ======================================================================
# Response Models
# ======================================================================

class RecommendationResponse(BaseModel):
    """Ranked gifts, highest match_score first."""

    recommendations: list[ScoredGift] = Field(default_factory=list)
    count: int = 0
    personalized: bool = False


class GiftListResponse(BaseModel):
    """Response from GET /api/v1/gifts."""

    gifts: list[GiftCandidate] = Field(default_factory=list)
    count: int = 0
