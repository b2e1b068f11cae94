"""
Recommendation State Schema — Pydantic models for the gift recommendation pipeline.

Defines the canonical records shared by the data loaders, the scorer,
and the LangGraph graph:
1. retrieve_candidates — Load budget-eligible gifts from the catalog
2. personalize — Score and rank them against the recipient context

Remote records use capitalized field names (Title, Tags, MatchScore, ...).
The loaders in giftly.services map them onto these models; nothing past
that boundary sees the remote shape.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def split_csv(value: Any) -> list[str]:
    """Accept a list or a comma-separated string; strip entries, drop blanks and repeats."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)

    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        text = str(item).strip()
        if text and text not in seen:
            seen.add(text)
            result.append(text)
    return result


def coerce_score(value: Any) -> Optional[int]:
    """
    Coerce an upstream match score to an int, or None when unusable.

    Booleans, NaN/inf and non-numeric strings become None so the
    scorer can fall back to its default prior. Range is not checked here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(round(value))
    return None


# ======================================================================
# Gift records
# ======================================================================

class GiftCandidate(BaseModel):
    """A gift from the catalog, as supplied to the scorer."""

    id: str
    title: str
    description: Optional[str] = None
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    reasoning: str = ""
    base_match_score: Optional[int] = None  # upstream prior, expected 0-100
    price: float = Field(default=0.0, ge=0)
    image_url: Optional[str] = None
    vendor: Optional[str] = None
    purchase_url: Optional[str] = None
    delivery_days: Optional[int] = None
    is_trending: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str]:
        return split_csv(v)

    @field_validator("category", "reasoning", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("base_match_score", mode="before")
    @classmethod
    def parse_base_match_score(cls, v: Any) -> Optional[int]:
        return coerce_score(v)


class ScoredGift(GiftCandidate):
    """A gift after personalization: the candidate plus its score breakdown."""

    match_score: int
    personalization_delta: int = 0
    personalization_reasons: list[str] = Field(default_factory=list)
    is_personalized: bool = False


# ======================================================================
# Recipient records
# ======================================================================

class RecipientContext(BaseModel):
    """
    Per-request personalization signals.

    ``interests`` come from the caller and are evaluated in order.
    ``gift_history`` holds exact titles previously given to the recipient.
    """

    interests: list[str] = Field(default_factory=list)
    gift_history: set[str] = Field(default_factory=set)


class Recipient(BaseModel):
    """A gift recipient owned by a user."""

    id: str
    name: str
    relationship: Optional[str] = None
    interests: list[str] = Field(default_factory=list)
    gift_history: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("interests", mode="before")
    @classmethod
    def parse_interests(cls, v: Any) -> list[str]:
        return split_csv(v)

    def to_context(self, interests: Optional[list[str]] = None) -> RecipientContext:
        """Build a scoring context from caller interests and this recipient's history."""
        return RecipientContext(
            interests=list(interests or []),
            gift_history=set(self.gift_history),
        )


# ======================================================================
# Main LangGraph State
# ======================================================================

class RecommendationState(BaseModel):
    """
    Complete state for the recommendation graph.

    Flows through 2 nodes:
    1. retrieve_candidates → populates candidates
    2. personalize → populates recommendations
    """

    # --- Input data (set before graph execution) ---
    budget: Optional[float] = None
    include_personalization: bool = True
    context: Optional[RecipientContext] = None

    # --- Populated by graph nodes ---
    candidates: list[GiftCandidate] = Field(default_factory=list)
    recommendations: list[ScoredGift] = Field(default_factory=list)

    # --- Error/status tracking ---
    error: Optional[str] = None
