"""
Personalization Scoring — re-ranks gift candidates against a recipient context.

1. +15 for every caller interest found in a gift's tags, title, or reasoning
2. -30 when the gift's exact title was given to the recipient before
3. match_score = clamp(base_match_score + delta, 1, 99)
4. Stable sort by match_score (descending); ties keep input order

A missing or out-of-range base_match_score falls back to 75. Input
records are never mutated; every call returns fresh ScoredGift objects.
"""

import logging
from typing import Any, Optional, Sequence

from giftly.agents.state import (
    GiftCandidate,
    RecipientContext,
    RecommendationState,
    ScoredGift,
)

logger = logging.getLogger(__name__)


INTEREST_MATCH_BOOST = 15
REPEAT_GIFT_PENALTY = 30
DEFAULT_MATCH_SCORE = 75
MIN_MATCH_SCORE = 1
MAX_MATCH_SCORE = 99

REPEAT_GIFT_REASON = "Similar gift purchased before"


def _normalize(text: str) -> str:
    """Lowercase and strip a string for comparison."""
    return text.strip().lower()


def _clamp(value: int, low: int = MIN_MATCH_SCORE, high: int = MAX_MATCH_SCORE) -> int:
    return max(low, min(high, value))


def prior_score(gift: GiftCandidate) -> int:
    """The upstream score, or the default when it is missing or outside 0-100."""
    score = gift.base_match_score
    if score is None or not 0 <= score <= 100:
        return DEFAULT_MATCH_SCORE
    return score


# ======================================================================
# Matching helpers
# ======================================================================

def _gift_matches_interest(gift: GiftCandidate, interest: str) -> bool:
    """
    Check if a gift matches an interest.

    Signals, checked in order (first hit wins):
    1. Any tag containing the interest
    2. Title containing the interest
    3. Reasoning text containing the interest

    All comparisons are case-insensitive substring tests.
    """
    needle = _normalize(interest)
    if not needle:
        return False

    if any(needle in tag.lower() for tag in gift.tags):
        return True

    if needle in gift.title.lower():
        return True

    return needle in gift.reasoning.lower()


def _compute_adjustments(
    gift: GiftCandidate,
    context: Optional[RecipientContext],
) -> tuple[int, list[str]]:
    """
    Compute the personalization delta and its reasons for one gift.

    Returns:
        A tuple of (delta, reasons). Reasons are recorded in the order the
        interests were evaluated, followed by the repeat-gift penalty.
    """
    delta = 0
    reasons: list[str] = []
    if context is None:
        return (delta, reasons)

    for interest in context.interests:
        if _gift_matches_interest(gift, interest):
            delta += INTEREST_MATCH_BOOST
            reasons.append(f"Matches {interest.strip()} interest")

    if context.gift_history and gift.title in context.gift_history:
        delta -= REPEAT_GIFT_PENALTY
        reasons.append(REPEAT_GIFT_REASON)

    return (delta, reasons)


def score_gift(
    gift: GiftCandidate,
    context: Optional[RecipientContext] = None,
) -> ScoredGift:
    """Score a single gift. Does not touch ``gift``."""
    delta, reasons = _compute_adjustments(gift, context)
    return ScoredGift(
        **gift.model_dump(),
        match_score=_clamp(prior_score(gift) + delta),
        personalization_delta=delta,
        personalization_reasons=reasons,
        is_personalized=delta > 0,
    )


def score_gifts(
    gifts: Sequence[GiftCandidate],
    context: Optional[RecipientContext] = None,
) -> list[ScoredGift]:
    """
    Score every gift and return them ranked by match_score, highest first.

    Args:
        gifts: Candidate gifts. May be empty.
        context: Optional recipient context. Without one every gift keeps
                 its (clamped) prior and gets no reasons.

    Raises:
        TypeError: If ``gifts`` is not a list or tuple.
    """
    if not isinstance(gifts, (list, tuple)):
        raise TypeError(
            f"gifts must be a list of GiftCandidate, got {type(gifts).__name__}"
        )

    scored = [score_gift(gift, context) for gift in gifts]

    for gift in scored:
        logger.debug(
            "Gift '%s': base=%s, delta=%+d, final=%d",
            gift.title, gift.base_match_score,
            gift.personalization_delta, gift.match_score,
        )

    # list.sort is stable, so equal scores keep their input order
    scored.sort(key=lambda g: g.match_score, reverse=True)
    return scored


# ======================================================================
# LangGraph node
# ======================================================================

async def personalize(state: RecommendationState) -> dict[str, Any]:
    """
    LangGraph node: score the retrieved candidates.

    Uses the state's recipient context only when personalization was
    requested; otherwise every candidate keeps its prior.
    """
    context = state.context if state.include_personalization else None

    logger.info(
        "Scoring %d candidates (personalized=%s, interests=%s, history=%d)",
        len(state.candidates),
        context is not None,
        context.interests if context else [],
        len(context.gift_history) if context else 0,
    )

    ranked = score_gifts(state.candidates, context)

    if ranked:
        logger.info(
            "Top: '%s' (%d), Bottom: '%s' (%d)",
            ranked[0].title, ranked[0].match_score,
            ranked[-1].title, ranked[-1].match_score,
        )

    return {"recommendations": ranked}
