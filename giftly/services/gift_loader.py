"""
Gift Catalog Loader — Reads gift records from Supabase and maps them
onto GiftCandidate.

The catalog table keeps the remote schema's capitalized column names
(Title, Tags, MatchScore, ...). ``gift_from_record`` is the only place
that knows about them.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from giftly.agents.state import GiftCandidate
from giftly.core.config import GIFTS_TABLE
from giftly.db.supabase_client import get_service_client

logger = logging.getLogger(__name__)

# Gifts up to 20% over the stated budget are still offered
BUDGET_TOLERANCE = 1.2
MAX_CANDIDATES = 15

GIFT_COLUMNS = (
    "Id, Title, Description, Category, Price, ImageUrl, Tags, Reasoning, "
    "MatchScore, DeliveryDays, Vendor, PurchaseUrl, IsTrending"
)


# ===================================================================
# Record mapping
# ===================================================================

def gift_from_record(row: dict[str, Any]) -> GiftCandidate:
    """
    Map a remote gift row onto a GiftCandidate.

    Raises:
        pydantic.ValidationError: If the row lacks an Id/Title or has
            a negative price.
    """
    price = row.get("Price")
    return GiftCandidate(
        id=row.get("Id"),
        title=row.get("Title"),
        description=row.get("Description"),
        category=row.get("Category"),
        tags=row.get("Tags"),
        reasoning=row.get("Reasoning"),
        base_match_score=row.get("MatchScore"),
        price=price if price is not None else 0.0,
        image_url=row.get("ImageUrl"),
        vendor=row.get("Vendor"),
        purchase_url=row.get("PurchaseUrl"),
        delivery_days=row.get("DeliveryDays"),
        is_trending=bool(row.get("IsTrending")),
    )


def gifts_from_records(rows: Optional[list[dict[str, Any]]]) -> list[GiftCandidate]:
    """Map rows in order, skipping (and logging) any that fail validation."""
    gifts: list[GiftCandidate] = []
    for row in rows or []:
        try:
            gifts.append(gift_from_record(row))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed gift record %s: %d validation error(s)",
                row.get("Id"), exc.error_count(),
            )
    return gifts


# ===================================================================
# Queries
# ===================================================================

async def load_gifts() -> list[GiftCandidate]:
    """Load the whole gift catalog."""
    client = get_service_client()
    result = client.table(GIFTS_TABLE).select(GIFT_COLUMNS).execute()
    return gifts_from_records(result.data)


async def load_gift(gift_id: str) -> GiftCandidate:
    """
    Load a single gift by ID.

    Raises:
        ValueError: If no gift with that ID exists.
    """
    client = get_service_client()
    result = (
        client.table(GIFTS_TABLE)
        .select(GIFT_COLUMNS)
        .eq("Id", gift_id)
        .execute()
    )

    gifts = gifts_from_records(result.data)
    if not gifts:
        raise ValueError(f"No gift found with id {gift_id}")
    return gifts[0]


async def load_candidate_gifts(
    budget: Optional[float] = None,
    limit: int = MAX_CANDIDATES,
) -> list[GiftCandidate]:
    """
    Load recommendation candidates, best upstream score first.

    Args:
        budget: Optional spending limit. Gifts priced above
                ``budget * BUDGET_TOLERANCE`` are excluded.
        limit: Maximum number of gifts to return.
    """
    client = get_service_client()
    query = client.table(GIFTS_TABLE).select(GIFT_COLUMNS)

    if budget:
        query = query.lte("Price", budget * BUDGET_TOLERANCE)

    result = query.order("MatchScore", desc=True).limit(limit).execute()
    gifts = gifts_from_records(result.data)

    logger.info(
        "Loaded %d candidate gifts (budget=%s, limit=%d)",
        len(gifts), budget, limit,
    )
    return gifts
