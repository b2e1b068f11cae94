"""
Recipient Loader — Reads a user's gift recipients from Supabase.

GiftHistory has been stored in more than one shape over time:
a JSON array of titles, a JSON array of purchase entries carrying
a ``title`` key, or a plain comma-separated list. All of them
normalize to a list of titles here.
"""

import json
import logging
from typing import Any

from giftly.agents.state import Recipient, split_csv
from giftly.core.config import RECIPIENTS_TABLE
from giftly.db.supabase_client import get_service_client

logger = logging.getLogger(__name__)

RECIPIENT_COLUMNS = "Id, Name, Relationship, Interests, GiftHistory"


def parse_gift_history(raw: Any) -> list[str]:
    """Normalize a stored GiftHistory value to a list of gift titles."""
    if not raw:
        return []

    entries: Any = raw
    if isinstance(raw, str):
        text = raw.strip()
        if not text.startswith("["):
            return split_csv(text)
        try:
            entries = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Unparseable GiftHistory JSON, falling back to CSV")
            return split_csv(text)

    if not isinstance(entries, list):
        return []

    titles: list[str] = []
    for entry in entries:
        if isinstance(entry, dict):
            title = entry.get("title") or entry.get("Title")
        else:
            title = entry
        if isinstance(title, str) and title.strip():
            titles.append(title.strip())
    return titles


def recipient_from_record(row: dict[str, Any]) -> Recipient:
    """Map a remote recipient row onto a Recipient."""
    return Recipient(
        id=row.get("Id"),
        name=row.get("Name") or "",
        relationship=row.get("Relationship"),
        interests=row.get("Interests"),
        gift_history=parse_gift_history(row.get("GiftHistory")),
    )


async def load_recipient(recipient_id: str, user_id: str) -> Recipient:
    """
    Load a recipient owned by ``user_id``.

    Raises:
        ValueError: If the recipient does not exist or belongs to another user.
    """
    client = get_service_client()
    result = (
        client.table(RECIPIENTS_TABLE)
        .select(RECIPIENT_COLUMNS)
        .eq("Id", recipient_id)
        .eq("user_id", user_id)
        .execute()
    )

    if not result.data:
        raise ValueError(f"No recipient {recipient_id} for user {user_id[:8]}...")

    return recipient_from_record(result.data[0])
