"""
Supabase Client

Provides the service-role Supabase client used for server-side reads
of the gift catalog and recipient records.
"""

from supabase import create_client, Client
from giftly.core.config import (
    SUPABASE_URL,
    SUPABASE_SERVICE_ROLE_KEY,
    validate_supabase_config,
)

# Module-level client, initialized lazily
_service_client: Client | None = None


def get_service_client() -> Client:
    """
    Get the Supabase client using the service_role (admin) key.

    WARNING: This client BYPASSES Row Level Security. Every query
    against user-owned tables must filter on user_id explicitly.
    """
    global _service_client
    if _service_client is None:
        validate_supabase_config()
        _service_client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    return _service_client
