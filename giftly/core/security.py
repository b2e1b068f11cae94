"""
Security — Bearer token authentication for the Giftly API.

Every /api/v1 route resolves the caller through Supabase Auth so that
recipient lookups can be scoped to the owning user.

Usage in route handlers:
    from giftly.core.security import get_current_user_id

    @router.get("/protected")
    async def protected_route(user_id: str = Depends(get_current_user_id)):
        return {"user_id": user_id}
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import httpx

from giftly.core.config import SUPABASE_ANON_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)

AUTH_TIMEOUT_SECONDS = 10.0

# auto_error=False so a missing header yields our 401 instead of FastAPI's 403.
_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _fetch_auth_user(token: str) -> httpx.Response:
    """Ask Supabase Auth who owns ``token``."""
    async with httpx.AsyncClient() as client:
        return await client.get(
            f"{SUPABASE_URL}/auth/v1/user",
            headers={
                "Authorization": f"Bearer {token}",
                "apikey": SUPABASE_ANON_KEY,
            },
            timeout=AUTH_TIMEOUT_SECONDS,
        )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> str:
    """
    FastAPI dependency that validates the Supabase JWT and returns the user ID.

    Raises:
        HTTPException(401): If the token is missing, rejected by Supabase,
            or Supabase Auth cannot be reached.

    Returns:
        str: The authenticated user's UUID.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized(
            "Missing authentication token. Provide a Bearer token in the Authorization header."
        )

    try:
        response = await _fetch_auth_user(credentials.credentials)
    except httpx.RequestError as exc:
        logger.warning("Supabase Auth unreachable: %s", exc)
        raise _unauthorized(
            "Authentication service unavailable. Please try again."
        ) from exc

    if response.status_code != 200:
        raise _unauthorized("Invalid or expired authentication token.")

    try:
        user_id = response.json().get("id")
    except (ValueError, AttributeError):
        raise _unauthorized("Authentication service returned an invalid response.")

    if not user_id:
        raise _unauthorized("Invalid authentication token — no user ID found.")

    return user_id
