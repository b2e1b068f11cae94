"""
Giftly Backend — FastAPI Entry Point

Initializes the FastAPI app and registers all route handlers.
"""

from fastapi import Depends, FastAPI

from giftly.api.gifts import router as gifts_router
from giftly.api.recommendations import router as recommendations_router
from giftly.api.trends import router as trends_router
from giftly.core.config import PROJECT_NAME
from giftly.core.security import get_current_user_id

app = FastAPI(
    title=f"{PROJECT_NAME} API",
    description="Personalized gift recommendations — Backend API",
    version="0.1.0",
)

# --- Register API routers ---
app.include_router(gifts_router)
app.include_router(recommendations_router)
app.include_router(trends_router)


@app.get("/health")
async def health_check():
    """Health check endpoint. Returns service status."""
    return {"status": "ok"}


@app.get("/api/v1/me")
async def get_current_user(user_id: str = Depends(get_current_user_id)):
    """Returns the authenticated user's ID."""
    return {"user_id": user_id}
