"""
API v1 router aggregation.

WHAT: Combine all v1 endpoint routers
WHY: Single place to register all API routes
HOW: Include routers from endpoints with prefixes
"""

from fastapi import APIRouter

from .endpoints import analyze_vibe, chat, negotiate, status

# Create main v1 router
api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    negotiate.router,
    prefix="/api/v1",
    tags=["negotiation"]
)

api_router.include_router(
    analyze_vibe.router,
    prefix="/api/v1",
    tags=["vibe"]
)

api_router.include_router(
    chat.router,
    prefix="/api/v1",
    tags=["chat"]
)

api_router.include_router(
    status.router,
    prefix="/api/v1",
    tags=["status"]
)
