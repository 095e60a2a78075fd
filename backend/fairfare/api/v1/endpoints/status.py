"""
Status and health check endpoints.

WHAT: Health monitoring for the LLM provider and the history database
WHY: Quick diagnostics for frontend and ops
HOW: FastAPI endpoint calling provider ping and DB ping
"""

from fastapi import APIRouter, Depends, Request

from ...deps import get_provider, get_settings
from ....core.config import Settings
from ....core.database import ping_database
from ....llm.provider import LLMProvider

router = APIRouter()


@router.get("/status")
async def service_status(
    request: Request,
    provider: LLMProvider = Depends(get_provider),
    settings: Settings = Depends(get_settings),
):
    """
    Check provider and database status.

    Returns:
        JSON with app metadata, provider status and database status
    """
    llm_status = await provider.ping()

    engine = getattr(request.app.state, "engine", None)
    db_status = ping_database(engine) if engine is not None else {"available": False, "error": "Persistence disabled"}

    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "llm": {
            "provider": settings.LLM_PROVIDER,
            "available": llm_status.available,
            "base_url": llm_status.base_url,
            "models": llm_status.models,
            "error": llm_status.error,
        },
        "database": db_status,
    }
