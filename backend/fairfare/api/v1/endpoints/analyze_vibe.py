"""
Live seller-vibe analysis endpoint.

WHAT: POST /analyze-vibe characterizing a seller from their listing text
WHY: The form shows the seller's vibe while the user is still typing
HOW: Length gate, then a single free-text generation parsed into VibeAnalysis
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...deps import get_pipeline, get_settings
from ....core.config import Settings
from ....models.api_schemas import AnalyzeVibeRequest, AnalyzeVibeResponse, ErrorResponse
from ....services.negotiation_pipeline import NegotiationPipeline
from ....utils.exceptions import PipelineError
from ....utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/analyze-vibe",
    response_model=AnalyzeVibeResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def analyze_vibe(
    body: AnalyzeVibeRequest,
    pipeline: NegotiationPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
):
    """Analyze the seller description; null analysis for very short text."""
    description = body.seller_description.strip()
    if len(description) < settings.VIBE_ANALYSIS_MIN_CHARS:
        return AnalyzeVibeResponse(analysis=None)

    try:
        analysis = await pipeline.analyze_seller_vibe(description)
    except PipelineError as e:
        logger.error(f"Error in vibe analysis: {e.code}: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Failed to analyze vibe.").model_dump(),
        )

    return AnalyzeVibeResponse(analysis=analysis)
