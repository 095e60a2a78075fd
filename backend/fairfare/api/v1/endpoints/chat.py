"""
Co-pilot chat endpoint.

WHAT: POST /chat answering a conversation about an item, optionally with a photo
WHY: Users who do not know all form fields can describe the item instead
HOW: Render system prompt plus history, one free-text generation
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...deps import get_pipeline
from ....models.api_schemas import ChatRequest, ChatResponse, ErrorResponse
from ....services.negotiation_pipeline import NegotiationPipeline
from ....utils.exceptions import PipelineError
from ....utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def chat(body: ChatRequest, pipeline: NegotiationPipeline = Depends(get_pipeline)):
    """Reply to the latest chat turn."""
    if not body.messages:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Messages are required.").model_dump(),
        )

    try:
        reply = await pipeline.chat(body.messages, image=body.image_attachment())
    except PipelineError as e:
        logger.error(f"Error in chat: {e.code}: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Failed to get a response from the AI.").model_dump(),
        )

    return ChatResponse(message=reply)
