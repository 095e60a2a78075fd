"""
Negotiation plan endpoint.

WHAT: POST /negotiate turning form fields into a plan or a rejection reason
WHY: Main entry point of the co-pilot
HOW: Validate body, run the injected pipeline, map the terminal state to a wire shape
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse

from ...deps import get_pipeline
from ....models.api_schemas import (
    AcceptedPlanData,
    ErrorResponse,
    NegotiateResponse,
    PlanPayload,
    RejectedPlanData,
)
from ....models.negotiation import NegotiationRequest
from ....services.negotiation_pipeline import NegotiationPipeline, PipelineState
from ....utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/negotiate",
    response_model=NegotiateResponse,
    responses={status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse}},
)
async def negotiate(
    body: NegotiationRequest,
    pipeline: NegotiationPipeline = Depends(get_pipeline),
    x_user_id: Optional[str] = Header(default=None),
):
    """
    Generate a negotiation plan.

    WHAT: Run vibe analysis (optional), plan generation and parsing
    WHY: The frontend renders either the plan or the rejection reason
    HOW: ACCEPTED/REJECTED -> 200 {"data": ...}; FAILED -> 502 {"error": ...}
    """
    logger.info(f"Negotiation requested: item={body.item_name!r}, vibe={body.vibe.value}, user={x_user_id or 'anonymous'}")

    outcome = await pipeline.run(body, user_id=x_user_id)

    if outcome.state == PipelineState.ACCEPTED:
        plan = outcome.plan
        return NegotiateResponse(
            data=AcceptedPlanData(
                plan=PlanPayload(price_range=plan.price_range, reasoning=plan.reasoning, scripts=plan.scripts)
            )
        )

    if outcome.state == PipelineState.REJECTED:
        return NegotiateResponse(data=RejectedPlanData(reason=outcome.reason))

    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=ErrorResponse(error=outcome.error).model_dump(),
    )
