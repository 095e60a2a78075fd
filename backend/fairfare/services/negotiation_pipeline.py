"""
Negotiation plan pipeline.

WHAT: Seller-vibe summary -> plan generation -> parse -> accepted/rejected/failed
WHY: Turn raw user fields into a contract-shaped plan or a structured rejection
HOW: At most two sequential provider calls per run, one parse attempt, no shared per-run state
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from ..agents.prompts import (
    SELLER_ANALYSIS_PLACEHOLDER,
    render_chat_messages,
    render_negotiation_messages,
    render_seller_summary_prompt,
    render_vibe_analysis_prompt,
)
from ..llm.provider import LLMProvider
from ..models.negotiation import (
    ChatTurn,
    MediaAttachment,
    NegotiationPlan,
    NegotiationRequest,
    SellerVibeAnalysis,
    VibeAnalysis,
)
from ..utils.exceptions import PipelineError, UpstreamError
from ..utils.logger import get_logger
from .plan_store import PlanStore
from .response_parser import parse_plan, parse_vibe_analysis

logger = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to generate a negotiation plan. Please try again later."


class PipelineState(str, enum.Enum):
    """Pipeline states; ACCEPTED, REJECTED and FAILED are terminal."""
    AWAITING_INPUT = "awaiting_input"
    VIBE_ANALYSIS_PENDING = "vibe_analysis_pending"
    PLAN_GENERATION_PENDING = "plan_generation_pending"
    PARSED = "parsed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class PipelineOutcome:
    """Terminal result of one pipeline run."""
    state: PipelineState
    plan: Optional[NegotiationPlan] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    seller_analysis: str = SELLER_ANALYSIS_PLACEHOLDER
    transitions: list[PipelineState] = field(default_factory=list)


class NegotiationPipeline:
    """
    Plan assembler over an injected LLM provider.

    One instance serves concurrent requests; every run keeps its state in locals.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        structured_output: bool = True,
        plan_store: Optional[PlanStore] = None
    ):
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.structured_output = structured_output
        self.plan_store = plan_store

    async def run(self, request: NegotiationRequest, user_id: Optional[str] = None) -> PipelineOutcome:
        """
        Run the pipeline once for a request.

        Args:
            request: Validated negotiation request
            user_id: Identity used to persist an accepted plan (None skips persistence)

        Returns:
            PipelineOutcome in ACCEPTED, REJECTED or FAILED state. Never raises for
            ConfigurationError/UpstreamError/ParseError/SchemaError.
        """
        transitions = [PipelineState.AWAITING_INPUT]
        seller_analysis = SELLER_ANALYSIS_PLACEHOLDER

        if request.has_seller_description:
            transitions.append(PipelineState.VIBE_ANALYSIS_PENDING)
            seller_analysis = (await self._summarize_seller(request.seller_description)).summary

        transitions.append(PipelineState.PLAN_GENERATION_PENDING)

        try:
            messages = render_negotiation_messages(request, seller_analysis)
            result = await self.provider.generate(
                messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                json_mode=self.structured_output,
            )
            transitions.append(PipelineState.PARSED)
            plan = parse_plan(result.text, structured=self.structured_output)

        except PipelineError as e:
            logger.error(f"Negotiation pipeline failed for item {request.item_name!r}: {e.code}: {e.message}")
            transitions.append(PipelineState.FAILED)
            return PipelineOutcome(
                state=PipelineState.FAILED,
                error=GENERIC_FAILURE_MESSAGE,
                seller_analysis=seller_analysis,
                transitions=transitions,
            )

        if not plan.is_valid:
            logger.info(f"Item rejected by validation stage: {request.item_name!r}")
            transitions.append(PipelineState.REJECTED)
            return PipelineOutcome(
                state=PipelineState.REJECTED,
                reason=plan.reason,
                seller_analysis=seller_analysis,
                transitions=transitions,
            )

        logger.info(f"Negotiation plan accepted for item {request.item_name!r} ({len(plan.scripts)} scripts)")
        transitions.append(PipelineState.ACCEPTED)
        self._persist(user_id, request, plan)
        return PipelineOutcome(
            state=PipelineState.ACCEPTED,
            plan=plan,
            seller_analysis=seller_analysis,
            transitions=transitions,
        )

    async def _summarize_seller(self, description: str) -> SellerVibeAnalysis:
        """One-sentence seller tone summary; degrades to the placeholder on failure."""
        try:
            result = await self.provider.generate(
                render_seller_summary_prompt(description),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                json_mode=False,
            )
        except UpstreamError as e:
            logger.warning(f"Seller vibe analysis failed, continuing without it: {e}")
            return SellerVibeAnalysis(summary=SELLER_ANALYSIS_PLACEHOLDER)

        summary = " ".join(result.text.split()).strip('"\'')
        if not summary:
            logger.warning("Seller vibe analysis returned empty text, continuing without it")
            return SellerVibeAnalysis(summary=SELLER_ANALYSIS_PLACEHOLDER)
        return SellerVibeAnalysis(summary=summary)

    def _persist(self, user_id: Optional[str], request: NegotiationRequest, plan: NegotiationPlan):
        """Write an accepted plan; store failures are logged, never surfaced."""
        if self.plan_store is None or not user_id:
            return
        try:
            self.plan_store.save(user_id, request, plan)
        except Exception as e:
            logger.error(f"Failed to persist negotiation plan for user {user_id}: {e}", exc_info=True)

    async def analyze_seller_vibe(self, description: str) -> VibeAnalysis:
        """
        Live seller-vibe analysis, independent of the plan pipeline.

        Raises:
            UpstreamError, ParseError, SchemaError
        """
        result = await self.provider.generate(
            render_vibe_analysis_prompt(description),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=False,
        )
        return parse_vibe_analysis(result.text)

    async def chat(self, history: list[ChatTurn], image: Optional[MediaAttachment] = None) -> str:
        """
        Co-pilot chat reply.

        Raises:
            UpstreamError
        """
        result = await self.provider.generate(
            render_chat_messages(history, image),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=False,
        )
        return result.text.strip()
