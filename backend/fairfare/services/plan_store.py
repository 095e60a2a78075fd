"""
Plan persistence.

WHAT: Write-only store for accepted negotiation plans
WHY: History is kept per user; the pipeline never reads it back
HOW: PlanStore protocol plus a SQLAlchemy implementation
"""

from typing import Protocol

from sqlalchemy.orm import sessionmaker

from ..core.database import session_scope
from ..core.models import NegotiationRecord
from ..models.negotiation import NegotiationPlan, NegotiationRequest
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PlanStore(Protocol):
    """Persistence collaborator for accepted plans."""

    def save(self, user_id: str, request: NegotiationRequest, plan: NegotiationPlan) -> str:
        """Persist an accepted plan and return its record id."""
        ...


class SqlPlanStore:
    """PlanStore backed by the negotiations table."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, user_id: str, request: NegotiationRequest, plan: NegotiationPlan) -> str:
        if not plan.is_valid:
            raise ValueError("Only accepted plans are persisted")

        record = NegotiationRecord(
            user_id=user_id,
            item_name=request.item_name,
            category=request.category,
            location=request.location,
            initial_price=request.price,
            currency=request.currency,
            vibe=request.vibe.value,
            seller_description=request.seller_description,
            ai_response=plan.plan_payload(),
        )

        with session_scope(self.session_factory) as db:
            db.add(record)
            db.flush()
            record_id = record.id

        logger.info(f"Saved negotiation plan {record_id} for user {user_id}")
        return record_id
