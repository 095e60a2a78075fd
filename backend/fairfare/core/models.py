"""
ORM models for negotiation history.

WHAT: SQLAlchemy model for accepted negotiation plans
WHY: Users revisit past advice; only accepted outcomes are kept
HOW: Declarative model with a JSON column holding the plan payload
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, JSON, Numeric, String, Text

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NegotiationRecord(Base):
    """
    Negotiations table - one row per accepted plan.

    WHAT: Request fields plus the generated plan
    WHY: History view keyed by user identity
    HOW: UUID primary key, user_id index, ai_response as JSON
    """
    __tablename__ = "negotiations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    item_name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=True)
    location = Column(String(200), nullable=False)
    initial_price = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(10), nullable=False)
    vibe = Column(String(20), nullable=False)
    seller_description = Column(Text, nullable=True)
    ai_response = Column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_negotiations_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<NegotiationRecord(id={self.id}, user={self.user_id}, item={self.item_name})>"
