"""Audit trail of LLM categorization calls."""
from uuid import UUID

from sqlalchemy import Float, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from home_budget.models.base import BaseModel


class AiCategorizationLog(BaseModel):
    """One row per classifier call: prompt and raw reply, verbatim."""

    __tablename__ = "ai_categorization_log"

    # Plain columns (no FKs): log rows outlive the transactions and
    # categories they mention.
    transaction_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    response: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)

    def __repr__(self) -> str:
        return f"<AiCategorizationLog(id={self.id}, category_id={self.category_id})>"
