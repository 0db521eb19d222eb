"""Learned counterparty account -> category rules."""
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from home_budget.models.base import BaseModel


class CategorizationRule(BaseModel):
    """Deterministic category for every transaction from one counterparty account.

    At most one rule exists per (normalized) counterparty account; writes are
    upserts and the last one wins.
    """

    __tablename__ = "categorization_rules"

    counterparty_account: Mapped[str] = mapped_column(String(64), nullable=False)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("counterparty_account", name="uq_categorization_rules_account"),
    )

    category: Mapped["Category"] = relationship(
        "Category", back_populates="rules", lazy="selectin"
    )

    def __repr__(self) -> str:
        return (
            f"<CategorizationRule(id={self.id}, "
            f"counterparty_account={self.counterparty_account}, category_id={self.category_id})>"
        )
