"""Transaction model representing a single bank account movement."""
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from home_budget.models.base import BaseModel

CATEGORY_SOURCES = ("rule", "ai", "user")


class Transaction(BaseModel):
    """Bank transaction (manual entry, bank import or backfill).

    Direction is carried by ``is_income``; ``amount`` may be stored signed.
    """

    __tablename__ = "transactions"

    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    raw_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="PLN", nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    booking_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    counterparty_account: Mapped[str | None] = mapped_column(String(64), nullable=True)
    counterparty_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    category_source: Mapped[str | None] = mapped_column(String(10), nullable=True)
    merchant_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_manual: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_income: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_ignored: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_transactions_counterparty_account", "counterparty_account"),
        Index("ix_transactions_merchant_key", "merchant_key"),
    )

    category: Mapped["Category"] = relationship("Category", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, date={self.transaction_date}, amount={self.amount})>"
        )
