"""Transaction request/response schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from home_budget.schemas.common import PaginationMeta


class TransactionCreate(BaseModel):
    """Manual transaction entry.

    Without ``category_id`` the transaction goes through the categorization
    resolver before it is stored.
    """

    description: str = Field(min_length=1, max_length=1000)
    amount: Decimal
    transaction_date: date
    currency: str | None = Field(None, min_length=3, max_length=3)
    counterparty_name: str | None = Field(None, max_length=255)
    counterparty_account: str | None = Field(None, max_length=64)
    category_id: UUID | None = None
    is_income: bool = False


class TransactionUpdate(BaseModel):
    """Partial update of a stored transaction."""

    category_id: UUID | None = None
    is_ignored: bool | None = None
    display_name: str | None = Field(None, max_length=255)
    description: str | None = None
    create_rule: bool = Field(
        False, description="Learn a rule for this counterparty account"
    )
    apply_rule_to_existing: bool = Field(
        False, description="Recategorize past transactions of this counterparty"
    )


class TransactionResponse(BaseModel):
    id: UUID
    external_id: str | None
    raw_description: str | None
    amount: float
    currency: str
    transaction_date: date
    booking_date: date | None
    display_name: str | None
    description: str | None
    counterparty_account: str | None
    counterparty_name: str | None
    category_id: UUID | None
    category_source: Literal["rule", "ai", "user"] | None
    merchant_key: str | None
    is_manual: bool
    is_income: bool
    is_ignored: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionUpdateResult(BaseModel):
    transaction: TransactionResponse
    rule_created: bool = False
    updated_transactions_count: int = Field(
        0, description="Transactions recategorized by the new rule"
    )


class TransactionListResult(BaseModel):
    transactions: list[TransactionResponse]
    pagination: PaginationMeta


class TransactionClearResult(BaseModel):
    deleted_count: int
