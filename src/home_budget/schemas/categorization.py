"""Categorization request/response schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from home_budget.schemas.common import PaginationMeta


class CategorizeRequest(BaseModel):
    description: str = Field(min_length=1, max_length=1000)
    amount: Decimal
    date: date
    counterparty_name: str | None = None
    counterparty_account: str | None = None


class CategorizeResponse(BaseModel):
    category_id: UUID
    category_source: Literal["rule", "ai"]
    display_name: str
    description: str
    confidence: float | None = None


class BatchCategorizeRequest(BaseModel):
    limit: int | None = Field(None, ge=1, le=500)
    offset: int = Field(0, ge=0)


class BatchCategorizeResult(BaseModel):
    success: bool = True
    message: str | None = None
    categorized: int
    errors: int = 0
    remaining: int
    has_more: bool = False
    next_offset: int | None = None


class BatchStatus(BaseModel):
    uncategorized: int
    categorized: int
    total: int


class RulePromoteRequest(BaseModel):
    counterparty_account: str = Field(min_length=1, max_length=64)
    category_id: UUID


class RulePromoteResult(BaseModel):
    rule_id: UUID
    counterparty_account: str
    category_id: UUID
    updated_transactions_count: int = Field(
        description="Existing transactions moved to the rule's category"
    )


class CategorizationRuleResponse(BaseModel):
    id: UUID
    counterparty_account: str
    category_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategorizationRuleListResult(BaseModel):
    rules: list[CategorizationRuleResponse]
    pagination: PaginationMeta
