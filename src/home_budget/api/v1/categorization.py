"""Categorization endpoints: single, batch and learned rules."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.api.deps import get_categorization_service, get_db
from home_budget.categorization.resolver import CategorizationInput
from home_budget.core.exceptions import RuleNotFoundError
from home_budget.repositories.categorization_rule import CategorizationRuleRepository
from home_budget.schemas.categorization import (
    BatchCategorizeRequest,
    BatchCategorizeResult,
    BatchStatus,
    CategorizationRuleListResult,
    CategorizationRuleResponse,
    CategorizeRequest,
    CategorizeResponse,
    RulePromoteRequest,
    RulePromoteResult,
)
from home_budget.schemas.common import PaginationMeta
from home_budget.services.categorization import CategorizationService

router = APIRouter(tags=["categorization"])


@router.post(
    "/categorize",
    response_model=CategorizeResponse,
    summary="Categorize one transaction",
    description="""
    Suggest a category for a transaction without storing it.

    A learned rule for **counterparty_account** wins; otherwise the AI
    classifier picks from the category catalog. Returns 409 (`CAT_001`) when
    no categories exist and 502 (`CAT_002`) when the classifier is down.
    """,
)
async def categorize(
    payload: CategorizeRequest,
    service: CategorizationService = Depends(get_categorization_service),
) -> CategorizeResponse:
    result = await service.categorize(
        CategorizationInput(
            raw_description=payload.description,
            amount=payload.amount,
            transaction_date=payload.date,
            counterparty_name=payload.counterparty_name,
            counterparty_account=payload.counterparty_account,
        )
    )
    return CategorizeResponse(
        category_id=result.category_id,
        category_source=result.category_source,
        display_name=result.display_name,
        description=result.description,
        confidence=result.confidence,
    )


@router.post(
    "/categorize/batch",
    response_model=BatchCategorizeResult,
    summary="Categorize a page of uncategorized transactions",
    description="""
    Categorize up to **limit** uncategorized transactions, newest first.

    Failures are counted in **errors** and skipped. Call again with
    **next_offset** while **has_more** is true.
    """,
)
async def categorize_batch(
    payload: BatchCategorizeRequest | None = None,
    service: CategorizationService = Depends(get_categorization_service),
) -> BatchCategorizeResult:
    payload = payload or BatchCategorizeRequest()
    return await service.categorize_batch(limit=payload.limit, offset=payload.offset)


@router.get(
    "/categorize/batch",
    response_model=BatchStatus,
    summary="Categorization progress",
)
async def batch_status(
    service: CategorizationService = Depends(get_categorization_service),
) -> BatchStatus:
    return await service.batch_status()


@router.get(
    "/categorization-rules",
    response_model=CategorizationRuleListResult,
    summary="List learned rules",
)
async def list_rules(
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[int, Query(ge=1, le=200, description="Items per page (1-200)")] = 50,
    db: AsyncSession = Depends(get_db),
) -> CategorizationRuleListResult:
    repo = CategorizationRuleRepository(db)
    rules = await repo.list_ordered(skip=(page - 1) * limit, limit=limit)
    total = await repo.count()
    total_pages = (total + limit - 1) // limit if total > 0 else 0
    return CategorizationRuleListResult(
        rules=[CategorizationRuleResponse.model_validate(r) for r in rules],
        pagination=PaginationMeta(page=page, limit=limit, total=total, total_pages=total_pages),
    )


@router.post(
    "/categorization-rules",
    response_model=RulePromoteResult,
    status_code=status.HTTP_201_CREATED,
    summary="Learn a rule for a counterparty account",
    description="""
    Create or overwrite the rule for **counterparty_account** and move every
    existing transaction of that account to **category_id**.
    """,
)
async def promote_rule(
    payload: RulePromoteRequest,
    service: CategorizationService = Depends(get_categorization_service),
) -> RulePromoteResult:
    result = await service.promote_rule(payload.counterparty_account, payload.category_id)
    return RulePromoteResult(
        rule_id=result.rule_id,
        counterparty_account=result.counterparty_account,
        category_id=result.category_id,
        updated_transactions_count=result.updated_transactions_count,
    )


@router.delete(
    "/categorization-rules/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a learned rule",
)
async def delete_rule(rule_id: UUID, db: AsyncSession = Depends(get_db)) -> None:
    """Delete a rule. Transactions it categorized keep their category."""
    if not await CategorizationRuleRepository(db).delete(rule_id):
        raise RuleNotFoundError(details={"rule_id": str(rule_id)})
