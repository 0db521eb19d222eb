"""Transaction endpoints: listing, manual entry, edits and deletes."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.api.deps import get_db, get_settings_cache, get_transaction_service
from home_budget.repositories.transaction import TransactionRepository
from home_budget.schemas.common import PaginationMeta
from home_budget.schemas.transaction import (
    TransactionClearResult,
    TransactionCreate,
    TransactionListResult,
    TransactionResponse,
    TransactionUpdate,
    TransactionUpdateResult,
)
from home_budget.services.app_settings import SettingsCache
from home_budget.services.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions with filters",
    description="""
    Query transactions with filtering options.

    ## Filters
    - **start_date**, **end_date**: Date range filter (inclusive)
    - **category_id**: Filter by category
    - **uncategorized**: Only transactions without a category
    - **is_income**, **is_ignored**: Flag filters
    - **search**: Case-insensitive match on name, description and counterparty

    Results are sorted newest first and paginated.
    """,
)
async def list_transactions(
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[int, Query(ge=1, le=200, description="Items per page (1-200)")] = 50,
    start_date: Annotated[date | None, Query(description="Filter from date (inclusive)")] = None,
    end_date: Annotated[date | None, Query(description="Filter to date (inclusive)")] = None,
    category_id: Annotated[UUID | None, Query(description="Filter by category ID")] = None,
    uncategorized: Annotated[bool, Query(description="Only uncategorized")] = False,
    is_income: Annotated[bool | None, Query(description="Filter income/expenses")] = None,
    is_ignored: Annotated[bool | None, Query(description="Filter ignored transfers")] = None,
    search: Annotated[str | None, Query(description="Search text")] = None,
    db: AsyncSession = Depends(get_db),
) -> TransactionListResult:
    transactions, total = await TransactionRepository(db).search(
        skip=(page - 1) * limit,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        uncategorized=uncategorized,
        is_income=is_income,
        is_ignored=is_ignored,
        search=search,
    )

    total_pages = (total + limit - 1) // limit if total > 0 else 0

    return TransactionListResult(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        pagination=PaginationMeta(page=page, limit=limit, total=total, total_pages=total_pages),
    )


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a manual transaction",
    description="""
    Store a manually entered transaction.

    With **category_id** the category is stored as chosen by the user.
    Without it the transaction is categorized first (learned rule, then the
    AI classifier). Transfers to the household's own accounts
    (`ignored_ibans` setting) are stored as ignored.
    """,
)
async def create_transaction(
    payload: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    service: TransactionService = Depends(get_transaction_service),
    cache: SettingsCache = Depends(get_settings_cache),
) -> TransactionResponse:
    own_ibans = await cache.ignored_ibans(db)
    txn = await service.create_manual(payload, own_ibans=own_ibans)
    return TransactionResponse.model_validate(txn)


@router.put(
    "/{transaction_id}",
    response_model=TransactionUpdateResult,
    summary="Edit a transaction",
    description="""
    Update category, ignored flag, display name or description.

    With **create_rule** a changed category is learned for the transaction's
    counterparty account; **apply_rule_to_existing** also moves every past
    transaction of that account to the new category.
    """,
)
async def update_transaction(
    transaction_id: UUID,
    payload: TransactionUpdate,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionUpdateResult:
    txn, rule_created, updated = await service.update(transaction_id, payload)
    return TransactionUpdateResult(
        transaction=TransactionResponse.model_validate(txn),
        rule_created=rule_created,
        updated_transactions_count=updated,
    )


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: UUID,
    service: TransactionService = Depends(get_transaction_service),
) -> None:
    await service.delete(transaction_id)


@router.delete(
    "",
    response_model=TransactionClearResult,
    summary="Delete all transactions",
)
async def clear_transactions(
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionClearResult:
    deleted = await service.clear_all()
    return TransactionClearResult(deleted_count=deleted)
