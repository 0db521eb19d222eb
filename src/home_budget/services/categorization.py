"""Categorization workflows built on ``CategorizationResolver``.

- single transaction: errors propagate to the caller
- batch backfill: transactions are processed one at a time; a failure is
  logged and counted and the batch moves on
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.categorization.classifier import Classifier
from home_budget.categorization.resolver import (
    CategorizationInput,
    CategorizationResolver,
    CategorizationResult,
    PromotionResult,
)
from home_budget.config import settings
from home_budget.core.exceptions import BudgetError
from home_budget.repositories.transaction import TransactionRepository
from home_budget.schemas.categorization import BatchCategorizeResult, BatchStatus

logger = logging.getLogger(__name__)


class CategorizationService:
    """Single, batch and rule-promotion categorization."""

    def __init__(self, db: AsyncSession, classifier: Classifier):
        self.db = db
        self.resolver = CategorizationResolver(db, classifier)
        self.transaction_repo = TransactionRepository(db)

    async def categorize(self, txn: CategorizationInput) -> CategorizationResult:
        """Categorize one transaction without storing anything but the audit row."""
        result = await self.resolver.resolve(txn)
        await self.db.commit()
        return result

    async def categorize_batch(
        self, limit: int | None = None, offset: int = 0
    ) -> BatchCategorizeResult:
        """Categorize one page of uncategorized transactions.

        Each transaction is resolved and stored before the next one is
        started. ``remaining`` comes from a fresh count taken after the
        batch, so it is correct whatever happened inside it.
        """
        limit = limit or settings.batch_default_limit

        page = await self.transaction_repo.get_uncategorized(skip=offset, limit=limit)
        if not page:
            # Rows that failed earlier may still sit before this offset.
            remaining = await self.transaction_repo.count_uncategorized()
            return BatchCategorizeResult(
                message=(
                    "No uncategorized transactions at this offset"
                    if remaining
                    else "No uncategorized transactions found"
                ),
                categorized=0,
                remaining=remaining,
                has_more=remaining > 0,
                next_offset=0 if remaining else None,
            )

        # Plain values only: a failed item rolls the session back and expires
        # loaded instances.
        inputs = [
            CategorizationInput(
                raw_description=t.raw_description or "",
                amount=t.amount,
                transaction_date=t.transaction_date,
                counterparty_name=t.counterparty_name,
                counterparty_account=t.counterparty_account,
                transaction_id=t.id,
            )
            for t in page
        ]

        categorized = 0
        errors = 0
        for item in inputs:
            try:
                result = await self.resolver.resolve(item)
                await self.transaction_repo.update(
                    item.transaction_id,
                    {
                        "category_id": result.category_id,
                        "category_source": result.category_source,
                        "display_name": result.display_name,
                        "description": result.description,
                    },
                )
                categorized += 1
            except Exception as exc:
                await self.db.rollback()
                errors += 1
                error_code = exc.error_code if isinstance(exc, BudgetError) else None
                logger.error(
                    "Error categorizing transaction",
                    extra={
                        "transaction_id": str(item.transaction_id),
                        "error_type": type(exc).__name__,
                        "error_code": error_code,
                    },
                )

        remaining = await self.transaction_repo.count_uncategorized()
        logger.info(
            "Batch categorization finished",
            extra={"categorized": categorized, "errors": errors, "remaining": remaining},
        )

        return BatchCategorizeResult(
            categorized=categorized,
            errors=errors,
            remaining=remaining,
            has_more=remaining > 0,
            # Categorized rows drop out of the uncategorized set; only the
            # failed ones are still ahead of the next page.
            next_offset=offset + errors,
        )

    async def batch_status(self) -> BatchStatus:
        uncategorized = await self.transaction_repo.count_uncategorized()
        total = await self.transaction_repo.count_all()
        return BatchStatus(
            uncategorized=uncategorized,
            categorized=total - uncategorized,
            total=total,
        )

    async def promote_rule(self, counterparty_account: str, category_id: UUID) -> PromotionResult:
        return await self.resolver.promote_rule(counterparty_account, category_id)
