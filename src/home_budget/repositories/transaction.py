"""Transaction repository with categorization and subscription queries."""
from datetime import date
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.models.transaction import Transaction
from home_budget.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def search(
        self,
        skip: int = 0,
        limit: int = 50,
        start_date: date | None = None,
        end_date: date | None = None,
        category_id: UUID | None = None,
        uncategorized: bool = False,
        is_income: bool | None = None,
        is_ignored: bool | None = None,
        search: str | None = None,
    ) -> tuple[list[Transaction], int]:
        """Filtered page of transactions (newest first) and the total match count."""
        query = select(Transaction)

        if start_date:
            query = query.where(Transaction.transaction_date >= start_date)
        if end_date:
            query = query.where(Transaction.transaction_date <= end_date)
        if uncategorized:
            query = query.where(Transaction.category_id.is_(None))
        elif category_id:
            query = query.where(Transaction.category_id == category_id)
        if is_income is not None:
            query = query.where(Transaction.is_income == is_income)
        if is_ignored is not None:
            query = query.where(Transaction.is_ignored == is_ignored)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Transaction.display_name.ilike(pattern),
                    Transaction.raw_description.ilike(pattern),
                    Transaction.counterparty_name.ilike(pattern),
                )
            )

        total_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = int(total_result.scalar() or 0)

        result = await self.db.execute(
            query.order_by(Transaction.transaction_date.desc(), Transaction.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def get_uncategorized(self, skip: int = 0, limit: int = 100) -> list[Transaction]:
        """Uncategorized transactions, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.category_id.is_(None))
            .order_by(Transaction.transaction_date.desc(), Transaction.id)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_uncategorized(self) -> int:
        result = await self.db.execute(
            select(func.count(Transaction.id)).where(Transaction.category_id.is_(None))
        )
        return int(result.scalar() or 0)

    async def count_all(self) -> int:
        result = await self.db.execute(select(func.count(Transaction.id)))
        return int(result.scalar() or 0)

    async def get_expenses_since(self, start_date: date) -> list[Transaction]:
        """Expense window for subscription detection, newest first.

        Income and ignored transactions are excluded.
        """
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.transaction_date >= start_date,
                Transaction.is_income == False,
                Transaction.is_ignored == False,
            )
            .order_by(Transaction.transaction_date.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def recategorize_by_account(
        self, counterparty_account: str, category_id: UUID
    ) -> int:
        """Point every transaction of a counterparty at a category (source ``rule``).

        Does not commit. Running it twice yields the same rows, so a failed
        promotion can be repaired by re-running it.

        Returns:
            Number of rows updated
        """
        upd = await self.db.execute(
            update(Transaction)
            .where(Transaction.counterparty_account == counterparty_account)
            .values(category_id=category_id, category_source="rule")
        )
        return int(upd.rowcount or 0)

    async def delete_all(self) -> int:
        """Remove every transaction (bulk clear). Returns the number deleted."""
        result = await self.db.execute(delete(Transaction))
        await self.db.commit()
        return int(result.rowcount or 0)
