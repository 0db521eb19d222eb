"""Categorization rule repository."""
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.models.categorization_rule import CategorizationRule
from home_budget.repositories.base import BaseRepository


class CategorizationRuleRepository(BaseRepository[CategorizationRule]):
    """Repository for counterparty account rules.

    ``counterparty_account`` arguments are expected to be normalized already
    (see ``home_budget.categorization.keys.normalize_account``).
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, CategorizationRule)

    async def get_by_account(self, counterparty_account: str) -> CategorizationRule | None:
        """Exact-match lookup on the counterparty account."""
        result = await self.db.execute(
            select(CategorizationRule).where(
                CategorizationRule.counterparty_account == counterparty_account
            )
        )
        return result.scalar_one_or_none()

    async def list_ordered(self, skip: int = 0, limit: int = 100) -> list[CategorizationRule]:
        result = await self.db.execute(
            select(CategorizationRule)
            .order_by(CategorizationRule.updated_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(CategorizationRule.id)))
        return int(result.scalar() or 0)

    async def upsert(self, counterparty_account: str, category_id: UUID) -> CategorizationRule:
        """Insert or overwrite the rule for an account (last write wins).

        Only flushes; the caller owns the commit so the upsert can share a
        database transaction with follow-up writes.
        """
        rule = await self.get_by_account(counterparty_account)
        if rule:
            rule.category_id = category_id
        else:
            rule = CategorizationRule(
                counterparty_account=counterparty_account,
                category_id=category_id,
            )
            self.db.add(rule)

        await self.db.flush()
        return rule
