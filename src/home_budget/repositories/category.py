"""Category repository."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.models.category import Category
from home_budget.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for the category catalog."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def list_ordered(self) -> list[Category]:
        """Full catalog ordered by name (the order shown to the classifier)."""
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())
