"""Base repository shared by the budget tables."""
from typing import Any, Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Lookup, insert, patch and delete by primary key.

    Writes commit by default. Pass ``commit=False`` to only flush, so the
    caller can group several writes into one database transaction.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model
        self._columns = frozenset(c.key for c in inspect(model).column_attrs)

    async def get_by_id(self, id: UUID) -> T | None:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def create(self, obj: T, commit: bool = True) -> T:
        self.db.add(obj)
        await self._finish(obj, commit)
        return obj

    async def update(self, id: UUID, data: dict[str, Any], commit: bool = True) -> T | None:
        """Patch mapped columns of a row; unknown keys are ignored.

        Returns:
            The updated row, or None when the id does not exist
        """
        obj = await self.get_by_id(id)
        if obj is None:
            return None

        for key, value in data.items():
            if key in self._columns and key != "id":
                setattr(obj, key, value)

        await self._finish(obj, commit)
        return obj

    async def delete(self, id: UUID) -> bool:
        """Delete a row. Database-level cascades handle dependent rows."""
        obj = await self.get_by_id(id)
        if obj is None:
            return False

        await self.db.delete(obj)
        await self.db.commit()
        return True

    async def _finish(self, obj: T, commit: bool) -> None:
        if commit:
            await self.db.commit()
            await self.db.refresh(obj)
        else:
            await self.db.flush()
