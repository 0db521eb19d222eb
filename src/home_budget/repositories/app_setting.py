"""Repository for key/value application settings."""
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.models.app_setting import AppSetting
from home_budget.repositories.base import BaseRepository


class AppSettingRepository(BaseRepository[AppSetting]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, AppSetting)

    async def get_all_values(self) -> dict[str, Any]:
        """All settings as a ``{key: value}`` dict."""
        result = await self.db.execute(select(AppSetting))
        return {row.key: row.value for row in result.scalars().all()}

    async def upsert(self, key: str, value: Any) -> AppSetting:
        """Insert or overwrite a setting (conflict on ``key``)."""
        result = await self.db.execute(select(AppSetting).where(AppSetting.key == key))
        setting = result.scalar_one_or_none()
        if setting:
            setting.value = value
        else:
            setting = AppSetting(key=key, value=value)
            self.db.add(setting)

        await self.db.commit()
        await self.db.refresh(setting)
        return setting
