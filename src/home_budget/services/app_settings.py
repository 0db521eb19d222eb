"""Household settings stored in ``app_settings`` and their cache.

``SettingsCache`` holds the last values read from the database. Values stay
valid until ``refresh()`` is called or the process restarts; writes through
``AppSettingsService.set_value`` refresh it. The cache belongs to the API
layer: core logic receives plain values and never reads it.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.core.exceptions import InvalidSettingError
from home_budget.repositories.app_setting import AppSettingRepository

logger = logging.getLogger(__name__)

FINANCIAL_MONTH_START_DAY = "financial_month_start_day"
IGNORED_IBANS = "ignored_ibans"

DEFAULT_FINANCIAL_MONTH_START_DAY = 1


def parse_financial_start_day(value: Any) -> int:
    """Stored start day as an int in 1..31, or the default when invalid."""
    try:
        day = int(value)
    except (TypeError, ValueError):
        return DEFAULT_FINANCIAL_MONTH_START_DAY
    if day < 1 or day > 31:
        return DEFAULT_FINANCIAL_MONTH_START_DAY
    return day


def parse_ignored_ibans(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v]


def validate_setting(key: str, value: Any) -> Any:
    """Reject values of known keys that can't be used.

    Raises:
        InvalidSettingError: Value out of range or of the wrong type
    """
    if key == FINANCIAL_MONTH_START_DAY:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise InvalidSettingError(details={"key": key})
        try:
            day = int(value)
        except ValueError:
            raise InvalidSettingError(details={"key": key})
        if day < 1 or day > 31:
            raise InvalidSettingError(details={"key": key})
        return day
    if key == IGNORED_IBANS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise InvalidSettingError(details={"key": key})
        return value
    return value


class SettingsCache:
    """Explicit in-process cache of ``app_settings``."""

    def __init__(self):
        self._values: dict[str, Any] | None = None

    async def get_all(self, db: AsyncSession) -> dict[str, Any]:
        if self._values is None:
            await self.refresh(db)
        return dict(self._values)

    async def refresh(self, db: AsyncSession) -> None:
        """Re-read every setting from the database."""
        self._values = await AppSettingRepository(db).get_all_values()
        logger.debug("Settings cache refreshed", extra={"keys": sorted(self._values)})

    async def financial_month_start_day(self, db: AsyncSession) -> int:
        values = await self.get_all(db)
        return parse_financial_start_day(
            values.get(FINANCIAL_MONTH_START_DAY, DEFAULT_FINANCIAL_MONTH_START_DAY)
        )

    async def ignored_ibans(self, db: AsyncSession) -> list[str]:
        values = await self.get_all(db)
        return parse_ignored_ibans(values.get(IGNORED_IBANS))


class AppSettingsService:
    def __init__(self, db: AsyncSession, cache: SettingsCache):
        self.db = db
        self.cache = cache
        self.repo = AppSettingRepository(db)

    async def get_all(self) -> dict[str, Any]:
        return await self.cache.get_all(self.db)

    async def set_value(self, key: str, value: Any) -> Any:
        value = validate_setting(key, value)
        setting = await self.repo.upsert(key, value)
        await self.cache.refresh(self.db)
        logger.info("Setting updated", extra={"key": key})
        return setting.value
