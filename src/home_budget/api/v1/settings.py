"""Household settings endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from home_budget.api.deps import get_app_settings_service
from home_budget.schemas.settings import SettingUpdateRequest, SettingUpdateResult
from home_budget.services.app_settings import AppSettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", summary="All settings")
async def get_settings(
    service: AppSettingsService = Depends(get_app_settings_service),
) -> dict[str, Any]:
    return await service.get_all()


@router.put(
    "",
    response_model=SettingUpdateResult,
    summary="Set one setting",
    description="""
    Create or overwrite one setting.

    Known keys are validated: `financial_month_start_day` must be 1-31 and
    `ignored_ibans` a list of account numbers.
    """,
)
async def put_setting(
    payload: SettingUpdateRequest,
    service: AppSettingsService = Depends(get_app_settings_service),
) -> SettingUpdateResult:
    value = await service.set_value(payload.key, payload.value)
    return SettingUpdateResult(key=payload.key, value=value)
