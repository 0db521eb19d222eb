"""Recurring payment detection endpoint."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.api.deps import get_db, get_settings_cache, get_subscription_service
from home_budget.schemas.subscription import SubscriptionReport
from home_budget.services.app_settings import SettingsCache
from home_budget.services.subscription import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get(
    "",
    response_model=SubscriptionReport,
    summary="Detected subscriptions",
    description="""
    Recurring payments detected over the last 12 financial months.

    Returns each subscription with its cadence and next expected payment,
    the total normalized to one month, and the payments due within
    **days_ahead** days (overdue ones included).
    """,
)
async def get_subscriptions(
    days_ahead: Annotated[
        int | None, Query(ge=1, le=365, description="Upcoming payments horizon in days")
    ] = None,
    db: AsyncSession = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionReport:
    start_day = await cache.financial_month_start_day(db)
    return await service.report(
        date.today(), financial_start_day=start_day, days_ahead=days_ahead
    )
