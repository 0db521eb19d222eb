"""Subscription report: loads the expense window and runs the detector."""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.config import settings
from home_budget.core.periods import financial_month_bounds, lookback_start
from home_budget.repositories.transaction import TransactionRepository
from home_budget.schemas.common import to_cents
from home_budget.schemas.subscription import (
    SubscriptionReport,
    SubscriptionReportMeta,
    SubscriptionResponse,
    UpcomingPaymentResponse,
)
from home_budget.subscriptions.detector import (
    calculate_monthly_total,
    detect_subscriptions,
    get_upcoming_payments,
)

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.transaction_repo = TransactionRepository(db)

    async def report(
        self,
        today: date,
        financial_start_day: int = 1,
        days_ahead: int | None = None,
    ) -> SubscriptionReport:
        """Detect subscriptions over the lookback window ending at ``today``.

        Args:
            today: Reference date ("now")
            financial_start_day: Day of month the financial month starts on
            days_ahead: Upcoming payments horizon (defaults to config)
        """
        days_ahead = settings.upcoming_payments_days if days_ahead is None else days_ahead
        period_start = lookback_start(
            today, settings.subscription_lookback_months, financial_start_day
        )
        _, period_end = financial_month_bounds(today, financial_start_day)

        transactions = await self.transaction_repo.get_expenses_since(period_start)
        subscriptions = detect_subscriptions(transactions, today)
        total_monthly = calculate_monthly_total(subscriptions)
        upcoming = get_upcoming_payments(subscriptions, today, days_ahead)

        logger.info(
            "Subscription report computed",
            extra={
                "transactions_scanned": len(transactions),
                "subscriptions": len(subscriptions),
            },
        )

        return SubscriptionReport(
            subscriptions=[
                SubscriptionResponse(
                    merchant_key=s.merchant_key,
                    merchant_name=s.merchant_name,
                    frequency=s.frequency.value,
                    amount=to_cents(s.amount),
                    monthly_amount=to_cents(s.monthly_amount),
                    confidence=s.confidence,
                    last_payment=s.last_payment,
                    next_payment=s.next_payment,
                    transaction_count=s.transaction_count,
                    category_id=s.category_id,
                    category_name=s.category_name,
                    category_color=s.category_color,
                )
                for s in subscriptions
            ],
            total_monthly=to_cents(total_monthly),
            upcoming_payments=[
                UpcomingPaymentResponse(
                    date=p.date, merchant_name=p.merchant_name, amount=to_cents(p.amount)
                )
                for p in upcoming
            ],
            meta=SubscriptionReportMeta(
                is_financial_month=financial_start_day != 1,
                financial_start_day=financial_start_day,
                period_start=period_start,
                period_end=period_end,
            ),
        )
