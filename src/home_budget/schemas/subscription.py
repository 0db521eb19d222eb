"""Subscription report schemas."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field


class SubscriptionResponse(BaseModel):
    merchant_key: str
    merchant_name: str
    frequency: str
    amount: float
    monthly_amount: float
    confidence: float
    last_payment: date
    next_payment: date
    transaction_count: int
    category_id: UUID | None = None
    category_name: str | None = None
    category_color: str | None = None


class UpcomingPaymentResponse(BaseModel):
    date: date
    merchant_name: str
    amount: float


class SubscriptionReportMeta(BaseModel):
    is_financial_month: bool
    financial_start_day: int
    period_start: date
    period_end: date


class SubscriptionReport(BaseModel):
    subscriptions: list[SubscriptionResponse]
    total_monthly: float = Field(description="Monthly recurring spend, rounded to cents")
    upcoming_payments: list[UpcomingPaymentResponse]
    meta: SubscriptionReportMeta
