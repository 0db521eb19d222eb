"""Recurring payment detection."""

from .detector import (
    DetectedSubscription,
    Frequency,
    UpcomingPayment,
    calculate_monthly_total,
    detect_subscriptions,
    get_upcoming_payments,
)

__all__ = [
    "DetectedSubscription",
    "Frequency",
    "UpcomingPayment",
    "calculate_monthly_total",
    "detect_subscriptions",
    "get_upcoming_payments",
]
