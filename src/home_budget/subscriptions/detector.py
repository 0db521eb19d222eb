"""Recurring payment (subscription) detection.

Pure functions over an expense window: no I/O, ``today`` is always passed
in. Amounts are kept as ``Decimal`` and never rounded here; rounding to
cents happens where results leave the API.
"""

from __future__ import annotations

import statistics
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from uuid import UUID

from dateutil.relativedelta import relativedelta

MIN_OCCURRENCES = 3
MIN_CONFIDENCE = 0.5
AMOUNT_TOLERANCE = Decimal("0.05")

# Merchants that are almost always subscriptions.
KNOWN_SUBSCRIPTIONS: frozenset[str] = frozenset(
    {
        "netflix",
        "spotify",
        "youtube",
        "hbo",
        "disney",
        "amazon prime",
        "apple",
        "google",
        "microsoft",
        "adobe",
        "dropbox",
        "notion",
        "figma",
        "github",
        "linkedin",
        "tidal",
        "audible",
        "medium",
        "patreon",
        "chatgpt",
        "openai",
        "anthropic",
    }
)

# Category names that mark a payee as a subscription ("Subskrypcje" included).
SUBSCRIPTION_CATEGORY_MARKERS = ("subscription", "subskrypcj")


class Frequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


# Average interval (days, inclusive bounds) that maps to each cadence.
_INTERVAL_WINDOWS: list[tuple[Frequency, float, float]] = [
    (Frequency.WEEKLY, 6, 8),
    (Frequency.MONTHLY, 28, 35),
    (Frequency.QUARTERLY, 85, 100),
    (Frequency.ANNUAL, 350, 380),
]

_STEP: dict[Frequency, relativedelta] = {
    Frequency.WEEKLY: relativedelta(days=7),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.QUARTERLY: relativedelta(months=3),
    Frequency.ANNUAL: relativedelta(years=1),
}

# Multiplier that turns one payment into a monthly figure.
_MONTHLY_FACTOR: dict[Frequency, Decimal] = {
    Frequency.WEEKLY: Decimal("4.33"),
    Frequency.MONTHLY: Decimal("1"),
    Frequency.QUARTERLY: Decimal("1") / Decimal("3"),
    Frequency.ANNUAL: Decimal("1") / Decimal("12"),
}


@dataclass
class DetectedSubscription:
    merchant_key: str
    merchant_name: str
    frequency: Frequency
    amount: Decimal
    confidence: float
    last_payment: date
    next_payment: date
    transaction_count: int
    occurrence_dates: list[date] = field(default_factory=list)
    category_id: UUID | None = None
    category_name: str | None = None
    category_color: str | None = None

    @property
    def monthly_amount(self) -> Decimal:
        """Amount normalized to one month of this cadence."""
        return self.amount * _MONTHLY_FACTOR[self.frequency]


@dataclass
class UpcomingPayment:
    date: date
    merchant_name: str
    amount: Decimal


@dataclass
class _Group:
    merchant_key: str
    merchant_name: str
    category_id: UUID | None
    category_name: str | None
    category_color: str | None
    transactions: list = field(default_factory=list)


def grouping_key(txn) -> str:
    """Merchant grouping key of a transaction."""
    return (
        getattr(txn, "merchant_key", None)
        or txn.counterparty_name
        or txn.raw_description
        or "unknown"
    )


def merchant_name(txn) -> str:
    return txn.counterparty_name or txn.display_name or txn.raw_description or "Unknown"


def detect_frequency(avg_interval: float) -> Frequency | None:
    for frequency, low, high in _INTERVAL_WINDOWS:
        if low <= avg_interval <= high:
            return frequency
    return None


def coefficient_of_variation(values: list[float]) -> float:
    """Population standard deviation over mean (0 for fewer than 2 values)."""
    if len(values) < 2:
        return 0.0
    mean = statistics.fmean(values)
    if mean == 0:
        return 0.0
    return statistics.pstdev(values) / mean


def is_amount_consistent(amounts: list[Decimal]) -> bool:
    """Every amount within 5% of the mean."""
    if len(amounts) < 2:
        return True
    mean = sum(amounts, Decimal(0)) / len(amounts)
    if mean == 0:
        return all(a == 0 for a in amounts)
    return all(abs(a - mean) / mean <= AMOUNT_TOLERANCE for a in amounts)


def is_known_subscription(name: str) -> bool:
    normalized = name.lower()
    return any(known in normalized for known in KNOWN_SUBSCRIPTIONS)


def predict_next_payment(last_payment: date, frequency: Frequency) -> date:
    """Last payment plus one cadence step (calendar months for monthly+)."""
    return last_payment + _STEP[frequency]


def _score(group: _Group, amounts: list[Decimal], intervals: list[int]) -> float:
    confidence = 0.0

    if is_amount_consistent(amounts):
        confidence += 0.3

    interval_cv = coefficient_of_variation([float(i) for i in intervals])
    if interval_cv < 0.15:
        confidence += 0.3
    elif interval_cv < 0.25:
        confidence += 0.15

    if is_known_subscription(group.merchant_name):
        confidence += 0.2

    category = (group.category_name or "").lower()
    if any(marker in category for marker in SUBSCRIPTION_CATEGORY_MARKERS):
        confidence += 0.2

    confidence += min(0.1, len(group.transactions) * 0.02)
    return confidence


def _group_expenses(transactions: Iterable) -> dict[str, _Group]:
    groups: dict[str, _Group] = {}
    for txn in transactions:
        if txn.is_income or txn.is_ignored:
            continue

        key = grouping_key(txn)
        group = groups.get(key)
        if group is None:
            category = getattr(txn, "category", None)
            group = _Group(
                merchant_key=key,
                merchant_name=merchant_name(txn),
                category_id=txn.category_id,
                category_name=category.name if category is not None else None,
                category_color=category.color if category is not None else None,
            )
            groups[key] = group
        group.transactions.append(txn)
    return groups


def detect_subscriptions(transactions: Iterable, today: date) -> list[DetectedSubscription]:
    """Find recurring payments in an expense window.

    Args:
        transactions: Transactions of the lookback window (any order);
            income and ignored rows are skipped
        today: Reference date used to order the result

    Returns:
        Detected subscriptions, soonest next payment first
    """
    detected: list[DetectedSubscription] = []

    for group in _group_expenses(transactions).values():
        if len(group.transactions) < MIN_OCCURRENCES:
            continue

        ordered = sorted(group.transactions, key=lambda t: t.transaction_date)
        dates = [t.transaction_date for t in ordered]
        intervals = [(b - a).days for a, b in zip(dates, dates[1:])]

        frequency = detect_frequency(statistics.fmean(intervals))
        if frequency is None:
            continue

        amounts = [abs(Decimal(str(t.amount))) for t in ordered]
        confidence = _score(group, amounts, intervals)
        if confidence < MIN_CONFIDENCE:
            continue

        last_payment = dates[-1]
        detected.append(
            DetectedSubscription(
                merchant_key=group.merchant_key,
                merchant_name=group.merchant_name,
                frequency=frequency,
                amount=sum(amounts, Decimal(0)) / len(amounts),
                confidence=round(min(confidence, 1.0), 2),
                last_payment=last_payment,
                next_payment=predict_next_payment(last_payment, frequency),
                transaction_count=len(ordered),
                occurrence_dates=dates,
                category_id=group.category_id,
                category_name=group.category_name,
                category_color=group.category_color,
            )
        )

    detected.sort(key=lambda s: ((s.next_payment - today).days, s.merchant_name))
    return detected


def calculate_monthly_total(subscriptions: Iterable[DetectedSubscription]) -> Decimal:
    """Sum of cadence-normalized monthly amounts (unrounded)."""
    return sum((s.monthly_amount for s in subscriptions), Decimal(0))


def get_upcoming_payments(
    subscriptions: Iterable[DetectedSubscription],
    today: date,
    days_ahead: int = 30,
) -> list[UpcomingPayment]:
    """Projected payments due within ``days_ahead`` days of ``today``.

    A projection already in the past (an overdue charge) is still listed.
    """
    upcoming = [
        UpcomingPayment(date=s.next_payment, merchant_name=s.merchant_name, amount=s.amount)
        for s in subscriptions
        if (s.next_payment - today) <= timedelta(days=days_ahead)
    ]
    upcoming.sort(key=lambda p: p.date)
    return upcoming
