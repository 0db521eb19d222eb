"""Unit tests for recurring payment detection."""

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

from dateutil.relativedelta import relativedelta

from home_budget.subscriptions.detector import (
    DetectedSubscription,
    Frequency,
    calculate_monthly_total,
    coefficient_of_variation,
    detect_frequency,
    detect_subscriptions,
    get_upcoming_payments,
    is_amount_consistent,
    predict_next_payment,
)

TODAY = date(2024, 12, 20)


def make_txn(
    txn_date: date,
    amount: str,
    name: str = "Netflix",
    merchant_key: str | None = None,
    is_income: bool = False,
    is_ignored: bool = False,
    category=None,
):
    return SimpleNamespace(
        transaction_date=txn_date,
        amount=Decimal(amount),
        counterparty_name=name,
        display_name=name,
        raw_description=f"CARD PAYMENT {name.upper()}",
        merchant_key=merchant_key or name.upper(),
        is_income=is_income,
        is_ignored=is_ignored,
        category_id=getattr(category, "id", None),
        category=category,
    )


def monthly_series(count: int, amount: str = "29.99", name: str = "Netflix", start=date(2024, 1, 15)):
    return [make_txn(start + relativedelta(months=i), amount, name) for i in range(count)]


def make_sub(frequency: Frequency, amount: str, next_payment: date, name: str = "Sub"):
    return DetectedSubscription(
        merchant_key=name.upper(),
        merchant_name=name,
        frequency=frequency,
        amount=Decimal(amount),
        confidence=0.8,
        last_payment=next_payment - timedelta(days=30),
        next_payment=next_payment,
        transaction_count=3,
    )


class TestDetectSubscriptions:
    def test_twelve_monthly_payments_detected(self):
        subs = detect_subscriptions(monthly_series(12), TODAY)

        assert len(subs) == 1
        sub = subs[0]
        assert sub.frequency == Frequency.MONTHLY
        assert sub.amount == Decimal("29.99")
        assert sub.monthly_amount == Decimal("29.99")
        assert sub.transaction_count == 12
        assert sub.last_payment == date(2024, 12, 15)
        assert sub.next_payment == date(2025, 1, 15)
        assert sub.confidence >= 0.5

    def test_two_occurrences_are_not_enough(self):
        assert detect_subscriptions(monthly_series(2), TODAY) == []

    def test_negative_amounts_use_absolute_value(self):
        subs = detect_subscriptions(monthly_series(4, amount="-15.00", name="Spotify"), TODAY)

        assert len(subs) == 1
        assert subs[0].amount == Decimal("15.00")

    def test_income_and_ignored_rows_are_skipped(self):
        salary = [
            make_txn(date(2024, 9, 10) + relativedelta(months=i), "8000.00", "Employer", is_income=True)
            for i in range(4)
        ]
        transfers = [
            make_txn(date(2024, 9, 1) + relativedelta(months=i), "500.00", "Savings", is_ignored=True)
            for i in range(4)
        ]

        assert detect_subscriptions(salary + transfers, TODAY) == []

    def test_irregular_intervals_are_discarded(self):
        dates = [date(2024, 1, 1), date(2024, 1, 20), date(2024, 3, 5), date(2024, 3, 9)]
        txns = [make_txn(d, "10.00", "Corner Shop") for d in dates]

        assert detect_subscriptions(txns, TODAY) == []

    def test_unknown_merchant_with_varying_amounts_below_threshold(self):
        amounts = ["40.00", "95.00", "12.00", "60.00"]
        txns = [
            make_txn(date(2024, 1, 3) + relativedelta(months=i), amount, "Local Bakery")
            for i, amount in enumerate(amounts)
        ]
        # Only interval regularity (+0.3) and count (+0.08) score.
        assert detect_subscriptions(txns, TODAY) == []

    def test_subscription_category_adds_confidence(self):
        category = SimpleNamespace(id=None, name="Subskrypcje", color="#7c3aed")
        amounts = ["40.00", "95.00", "12.00", "60.00"]
        txns = [
            make_txn(
                date(2024, 1, 3) + relativedelta(months=i), amount, "Local Gym", category=category
            )
            for i, amount in enumerate(amounts)
        ]

        subs = detect_subscriptions(txns, TODAY)

        assert len(subs) == 1
        assert subs[0].category_name == "Subskrypcje"

    def test_weekly_cadence(self):
        txns = [make_txn(date(2024, 11, 1) + timedelta(weeks=i), "12.50", "Veg Box") for i in range(6)]

        subs = detect_subscriptions(txns, TODAY)

        assert len(subs) == 1
        assert subs[0].frequency == Frequency.WEEKLY
        assert subs[0].next_payment == date(2024, 12, 13)

    def test_sorted_by_next_payment(self):
        txns = monthly_series(4, name="Netflix", start=date(2024, 8, 25)) + monthly_series(
            4, name="Spotify", start=date(2024, 8, 5)
        )

        subs = detect_subscriptions(txns, TODAY)

        assert [s.merchant_name for s in subs] == ["Spotify", "Netflix"]


class TestHelpers:
    def test_detect_frequency_windows(self):
        assert detect_frequency(7) == Frequency.WEEKLY
        assert detect_frequency(30.4) == Frequency.MONTHLY
        assert detect_frequency(91) == Frequency.QUARTERLY
        assert detect_frequency(365) == Frequency.ANNUAL
        assert detect_frequency(14) is None
        assert detect_frequency(200) is None

    def test_amount_consistency_tolerance(self):
        assert is_amount_consistent([Decimal("100"), Decimal("104"), Decimal("98")])
        assert not is_amount_consistent([Decimal("100"), Decimal("120"), Decimal("80")])

    def test_coefficient_of_variation(self):
        assert coefficient_of_variation([30.0, 30.0, 30.0]) == 0.0
        assert coefficient_of_variation([30.0]) == 0.0
        assert coefficient_of_variation([10.0, 30.0]) == 0.5

    def test_next_payment_uses_calendar_months(self):
        assert predict_next_payment(date(2024, 1, 31), Frequency.MONTHLY) == date(2024, 2, 29)
        assert predict_next_payment(date(2024, 2, 29), Frequency.ANNUAL) == date(2025, 2, 28)
        assert predict_next_payment(date(2024, 11, 30), Frequency.QUARTERLY) == date(2025, 2, 28)


class TestMonthlyTotal:
    def test_normalizes_each_cadence(self):
        subs = [
            make_sub(Frequency.WEEKLY, "10.00", TODAY, "A"),
            make_sub(Frequency.MONTHLY, "29.99", TODAY, "B"),
            make_sub(Frequency.QUARTERLY, "90.00", TODAY, "C"),
            make_sub(Frequency.ANNUAL, "120.00", TODAY, "D"),
        ]

        total = calculate_monthly_total(subs)

        # 43.30 + 29.99 + 30.00 + 10.00
        assert round(total, 2) == Decimal("113.29")

    def test_empty(self):
        assert calculate_monthly_total([]) == Decimal(0)

    def test_no_intermediate_rounding(self):
        subs = [make_sub(Frequency.QUARTERLY, "10.00", TODAY, name) for name in "XYZ"]

        assert round(calculate_monthly_total(subs), 2) == Decimal("10.00")


class TestUpcomingPayments:
    def test_horizon_filter(self):
        subs = [
            make_sub(Frequency.MONTHLY, "20.00", TODAY + timedelta(days=35), "Far"),
            make_sub(Frequency.MONTHLY, "10.00", TODAY + timedelta(days=5), "Near"),
            make_sub(Frequency.ANNUAL, "99.00", TODAY + timedelta(days=200), "Yearly"),
        ]

        upcoming = get_upcoming_payments(subs, TODAY, days_ahead=30)

        assert [p.merchant_name for p in upcoming] == ["Near"]
        assert upcoming[0].date == TODAY + timedelta(days=5)
        assert upcoming[0].amount == Decimal("10.00")

    def test_overdue_projection_is_included(self):
        subs = [make_sub(Frequency.MONTHLY, "10.00", TODAY - timedelta(days=3), "Late")]

        assert len(get_upcoming_payments(subs, TODAY)) == 1

    def test_horizon_boundary_is_inclusive(self):
        subs = [make_sub(Frequency.MONTHLY, "10.00", TODAY + timedelta(days=30), "Edge")]

        assert len(get_upcoming_payments(subs, TODAY, days_ahead=30)) == 1

    def test_sorted_by_date(self):
        subs = [
            make_sub(Frequency.MONTHLY, "1.00", TODAY + timedelta(days=9), "Later"),
            make_sub(Frequency.MONTHLY, "1.00", TODAY + timedelta(days=2), "Sooner"),
        ]

        upcoming = get_upcoming_payments(subs, TODAY)

        assert [p.merchant_name for p in upcoming] == ["Sooner", "Later"]
