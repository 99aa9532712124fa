"""Tests for time-window filtering and dashboard aggregates."""
from datetime import date, datetime, timedelta
from decimal import Decimal
from itertools import count

import pytest

from app.expenses.aggregator import ExpenseAggregator, aggregate_expenses, window_lower_bound
from app.expenses.models import Expense
from app.utils.enums import ExpenseCategory, TimeWindow

TODAY = date(2026, 3, 31)
NOW = datetime(2026, 3, 31, 18, 45, 12)

_ids = count(1)


def make_expense(amount, days_ago=0, category="Food & Dining", title="Item"):
    return Expense(
        id=str(next(_ids)),
        title=title,
        amount=Decimal(amount),
        category=ExpenseCategory(category),
        date=TODAY - timedelta(days=days_ago),
        owner_id="user-1",
    )


@pytest.fixture
def mixed():
    categories = ExpenseCategory.values()
    return [
        make_expense(f"{(i * 7) % 50}.{(i * 13) % 100:02d}", days_ago=i, category=categories[i % len(categories)])
        for i in range(0, 45)
    ]


@pytest.mark.parametrize("window", list(TimeWindow))
def test_empty_input(window):
    summary = aggregate_expenses([], window, NOW)

    assert summary.filtered == []
    assert summary.total == 0
    assert summary.by_category == {}
    assert summary.average_per_day == 0


def test_week_scenario():
    lunch = make_expense("12.50", days_ago=0, category="Food & Dining")
    taxi = make_expense("40.00", days_ago=10, category="Transportation")

    summary = aggregate_expenses([lunch, taxi], TimeWindow.THIS_WEEK, NOW)

    assert summary.filtered == [lunch]
    assert summary.total == Decimal("12.50")
    assert summary.by_category == {"Food & Dining": Decimal("12.50")}
    assert summary.average_per_day == Decimal("12.50") / 7
    assert round(float(summary.average_per_day), 4) == 1.7857


def test_same_category_sums_are_cent_accurate():
    a = make_expense("0.10", category="Shopping")
    b = make_expense("0.20", category="Shopping")

    summary = aggregate_expenses([a, b], "today", NOW)

    assert summary.by_category["Shopping"] == Decimal("0.30")
    assert summary.total == Decimal("0.30")


def test_many_small_amounts_do_not_drift():
    expenses = [make_expense("0.10") for _ in range(1000)]

    summary = aggregate_expenses(expenses, TimeWindow.TODAY, NOW)

    assert summary.total == Decimal("100.00")


@pytest.mark.parametrize("window, lookback", [
    (TimeWindow.TODAY, 0),
    (TimeWindow.THIS_WEEK, 7),
    (TimeWindow.THIS_MONTH, 30),
])
def test_lower_bound_is_inclusive_rolling_lookback(window, lookback):
    on_bound = make_expense("5.00", days_ago=lookback)
    before_bound = make_expense("7.00", days_ago=lookback + 1)

    summary = aggregate_expenses([on_bound, before_bound], window, NOW)

    assert window_lower_bound(window, NOW) == TODAY - timedelta(days=lookback)
    assert summary.filtered == [on_bound]


def test_month_is_thirty_days_not_calendar_month():
    # 2026-03-01 is 30 days before 2026-03-31; 2026-02-28 is not in range
    first_of_month = make_expense("1.00", days_ago=30)
    late_february = make_expense("2.00", days_ago=31)

    summary = aggregate_expenses([first_of_month, late_february], TimeWindow.THIS_MONTH, NOW)

    assert [e.date for e in summary.filtered] == [date(2026, 3, 1)]


def test_time_of_day_is_ignored():
    late = datetime(2026, 3, 31, 23, 59, 59)
    early = datetime(2026, 3, 31, 0, 0, 0)
    expenses = [make_expense("3.00", days_ago=0), make_expense("4.00", days_ago=1)]

    assert aggregate_expenses(expenses, "today", late).total == aggregate_expenses(expenses, "today", early).total
    assert aggregate_expenses(expenses, "today", TODAY).total == Decimal("3.00")


@pytest.mark.parametrize("window", list(TimeWindow))
def test_filter_partitions_input(mixed, window):
    summary = aggregate_expenses(mixed, window, NOW)
    bound = window_lower_bound(window, NOW)

    assert all(e.date >= bound for e in summary.filtered)
    excluded = [e for e in mixed if e not in summary.filtered]
    assert all(e.date < bound for e in excluded)
    assert len(summary.filtered) + len(excluded) == len(mixed)


@pytest.mark.parametrize("window", list(TimeWindow))
def test_category_breakdown_sums_to_total(mixed, window):
    summary = aggregate_expenses(mixed, window, NOW)

    assert sum(summary.by_category.values(), Decimal("0")) == summary.total
    assert all(v >= 0 for v in summary.by_category.values())


@pytest.mark.parametrize("window, divisor", [
    (TimeWindow.TODAY, 1),
    (TimeWindow.THIS_WEEK, 7),
    (TimeWindow.THIS_MONTH, 30),
])
def test_average_uses_fixed_divisor(mixed, window, divisor):
    summary = aggregate_expenses(mixed, window, NOW)

    assert summary.average_per_day == summary.total / divisor


def test_filtered_keeps_input_order(mixed):
    shuffled = mixed[::-1]

    summary = aggregate_expenses(shuffled, TimeWindow.THIS_MONTH, NOW)

    assert summary.filtered == [e for e in shuffled if e.date >= TODAY - timedelta(days=30)]


def test_absent_categories_are_not_reported():
    summary = aggregate_expenses([make_expense("9.99", category="Travel")], "week", NOW)

    assert list(summary.by_category) == ["Travel"]
    assert summary.category_count == 1


def test_is_idempotent(mixed):
    first = aggregate_expenses(mixed, TimeWindow.THIS_WEEK, NOW)
    second = aggregate_expenses(mixed, TimeWindow.THIS_WEEK, NOW)

    assert first == second


def test_future_dated_expenses_count():
    tomorrow = make_expense("8.00", days_ago=-1)

    summary = aggregate_expenses([tomorrow], TimeWindow.TODAY, NOW)

    assert summary.filtered == [tomorrow]


def test_unreadable_documents_are_reported_and_skipped():
    good = {
        "_id": "a1", "title": "Bus", "amount_cents": 250, "category": "Transportation",
        "date": "2026-03-30", "owner_id": "user-1",
    }
    bad_date = dict(good, _id="a2", date="yesterday")
    negative = dict(good, _id="a3", amount_cents=-100)
    reported = []

    summary = aggregate_expenses(
        [good, bad_date, negative], TimeWindow.THIS_WEEK, NOW,
        on_invalid=lambda record, error: reported.append(error.record_id),
    )

    assert [e.id for e in summary.filtered] == ["a1"]
    assert summary.total == Decimal("2.50")
    assert reported == ["a2", "a3"]
    assert len(summary.rejected) == 2
    assert summary.to_dict()["rejected_count"] == 2


def test_unknown_window_is_rejected():
    with pytest.raises(ValueError):
        aggregate_expenses([], "year", NOW)


def test_summary_serialisation():
    summary = aggregate_expenses(
        [make_expense("12.50"), make_expense("40.00", days_ago=3, category="Transportation")],
        TimeWindow.THIS_WEEK, NOW,
    )

    assert summary.to_dict() == {
        "window": "week",
        "reference_date": "2026-03-31",
        "lower_bound": "2026-03-24",
        "total": "52.50",
        "average_per_day": "7.50",
        "transaction_count": 2,
        "category_count": 2,
        "by_category": {"Food & Dining": "12.50", "Transportation": "40.00"},
        "rejected_count": 0,
    }


def test_bound_aggregator():
    aggregator = ExpenseAggregator("today")
    expenses = [make_expense("1.00"), make_expense("2.00", days_ago=2)]

    assert aggregator.aggregate(expenses, NOW).total == Decimal("1.00")
    assert ExpenseAggregator().window is TimeWindow.THIS_MONTH


def test_half_cent_amounts_round_the_same_everywhere():
    gum = make_expense("0.125", category="Shopping")
    mints = make_expense("0.125", category="Food & Dining")

    summary = aggregate_expenses([gum, mints], TimeWindow.TODAY, NOW)

    assert gum.to_dict()["amount"] == "0.13"
    assert summary.total == Decimal("0.26")
    assert summary.by_category == {"Shopping": Decimal("0.13"), "Food & Dining": Decimal("0.13")}
    assert sum(summary.by_category.values(), Decimal("0")) == summary.total
