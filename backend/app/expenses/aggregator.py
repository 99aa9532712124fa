"""
Expense aggregation - time-window filtering and dashboard figures.

Given a snapshot of one user's expenses, a window and a reference "now",
produces the filtered list, the total, the average per day and the
per-category breakdown. Pure: no clock reads, no database access.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from app.errors import InvalidRecord
from app.expenses.models import CENT, Expense, format_money
from app.utils.enums import TimeWindow

logger = logging.getLogger(__name__)

ExpenseLike = Union[Expense, Mapping[str, Any]]


@dataclass(frozen=True)
class RejectedRecord:
    record: Any
    reason: str


@dataclass
class ExpenseSummary:
    window: TimeWindow
    reference_date: date
    lower_bound: date
    filtered: List[Expense] = field(default_factory=list)
    total: Decimal = Decimal("0.00")
    average_per_day: Decimal = Decimal("0")
    by_category: Dict[str, Decimal] = field(default_factory=dict)
    rejected: List[RejectedRecord] = field(default_factory=list)

    @property
    def transaction_count(self) -> int:
        return len(self.filtered)

    @property
    def category_count(self) -> int:
        return len(self.by_category)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window": self.window.value,
            "reference_date": self.reference_date.isoformat(),
            "lower_bound": self.lower_bound.isoformat(),
            "total": format_money(self.total),
            "average_per_day": format_money(self.average_per_day),
            "transaction_count": self.transaction_count,
            "category_count": self.category_count,
            "by_category": {k: format_money(v) for k, v in self.by_category.items()},
            "rejected_count": len(self.rejected),
        }


def start_of_day(now: Union[datetime, date]) -> date:
    """Truncate to the calendar day of `now` (its own timezone, if any)."""
    if isinstance(now, datetime):
        return now.date()
    return now


def window_lower_bound(window: TimeWindow, now: Union[datetime, date]) -> date:
    """Inclusive lower bound: today minus 0, 7 or 30 days."""
    return start_of_day(now) - timedelta(days=TimeWindow(window).lookback_days)


def _coerce(record: ExpenseLike) -> Expense:
    if isinstance(record, Expense):
        return record
    return Expense.from_document(record)


def aggregate_expenses(
    expenses: Iterable[ExpenseLike],
    window: Union[TimeWindow, str],
    now: Union[datetime, date],
    on_invalid: Optional[Callable[[Any, InvalidRecord], None]] = None,
) -> ExpenseSummary:
    """
    Filter `expenses` to `window` relative to `now` and compute aggregates.

    Args:
        expenses: Expense records or raw documents; input order is kept.
        window: TimeWindow (or its value: "today", "week", "month")
        now: Reference instant. Only its calendar day matters.
        on_invalid: Called with (record, error) for each raw document that
            cannot be read. Such records are skipped, never fatal.

    Returns:
        ExpenseSummary. `average_per_day` divides by the window's fixed
        divisor (1, 7 or 30), not by the days actually present.
    """
    window = TimeWindow(window)
    today = start_of_day(now)
    lower_bound = window_lower_bound(window, today)

    filtered = []
    rejected = []
    by_category = {}
    total = Decimal("0")

    for record in expenses:
        try:
            expense = _coerce(record)
        except InvalidRecord as e:
            rejected.append(RejectedRecord(record=record, reason=e.message))
            if on_invalid is not None:
                on_invalid(record, e)
            continue

        if expense.date < lower_bound:
            continue

        filtered.append(expense)
        total += expense.amount
        key = expense.category.value
        by_category[key] = by_category.get(key, Decimal("0")) + expense.amount

    total = total.quantize(CENT, rounding=ROUND_HALF_UP)
    if rejected:
        logger.warning("Skipped %d unreadable expense record(s)", len(rejected))

    return ExpenseSummary(
        window=window,
        reference_date=today,
        lower_bound=lower_bound,
        filtered=filtered,
        total=total,
        average_per_day=total / window.divisor,
        by_category={k: v.quantize(CENT, rounding=ROUND_HALF_UP) for k, v in by_category.items()},
        rejected=rejected,
    )


class ExpenseAggregator:
    """Aggregator bound to one window, for callers that reuse it."""

    def __init__(self, window: Union[TimeWindow, str] = TimeWindow.THIS_MONTH):
        self.window = TimeWindow(window)

    def aggregate(
        self,
        expenses: Iterable[ExpenseLike],
        now: Union[datetime, date],
        on_invalid: Optional[Callable[[Any, InvalidRecord], None]] = None,
    ) -> ExpenseSummary:
        return aggregate_expenses(expenses, self.window, now, on_invalid=on_invalid)
