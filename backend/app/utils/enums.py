from enum import Enum


class ExpenseCategory(str, Enum):
    FOOD_AND_DINING = "Food & Dining"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS_AND_UTILITIES = "Bills & Utilities"
    HEALTHCARE = "Healthcare"
    TRAVEL = "Travel"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def values(cls):
        return [c.value for c in cls]


# Display metadata for the dashboard cards and pie chart
CATEGORY_META = {
    ExpenseCategory.FOOD_AND_DINING: {"icon": "🍔", "color": "#FB923C"},
    ExpenseCategory.TRANSPORTATION: {"icon": "🚗", "color": "#60A5FA"},
    ExpenseCategory.SHOPPING: {"icon": "🛍️", "color": "#C084FC"},
    ExpenseCategory.ENTERTAINMENT: {"icon": "🎬", "color": "#F472B6"},
    ExpenseCategory.BILLS_AND_UTILITIES: {"icon": "💡", "color": "#F87171"},
    ExpenseCategory.HEALTHCARE: {"icon": "💊", "color": "#4ADE80"},
    ExpenseCategory.TRAVEL: {"icon": "✈️", "color": "#22D3EE"},
    ExpenseCategory.EDUCATION: {"icon": "📚", "color": "#818CF8"},
    ExpenseCategory.OTHER: {"icon": "📦", "color": "#9CA3AF"},
}


class TimeWindow(str, Enum):
    """Rolling look-back windows. Not calendar weeks or months."""

    TODAY = "today"
    THIS_WEEK = "week"
    THIS_MONTH = "month"

    @property
    def lookback_days(self):
        return _LOOKBACK_DAYS[self]

    @property
    def divisor(self):
        """Fixed divisor for the average-per-day figure."""
        return _DIVISORS[self]


_LOOKBACK_DAYS = {
    TimeWindow.TODAY: 0,
    TimeWindow.THIS_WEEK: 7,
    TimeWindow.THIS_MONTH: 30,
}

_DIVISORS = {
    TimeWindow.TODAY: 1,
    TimeWindow.THIS_WEEK: 7,
    TimeWindow.THIS_MONTH: 30,
}
