import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.expenses.aggregator import aggregate_expenses
from app.expenses.models import format_money
from app.expenses.services import ExpenseService
from app.utils.enums import CATEGORY_META, ExpenseCategory, TimeWindow
from app.utils.validators import parse_reference_date, parse_window

logger = logging.getLogger(__name__)

bp = Blueprint("dashboards", __name__)

RECENT_LIMIT = 6


def category_rows(summary):
    """Pie-chart rows, largest amount first."""
    counts = {}
    for expense in summary.filtered:
        counts[expense.category.value] = counts.get(expense.category.value, 0) + 1

    rows = []
    for name, amount in sorted(summary.by_category.items(), key=lambda x: x[1], reverse=True):
        meta = CATEGORY_META[ExpenseCategory(name)]
        rows.append({
            "name": name,
            "value": format_money(amount),
            "icon": meta["icon"],
            "color": meta["color"],
            "count": counts[name],
        })
    return rows


@bp.route("/summary", methods=["GET"])
@jwt_required()
def summary():
    """
    Dashboard figures for the current user:
    - total, average per day and transaction count for the window
    - per-category breakdown (pie chart rows)
    - the most recent expenses in the window

    Query params:
        window: today|week|month (default: month)
        date: reference day YYYY-MM-DD (default: today)
    """
    uid = get_jwt_identity()
    window = parse_window(request.args.get("window"), default=TimeWindow.THIS_MONTH)
    now = parse_reference_date(request.args.get("date"))

    def report_invalid(record, error):
        logger.warning("[Dashboard] Unreadable expense %s: %s", error.record_id, error.message)

    result = aggregate_expenses(
        ExpenseService.list_documents(uid), window, now, on_invalid=report_invalid
    )

    payload = result.to_dict()
    payload["categories"] = category_rows(result)
    payload["recent"] = [e.to_dict() for e in result.filtered[:RECENT_LIMIT]]
    return jsonify(payload)
