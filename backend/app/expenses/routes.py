# app/expenses/routes.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.expenses.aggregator import aggregate_expenses
from app.expenses.services import ExpenseService
from app.utils.enums import CATEGORY_META, ExpenseCategory
from app.utils.validators import json_body, parse_reference_date, parse_window

expenses_bp = Blueprint("expenses", __name__)
categories_bp = Blueprint("categories", __name__)


@expenses_bp.route("/", methods=["GET"])
@jwt_required()
def list_expenses():
    """
    List the current user's expenses, newest first.

    Query params:
        window: today|week|month  (optional, no filter when absent)
        date: reference day YYYY-MM-DD for the window (default: today)
    """
    user_id = get_jwt_identity()
    window = parse_window(request.args.get("window"))
    expenses = ExpenseService.list_expenses(user_id)

    if window is not None:
        now = parse_reference_date(request.args.get("date"))
        expenses = aggregate_expenses(expenses, window, now).filtered

    return jsonify({"expenses": [e.to_dict() for e in expenses], "count": len(expenses)})


@expenses_bp.route("/", methods=["POST"])
@jwt_required()
def add_expense():
    """
    Add an expense.

    Request body:
    {
        "title": "Lunch",
        "amount": "12.50",
        "category": "Food & Dining",
        "date": "2026-01-05",
        "notes": "..."  // optional
    }
    """
    expense = ExpenseService.create_expense(get_jwt_identity(), json_body())
    return jsonify({"message": "Expense added successfully", "expense": expense.to_dict()}), 201


@expenses_bp.route("/<expense_id>", methods=["GET"])
@jwt_required()
def get_expense(expense_id):
    expense = ExpenseService.get_expense(get_jwt_identity(), expense_id)
    return jsonify({"expense": expense.to_dict()})


@expenses_bp.route("/<expense_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_expense(expense_id):
    expense = ExpenseService.update_expense(get_jwt_identity(), expense_id, json_body())
    return jsonify({"message": "Expense updated successfully", "expense": expense.to_dict()})


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
@jwt_required()
def delete_expense(expense_id):
    ExpenseService.delete_expense(get_jwt_identity(), expense_id)
    return jsonify({"message": "Expense deleted successfully"})


@categories_bp.route("/", methods=["GET"])
def list_categories():
    """Fixed category list with display metadata."""
    return jsonify({
        "categories": [
            {"name": c.value, **CATEGORY_META[c]} for c in ExpenseCategory
        ]
    })
