from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.auth.services import AuthService
from app.errors import Unauthenticated
from app.expenses.models import format_money
from app.expenses.services import ExpenseService

users_bp = Blueprint("users", __name__)


@users_bp.route("/profile", methods=["GET"])
@jwt_required()
def profile():
    uid = get_jwt_identity()
    identity = AuthService.current_user(uid)
    if identity is None:
        raise Unauthenticated("User not found")

    # Lifetime figures, independent of any dashboard window
    totals = ExpenseService.lifetime_totals(uid)

    return jsonify({
        "user": identity.to_dict(),
        "expense_count": totals["expense_count"],
        "total_expense_amount": format_money(totals["total_amount"]),
    })
