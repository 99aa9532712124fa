"""
Expense Service - owner-scoped persistence of expense records.

Responsibilities:
- List one owner's expenses, newest first
- Create, update and delete expenses after form validation
- Turn stored documents into validated Expense records
- Surface database failures as TransportFailure (never retried)
"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from app.errors import InvalidRecord, NotFound, ValidationFailed
from app.expenses.forms import ExpenseForm
from app.expenses.models import Expense, to_money
from app.extensions import db as mongo, mongo_errors
from app.utils.enums import ExpenseCategory
from app.utils.validators import form_from_json

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "amount", "category", "date", "notes")


def to_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFound("Expense not found")


class ExpenseService:
    """Service for expense CRUD. Every query is scoped to one owner."""

    @classmethod
    def list_documents(cls, owner_id: str) -> List[Dict[str, Any]]:
        """Raw stored documents for an owner, newest first."""
        with mongo_errors("load expenses"):
            cursor = mongo.expenses.find({"owner_id": str(owner_id)}).sort(
                [("date", DESCENDING), ("created_at", DESCENDING)]
            )
            return list(cursor)

    @classmethod
    def list_expenses(cls, owner_id: str) -> List[Expense]:
        """
        Get an owner's expenses as validated records.

        Documents that cannot be read are skipped and logged.
        """
        expenses = []
        for doc in cls.list_documents(owner_id):
            try:
                expenses.append(Expense.from_document(doc))
            except InvalidRecord as e:
                logger.warning("[ExpenseService] Skipping expense %s: %s", e.record_id, e.message)
        return expenses

    @classmethod
    def get_expense(cls, owner_id: str, expense_id: str) -> Expense:
        oid = to_object_id(expense_id)
        with mongo_errors("load expense"):
            doc = mongo.expenses.find_one({"_id": oid, "owner_id": str(owner_id)})
        if not doc:
            raise NotFound("Expense not found")
        return Expense.from_document(doc)

    @classmethod
    def create_expense(cls, owner_id: str, payload: Mapping[str, Any]) -> Expense:
        """
        Validate and store a new expense.

        Args:
            owner_id: Authenticated user ID
            payload: {title, amount, category, date, notes?}

        Returns:
            The stored Expense with its assigned id
        """
        now = datetime.now(timezone.utc)
        expense = cls._validated(payload, owner_id=str(owner_id), created_at=now, updated_at=now)

        with mongo_errors("save expense"):
            result = mongo.expenses.insert_one(expense.to_document())

        expense = replace(expense, id=str(result.inserted_id))
        logger.info("[ExpenseService] Created expense %s (%s)", expense.id, expense.amount)
        return expense

    @classmethod
    def update_expense(cls, owner_id: str, expense_id: str, partial: Mapping[str, Any]) -> Expense:
        """
        Apply a partial update. The merged record is validated as a whole;
        unknown keys are ignored and the owner cannot be changed.
        """
        current = cls.get_expense(owner_id, expense_id)

        merged = {
            "title": current.title,
            "amount": str(current.amount),
            "category": current.category.value,
            "date": current.date.isoformat(),
            "notes": current.notes,
        }
        for key in EDITABLE_FIELDS:
            if key in (partial or {}):
                merged[key] = partial[key]

        updated = cls._validated(
            merged,
            owner_id=current.owner_id,
            id=current.id,
            created_at=current.created_at,
            updated_at=datetime.now(timezone.utc),
        )

        changes = updated.to_document()
        changes.pop("created_at")
        changes.pop("owner_id")
        with mongo_errors("update expense"):
            result = mongo.expenses.update_one(
                {"_id": to_object_id(expense_id), "owner_id": str(owner_id)},
                {"$set": changes},
            )
        if result.matched_count == 0:
            raise NotFound("Expense not found")

        logger.info("[ExpenseService] Updated expense %s", updated.id)
        return updated

    @classmethod
    def delete_expense(cls, owner_id: str, expense_id: str) -> None:
        oid = to_object_id(expense_id)
        with mongo_errors("delete expense"):
            result = mongo.expenses.delete_one({"_id": oid, "owner_id": str(owner_id)})
        if result.deleted_count == 0:
            raise NotFound("Expense not found")
        logger.info("[ExpenseService] Deleted expense %s", expense_id)

    @classmethod
    def _validated(cls, payload: Mapping[str, Any], owner_id: str, id: str = "",
                   created_at: Optional[datetime] = None,
                   updated_at: Optional[datetime] = None) -> Expense:
        form = form_from_json(ExpenseForm, payload)
        if not form.validate():
            raise ValidationFailed("Invalid expense", errors=form.errors)

        return Expense(
            id=id,
            title=form.title.data,
            amount=to_money(form.amount.data),
            category=ExpenseCategory(form.category.data),
            date=form.date.data,
            owner_id=owner_id,
            notes=form.notes.data or None,
            created_at=created_at,
            updated_at=updated_at,
        )

    @classmethod
    def lifetime_totals(cls, owner_id: str) -> Dict[str, Any]:
        """Count and total over every readable expense the owner has."""
        expenses = cls.list_expenses(owner_id)
        total = sum((e.amount for e in expenses), to_money(0))
        return {"expense_count": len(expenses), "total_amount": total}
