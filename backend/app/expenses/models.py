"""Expense models."""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Optional

from app.errors import InvalidRecord
from app.utils.enums import ExpenseCategory

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce a number-ish value to a 2-place Decimal.

    Floats go through str() so 12.1 stays 12.10 instead of its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidOperation("boolean is not an amount")
    if hasattr(value, "to_decimal"):  # bson Decimal128
        value = value.to_decimal()
    amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    if not amount.is_finite():
        raise InvalidOperation("amount must be finite")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    # "-0" quantizes to Decimal("-0.00")
    return abs(amount) if amount.is_zero() else amount


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def format_money(amount: Decimal) -> str:
    return str(to_money(amount))


def parse_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            # Timestamps such as 2026-01-05T00:00:00Z keep only their day,
            # anything else after the date is rejected
            if text[10] not in "T ":
                raise ValueError(f"unsupported date value: {value!r}")
            datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
        return date.fromisoformat(text[:10])
    raise ValueError(f"unsupported date value: {value!r}")


@dataclass(frozen=True)
class Expense:
    """A single spending record owned by one user. Never mutated in place."""

    id: str
    title: str
    amount: Decimal
    category: ExpenseCategory
    date: date
    owner_id: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        # Amounts are always whole cents, so cards and totals agree
        object.__setattr__(self, "amount", to_money(self.amount))

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Expense":
        """Build an Expense from a stored document, or raise InvalidRecord."""
        record_id = str(doc.get("_id", doc.get("id", "")))

        title = doc.get("title")
        if not isinstance(title, str) or not title.strip():
            raise InvalidRecord("title is missing", record_id=record_id)

        try:
            if doc.get("amount_cents") is not None:
                cents = doc["amount_cents"]
                if isinstance(cents, bool) or not isinstance(cents, int):
                    raise InvalidOperation("amount_cents must be an integer")
                amount = from_cents(cents)
            else:
                amount = to_money(doc.get("amount"))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidRecord(
                f"amount {doc.get('amount', doc.get('amount_cents'))!r} is not a number",
                record_id=record_id,
            )
        if amount < 0:
            raise InvalidRecord(f"amount {amount} is negative", record_id=record_id)

        try:
            day = parse_day(doc.get("date"))
        except (ValueError, TypeError):
            raise InvalidRecord(f"date {doc.get('date')!r} cannot be parsed", record_id=record_id)

        try:
            category = ExpenseCategory(doc.get("category"))
        except ValueError:
            raise InvalidRecord(f"unknown category {doc.get('category')!r}", record_id=record_id)

        owner_id = doc.get("owner_id")
        if not owner_id:
            raise InvalidRecord("owner is missing", record_id=record_id)

        return cls(
            id=record_id,
            title=title.strip(),
            amount=amount,
            category=category,
            date=day,
            owner_id=str(owner_id),
            notes=doc.get("notes") or None,
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_document(self) -> Dict[str, Any]:
        """Fields as stored in Mongo (the _id is managed by the collection)."""
        return {
            "title": self.title,
            "amount_cents": to_cents(self.amount),
            "category": self.category.value,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "owner_id": self.owner_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "amount": format_money(self.amount),
            "category": self.category.value,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
