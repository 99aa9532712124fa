from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from bson.errors import InvalidId
from bson.objectid import ObjectId

from app.extensions import db


@dataclass(frozen=True)
class Identity:
    """The authenticated user, as the rest of the app sees it."""

    id: str
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, user_dict):
        return cls(
            id=str(user_dict["_id"]),
            email=user_dict.get("email"),
            name=user_dict.get("name"),
            created_at=user_dict.get("created_at"),
        )

    def to_dict(self):
        return {
            "_id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def find_by_id(user_id):
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return db.users.find_one({"_id": oid})

    @staticmethod
    def find_by_email(email):
        return db.users.find_one({"email": normalize_email(email)})


def normalize_email(email):
    return (email or "").strip().lower()
