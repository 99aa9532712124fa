"""
Auth Service - sign up, sign in, sign out and current user.

Passwords are hashed with bcrypt; sessions are JWT access tokens.
Signing out revokes the token's jti in the token_blocklist collection.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from flask_jwt_extended import create_access_token
from pymongo.errors import DuplicateKeyError

from app import bcrypt
from app.errors import AlreadyExists, Unauthenticated, ValidationFailed
from app.extensions import db as mongo, mongo_errors
from app.users.forms import LoginForm, RegistrationForm
from app.users.model import Identity, normalize_email
from app.utils.validators import form_from_json

logger = logging.getLogger(__name__)


class AuthService:
    """Service for account and session operations."""

    @classmethod
    def sign_up(cls, payload: Mapping[str, Any]) -> Tuple[Identity, str]:
        """
        Create an account.

        Returns:
            Tuple of (identity, access token)
        """
        form = form_from_json(RegistrationForm, payload)
        if not form.validate():
            raise ValidationFailed("Invalid registration", errors=form.errors)

        email = normalize_email(form.email.data)
        with mongo_errors("check account"):
            if mongo.users.find_one({"email": email}):
                raise AlreadyExists("User already exists")

        user = {
            "email": email,
            "name": form.name.data or None,
            "password_hash": bcrypt.generate_password_hash(form.password.data).decode("utf-8"),
            "created_at": datetime.now(timezone.utc),
        }
        with mongo_errors("create account"):
            try:
                res = mongo.users.insert_one(user)
            except DuplicateKeyError:
                # Lost a race with another sign-up for the same email
                raise AlreadyExists("User already exists")

        user["_id"] = res.inserted_id
        identity = Identity.from_document(user)
        logger.info("[AuthService] Registered user %s", identity.id)
        return identity, create_access_token(identity=identity.id)

    @classmethod
    def sign_in(cls, payload: Mapping[str, Any]) -> Tuple[Identity, str]:
        form = form_from_json(LoginForm, payload)
        if not form.validate():
            raise ValidationFailed("Email and password are required", errors=form.errors)

        with mongo_errors("load account"):
            user = Identity.find_by_email(form.email.data)

        if not user or not bcrypt.check_password_hash(user["password_hash"], form.password.data):
            logger.info("[AuthService] Failed sign-in for %s", normalize_email(form.email.data))
            raise Unauthenticated("Invalid credentials")

        identity = Identity.from_document(user)
        logger.info("[AuthService] User %s signed in", identity.id)
        return identity, create_access_token(identity=identity.id)

    @classmethod
    def sign_out(cls, jwt_payload: Dict[str, Any]) -> None:
        """Revoke the token described by `jwt_payload`."""
        expires = jwt_payload.get("exp")
        with mongo_errors("sign out"):
            mongo.token_blocklist.update_one(
                {"jti": jwt_payload["jti"]},
                {"$setOnInsert": {
                    "user_id": jwt_payload.get("sub"),
                    "revoked_at": datetime.now(timezone.utc),
                    "expires_at": datetime.fromtimestamp(expires, timezone.utc) if expires else None,
                }},
                upsert=True,
            )
        logger.info("[AuthService] User %s signed out", jwt_payload.get("sub"))

    @classmethod
    def current_user(cls, user_id: str) -> Optional[Identity]:
        with mongo_errors("load account"):
            user = Identity.find_by_id(user_id)
        return Identity.from_document(user) if user else None

    @classmethod
    def is_token_revoked(cls, jti: str) -> bool:
        with mongo_errors("check token"):
            return mongo.token_blocklist.find_one({"jti": jti}) is not None
