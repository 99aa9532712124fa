# app/errors.py
"""Error taxonomy shared by the services and the HTTP layer."""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ExpenseTrackerError(Exception):
    """Base error. Carries the HTTP status the API answers with."""

    status_code = 500
    code = "server_error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.code)
        self.message = message or self.code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.code, "message": self.message}


class Unauthenticated(ExpenseTrackerError):
    status_code = 401
    code = "unauthenticated"


class NotFound(ExpenseTrackerError):
    status_code = 404
    code = "not_found"


class ValidationFailed(ExpenseTrackerError):
    status_code = 400
    code = "validation_failed"

    def __init__(self, message=None, errors=None):
        super().__init__(message or "Invalid input")
        self.errors = errors or {}

    def to_dict(self):
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class AlreadyExists(ValidationFailed):
    status_code = 409
    code = "already_exists"


class TransportFailure(ExpenseTrackerError):
    status_code = 503
    code = "transport_failure"


class InvalidRecord(ExpenseTrackerError):
    """A stored record whose date or amount cannot be interpreted.

    Recovered locally: the record is excluded and reported, never fatal.
    """

    status_code = 422
    code = "invalid_record"

    def __init__(self, message=None, record_id=None):
        super().__init__(message or "Invalid record")
        self.record_id = record_id


def register_error_handlers(app):
    @app.errorhandler(ExpenseTrackerError)
    def handle_tracker_error(e):
        if e.status_code >= 500:
            logger.error("%s: %s", e.code, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        code = (e.name or "error").lower().replace(" ", "_")
        return jsonify(error=code, message=e.description), e.code

    @app.errorhandler(500)
    def server_error(e):
        logger.exception("Unhandled server error")
        return jsonify(error="server_error", message="Internal server error"), 500
