"""Logging setup.

Each line carries the request context when there is one:

    2026-01-05 10:12:03,118 INFO app.expenses.services [POST /api/v1/expenses user=65a1...] [ExpenseService] Created expense 65f0... (12.50)
"""
import logging

from flask import has_request_context, request
from flask_jwt_extended import get_jwt_identity

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(method)s %(path)s user=%(user_id)s] %(message)s"


class RequestContextFilter(logging.Filter):
    """Adds method, path and user_id to every record ("-" outside a request)."""

    def filter(self, record):
        record.method = "-"
        record.path = "-"
        record.user_id = getattr(record, "user_id", "-")
        if has_request_context():
            record.method = request.method
            record.path = request.path
            if record.user_id == "-":
                record.user_id = _current_identity()
        return True


def _current_identity():
    # Only resolves once the JWT has been verified for this request
    try:
        return get_jwt_identity() or "-"
    except RuntimeError:
        return "-"


def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger("app")
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root
