"""Request validators."""
from datetime import datetime

from flask import request
from werkzeug.datastructures import MultiDict
from wtforms import DecimalField, FloatField, IntegerField

from app.errors import ValidationFailed
from app.expenses.models import parse_day
from app.utils.enums import TimeWindow

NUMERIC_FIELDS = (DecimalField, FloatField, IntegerField)


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be a JSON object")
    return data


def parse_window(value, default=None):
    if value is None:
        return default
    try:
        return TimeWindow(value)
    except ValueError:
        raise ValidationFailed(
            "Unknown window",
            errors={"window": [f"Must be one of: {', '.join(w.value for w in TimeWindow)}"]},
        )


def parse_reference_date(value):
    """The `date` query parameter, or today in server local time."""
    if not value:
        return datetime.now().date()
    try:
        return parse_day(value)
    except ValueError:
        raise ValidationFailed("Invalid date", errors={"date": ["Expected YYYY-MM-DD"]})


def strip_filter(value):
    """WTForms filter: trim surrounding whitespace, leave non-strings alone."""
    return value.strip() if isinstance(value, str) else value


def _field_class(form_class, name):
    # Declared fields are UnboundField instances on the form class
    field_class = getattr(getattr(form_class, name, None), "field_class", None)
    return field_class if isinstance(field_class, type) else None


def _accepts_numbers(form_class, name):
    return issubclass(_field_class(form_class, name), NUMERIC_FIELDS)


def form_from_json(form_class, payload):
    """Bind a JSON payload to a WTForms form as if it had been posted.

    Every field takes a JSON string; numeric fields also take a JSON number.
    Lists, objects and booleans are rejected before the form sees them.
    Keys that are not fields of the form are ignored.
    """
    fields = {}
    errors = {}
    for key, value in (payload or {}).items():
        if value is None or _field_class(form_class, key) is None:
            continue
        if isinstance(value, str):
            fields[key] = value
        elif (isinstance(value, (int, float)) and not isinstance(value, bool)
              and _accepts_numbers(form_class, key)):
            fields[key] = str(value)
        elif _accepts_numbers(form_class, key):
            errors[key] = ["Expected a number or a numeric string"]
        else:
            errors[key] = ["Expected a string"]
    if errors:
        raise ValidationFailed("Invalid input", errors=errors)
    return form_class(formdata=MultiDict(fields))
