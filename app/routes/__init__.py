"""Route blueprints and the helpers they share."""
from flask import current_app, request

from exceptions import ValidationException


def catalog_service():
    return current_app.extensions["catalog_service"]


def reference_service():
    return current_app.extensions["reference_service"]


def json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationException("Request body must be a JSON object")
    return payload


def int_arg(name, default=None):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationException(f"Query parameter {name} must be an integer")
