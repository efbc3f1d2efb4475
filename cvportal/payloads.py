from flask import request


def json_object():
    """Request body as a dict; None when it is missing or not a JSON object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def non_string_fields(data, fields):
    """Fields that are present with a value other than a string or null."""
    return [f for f in fields if data.get(f) is not None and not isinstance(data[f], str)]
