"""HTTP blueprints and the small request-parsing helpers they share."""

from flask import request

from wordrank.errors import ValidationFailure

# Largest value a 32-bit INTEGER column holds.
MAX_DB_INTEGER = 2 ** 31 - 1


def json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def require_fields(data, *names, message=None):
    missing = [n for n in names if data.get(n) in (None, '')]
    if missing:
        raise ValidationFailure(message or f"Missing required fields: {', '.join(missing)}")
    return [data[n] for n in names]


def int_arg(value, name, default=None, minimum=None, maximum=None):
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise ValidationFailure(f"{name} must be an integer")
    # floats must be integral: rejects 9.9, inf and nan
    if isinstance(value, float) and not value.is_integer():
        raise ValidationFailure(f"{name} must be an integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationFailure(f"{name} must be an integer")
    if minimum is not None and parsed < minimum:
        raise ValidationFailure(f"{name} must be at least {minimum}")
    if maximum is not None and parsed > maximum:
        raise ValidationFailure(f"{name} must be at most {maximum}")
    return parsed
