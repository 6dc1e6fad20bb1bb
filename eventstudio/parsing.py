"""
Request value coercion shared by the services.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from eventstudio.errors import ValidationError


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def missing_fields(data, required):
    return [field for field in required if is_blank(data.get(field))]


def parse_tags(value):
    """Turn ``"a, b,,c"`` (or a list) into ``["a", "b", "c"]``."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple)):
        raise ValidationError("Tags must be a comma-separated string or a list")
    return [str(tag).strip() for tag in value if str(tag).strip()]


def parse_date(value, field="date"):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {field}")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"Invalid {field}: expected YYYY-MM-DD or ISO-8601")


def parse_price(value):
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("Price must be a number")
    if not price.is_finite() or price < 0:
        raise ValidationError("Price must be a non-negative number")
    return price.quantize(Decimal("0.01"))


def parse_seats(value):
    if isinstance(value, bool):
        raise ValidationError("Seats must be a whole number")
    try:
        seats = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("Seats must be a whole number")
    if not seats.is_finite() or seats != seats.to_integral_value():
        raise ValidationError("Seats must be a whole number")
    if seats < 0:
        raise ValidationError("Seats must be a non-negative number")
    return int(seats)


def parse_uuid(value, field="id"):
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}")


def parse_optional_text(value, field, default=""):
    """Strip a free-text value; ``None`` or blank falls back to ``default``."""
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f"Field '{field}' must be a string")
    return value.strip() or default
