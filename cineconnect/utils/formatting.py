from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_decimal(value, default=None):
    """Parse a price the API sends as "12.50", 12.5 or 12 into a Decimal."""
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    # NaN and Infinity parse but are never a price
    return result if result.is_finite() else default


def to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_float(value, default=0.0):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def format_money(value, symbol="Q"):
    amount = to_decimal(value, Decimal("0"))
    return f"{symbol}{amount.quantize(CENT, rounding=ROUND_HALF_UP)}"


def short_time(value):
    """"14:30:00" -> "14:30"."""
    if not value:
        return ""
    return str(value)[:5]


def format_date(value, fmt="%d/%m/%Y"):
    if not value:
        return ""
    if isinstance(value, datetime):
        return value.strftime(fmt)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime(fmt)
    except ValueError:
        return str(value)
