"""
Field-level predicates. They take an already sanitized value and only ever
answer True or False.
"""
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def is_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def is_email(value: Any) -> bool:
    return isinstance(value, str) and len(value) <= 254 and bool(_EMAIL_RE.match(value))


def is_valid_time(value: Any) -> bool:
    return isinstance(value, str) and bool(_TIME_RE.match(value))


def parse_date(value: Any) -> Optional[date]:
    """ISO date ('2025-03-01') or datetime string, or a date object"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse to naive UTC. Values with an offset are converted; naive values
    are taken to be UTC already.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time())
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def is_valid_date(value: Any) -> bool:
    return parse_date(value) is not None


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Accept '12.50', 12.5 or Decimal('12.50'). Booleans, NaN and infinities
    are not amounts.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def is_amount_in_range(value: Any, min_value: float = 0, max_value: float = 999_999_999.99) -> bool:
    amount = parse_amount(value)
    if amount is None:
        return False
    return Decimal(str(min_value)) <= amount <= Decimal(str(max_value))


def is_text_length_in_range(text: Any, min_length: int = 0, max_length: int = 1000) -> bool:
    if not isinstance(text, str):
        return False
    return min_length <= len(text) <= max_length
