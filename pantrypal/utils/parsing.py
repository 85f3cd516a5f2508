"""Helpers that coerce raw JSON values into domain types or raise ValidationError."""
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pantrypal.exceptions import ValidationError

# Column limits: BIGINT ids, INTEGER quantities, NUMERIC(10, 2) amounts
MAX_ID = 2 ** 63 - 1
MAX_QUANTITY = 2 ** 31 - 1
MAX_MONEY = Decimal('99999999.99')


def parse_int(value: Any, field: str, maximum: int = MAX_ID) -> int:
    """Whole integer within +/- ``maximum``; bools and floats with a fraction are rejected."""
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a whole number')
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.lstrip('-').isdigit()):
            raise ValidationError(f'{field} must be a whole number')
        value = int(text)
    if not isinstance(value, int):
        raise ValidationError(f'{field} must be a whole number')
    if abs(value) > maximum:
        raise ValidationError(f'{field} is out of range')
    return value


def parse_positive_int(value: Any, field: str, maximum: int = MAX_QUANTITY) -> int:
    number = parse_int(value, field, maximum)
    if number <= 0:
        raise ValidationError(f'{field} must be greater than 0')
    return number


def parse_date(value: Any, field: str) -> date:
    """ISO ``YYYY-MM-DD`` string, or an ISO datetime string, (or date) to date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if 'T' in text:
                if text.endswith('Z'):
                    text = text[:-1] + '+00:00'
                return datetime.fromisoformat(text).date()
            if len(text) == 10:
                return date.fromisoformat(text)
        except ValueError:
            pass
    raise ValidationError(f'{field} must be a date in YYYY-MM-DD format')


def parse_time(value: Any, field: str) -> time:
    """``HH:MM`` or ``HH:MM:SS`` string (or time) to time."""
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f'{field} must be a time in HH:MM[:SS] format')


def parse_money(value: Any, field: str, default: Optional[Decimal] = None) -> Decimal:
    """Non-negative amount quantized to cents, at most MAX_MONEY."""
    if value is None or value == '':
        if default is None:
            raise ValidationError(f'{field} is required')
        return default
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{field} must be a number')
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f'{field} must be zero or greater')
    if amount > MAX_MONEY:
        raise ValidationError(f'{field} must not exceed {MAX_MONEY}')
    return amount.quantize(Decimal('0.01'))
