"""
Billing arithmetic for a single electricity record.
Pure functions: no database, no request context.
"""
import math
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

DEFAULT_RATE_PER_UNIT = Decimal('8.00')
MIN_RATE_PER_UNIT = Decimal('0.01')
MAX_RATE_PER_UNIT = Decimal('1000')

# Late fee: 5% of the bill per day past due
LATE_FEE_RATE = Decimal('0.05')

CENT = Decimal('0.01')
# rate_per_unit column scale
RATE_STEP = Decimal('0.0001')

READING_ORDER_MSG = 'current reading must be greater than or equal to previous reading'


class ReadingError(ValueError):
    """Reading pair or rate rejected before anything is persisted"""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


def to_decimal(value):
    """Decimal from int, str, float or Decimal; floats go through str to keep 8.1 == 8.10."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value):
    """Round half-up to the cent."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def validate_reading(value, field):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ReadingError(f'{field.replace("_", " ")} must be a non-negative integer', field)
    if value < 0:
        raise ReadingError(f'{field.replace("_", " ")} cannot be negative', field)
    return value


def validate_rate(rate):
    """Range-checked rate, rounded half-up to the stored 4 decimal places."""
    rate = to_decimal(rate).quantize(RATE_STEP, rounding=ROUND_HALF_UP)
    if rate < MIN_RATE_PER_UNIT or rate > MAX_RATE_PER_UNIT:
        raise ReadingError(
            f'rate per unit must be between {MIN_RATE_PER_UNIT} and {MAX_RATE_PER_UNIT}',
            'rate_per_unit',
        )
    return rate


def compute_units(previous_reading, current_reading):
    """Units consumed between two readings; rejects a decreasing pair."""
    validate_reading(previous_reading, 'previous_reading')
    validate_reading(current_reading, 'current_reading')
    if current_reading < previous_reading:
        raise ReadingError(READING_ORDER_MSG, 'current_reading')
    return current_reading - previous_reading


def compute_amount(units, rate_per_unit):
    """units * rate rounded half-up to 2 decimals."""
    return round_money(Decimal(units) * to_decimal(rate_per_unit))


def compute_bill(previous_reading, current_reading, rate_per_unit=DEFAULT_RATE_PER_UNIT):
    """
    Derive (units_consumed, total_amount) from a reading pair and rate.
    Raises ReadingError when any input is out of range.
    """
    rate = validate_rate(rate_per_unit)
    units = compute_units(previous_reading, current_reading)
    return units, compute_amount(units, rate)


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_due(due_date, today=None):
    """Whole days from today to the due date; negative once past due."""
    today = _as_date(today) or date.today()
    return (_as_date(due_date) - today).days


def compute_late_fee(total_amount, due_date, payment_status, now=None):
    """
    Late fee for an unpaid bill: LATE_FEE_RATE of the amount per day late,
    partial days rounded up. Zero when paid, cancelled or not yet due.
    """
    if payment_status in ('paid', 'cancelled') or due_date is None:
        return Decimal('0.00')
    now = now or datetime.now()
    due_start = datetime.combine(_as_date(due_date), datetime.min.time())
    # the due date itself is not late
    late_since = due_start.replace(hour=23, minute=59, second=59, microsecond=999999)
    if now <= late_since:
        return Decimal('0.00')
    days_late = math.ceil((now - late_since).total_seconds() / 86400)
    return round_money(to_decimal(total_amount) * LATE_FEE_RATE * days_late)
