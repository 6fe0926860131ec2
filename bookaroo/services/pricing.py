"""Stay price calculation."""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from bookaroo.errors import ValidationError

_SECONDS_PER_DAY = Decimal(int(timedelta(days=1).total_seconds()))
_CENTS = Decimal("0.01")


def stay_length_in_days(start_date: datetime, end_date: datetime) -> Decimal:
    """Length of a stay in days, keeping any fractional part from time-of-day.

    Raises:
        ValidationError: If ``end_date`` is not after ``start_date``.
    """
    if end_date <= start_date:
        raise ValidationError("end_date must be after start_date")
    delta = end_date - start_date
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1_000_000)
    return seconds / _SECONDS_PER_DAY


def calculate_total_price(price_per_night: Decimal, start_date: datetime, end_date: datetime) -> Decimal:
    """Nightly rate times stay length, rounded to cents."""
    if price_per_night < 0:
        raise ValidationError("price_per_night must not be negative")
    nights = stay_length_in_days(start_date, end_date)
    return (Decimal(price_per_night) * nights).quantize(_CENTS, rounding=ROUND_HALF_UP)
