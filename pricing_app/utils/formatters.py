"""
Formatting helpers for quote documents.
Money in US style ($1,234.56), multipliers and the quote date stamp.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from datetime import date, datetime
from typing import Union, Optional

CENTS = Decimal('0.01')


def round_money(value: Union[int, float, Decimal, str]) -> Decimal:
    """Round half-up to cents."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def money(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount with dollar sign, thousands separator and 2 decimals.

    Examples:
        money(1500) -> "$1,500.00"
        money(Decimal('112.5')) -> "$112.50"
        money(-3.456) -> "-$3.46"
        money(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        num = round_money(value)
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    sign = "-" if num < 0 else ""
    return f"{sign}${abs(num):,.2f}"


def multiplier(value: Union[Decimal, int, float, None], places: int = 4) -> str:
    """
    Format a price multiplier as shown next to a discount name.

    Examples:
        multiplier(Decimal('0.95')) -> "x0.9500"
        multiplier(None) -> "x1.0000"
    """
    if value is None:
        value = Decimal('1')
    quantum = Decimal(1).scaleb(-places)
    num = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"x{num:.{places}f}"


def quote_date(value: Optional[Union[date, datetime]] = None) -> str:
    """
    Date stamp for the quote header: MM/DD/YYYY (today when omitted).

    Examples:
        quote_date(date(2026, 1, 12)) -> "01/12/2026"
    """
    if value is None:
        value = date.today()

    if isinstance(value, datetime):
        value = value.date()

    return value.strftime("%m/%d/%Y")
