"""Pricing calculator: discount, customer margin and line aggregation."""

from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from pricing_app.exceptions import ValidationError

Number = Union[Decimal, int, float, str]

ZERO = Decimal('0')
ONE = Decimal('1')


def to_decimal(value: Number, field: str = 'value') -> Decimal:
    """Convert user or database input to Decimal without float artifacts."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f'{field} must be a number.')
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f'{field} must be a number.')
    if not result.is_finite():
        raise ValidationError(f'{field} must be a finite number.')
    return result


def validate_rate(discount_rate: Number) -> Decimal:
    """Return the discount rate as Decimal; it must lie in [0, 1)."""
    rate = to_decimal(discount_rate, 'Discount rate')
    if rate < ZERO or rate >= ONE:
        raise ValidationError(f'Discount rate must be between 0 and 1 (got {rate}).')
    return rate


def validate_margin(margin: Number) -> Decimal:
    """Return the profit margin as Decimal; it must lie in [0, 1)."""
    value = to_decimal(margin, 'Margin')
    if value < ZERO or value >= ONE:
        raise ValidationError(f'Margin must be between 0 and 1 (got {value}).')
    return value


def validate_quantity(quantity) -> int:
    """Quantities are positive integers; anything else is rejected."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError('Quantity must be a whole number.')
    if quantity <= 0:
        raise ValidationError('Quantity must be greater than 0.')
    return quantity


def validate_price(price: Number, field: str = 'List price') -> Decimal:
    value = to_decimal(price, field)
    if value < ZERO:
        raise ValidationError(f'{field} cannot be negative.')
    return value


def apply_discount(list_price: Number, discount_rate: Number) -> Decimal:
    """
    Distributor unit price after the tier discount.

    Out-of-range rates are rejected, never clamped.
    """
    return validate_price(list_price) * (ONE - validate_rate(discount_rate))


def line_total(discounted_price: Number, quantity: int) -> Decimal:
    return validate_price(discounted_price, 'Unit price') * validate_quantity(quantity)


def customer_price(discounted_price: Number, margin: Number) -> Decimal:
    """
    Price charged to the end customer so that ``margin`` is the share of
    the customer price kept by the distributor.

    A zero margin returns the distributor price unchanged.
    """
    price = validate_price(discounted_price, 'Unit price')
    value = validate_margin(margin)
    if value <= ZERO:
        return price
    return price / (ONE - value)


def customer_line_total(discounted_price: Number, margin: Number, quantity: int) -> Decimal:
    return customer_price(discounted_price, margin) * validate_quantity(quantity)


def subtotal(totals: Iterable[Decimal]) -> Decimal:
    """Sum of line totals; an empty quote totals zero."""
    return sum(totals, ZERO)
