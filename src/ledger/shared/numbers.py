"""Decimal money and whole-number quantity helpers.

Money is persisted as canonical decimal strings and only ever manipulated as
``Decimal``. Nothing here rounds; presentation layers may quantize.
"""

from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError

ZERO = Decimal("0")


def to_decimal(value, field="amount"):
    """Convert ``value`` to a finite ``Decimal``.

    Floats go through ``str()`` so ``1.1`` becomes ``Decimal("1.1")`` rather
    than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError({field: ["A decimal amount is required"]})
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError({field: [f"'{value}' is not a valid decimal amount"]}) from None
    if not amount.is_finite():
        raise ValidationError({field: [f"'{value}' is not a valid decimal amount"]})
    return amount


def money_text(amount):
    """Canonical text form used for persisted money fields."""
    return str(amount)


def require_non_negative(value, field):
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise ValidationError({field: ["Must not be negative"]})
    return amount


def require_positive(value, field):
    amount = to_decimal(value, field)
    if amount <= ZERO:
        raise ValidationError({field: ["Must be greater than zero"]})
    return amount


def require_quantity(value, field="quantity"):
    """Return ``value`` as an ``int`` if it is a whole number greater than zero."""
    if isinstance(value, bool):
        raise ValidationError({field: ["Quantity must be a whole number"]})
    if isinstance(value, int):
        quantity = value
    else:
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError({field: [f"'{value}' is not a whole number"]}) from None
        if not number.is_finite() or number != number.to_integral_value():
            raise ValidationError({field: [f"'{value}' is not a whole number"]})
        quantity = int(number)
    if quantity <= 0:
        raise ValidationError({field: ["Quantity must be a positive whole number"]})
    return quantity
