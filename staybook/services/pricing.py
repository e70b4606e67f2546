"""Money rules shared by inventory and reservation pricing."""

from decimal import Decimal

from staybook.exceptions import InvalidInputError

_CENT = Decimal("0.01")
_MAX_AMOUNT = Decimal("99999999.99")


def require_money(value: Decimal, field: str, *, allow_zero: bool = False) -> Decimal:
    """Validate a currency amount and return it with two decimal places.

    Raises:
        InvalidInputError: If the value is negative (or zero when not allowed),
            not finite, has sub-cent precision, or does not fit a
            ``Numeric(10, 2)`` column.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if not value.is_finite():
        raise InvalidInputError(f"{field} must be a finite amount")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "zero or more" if allow_zero else "greater than zero"
        raise InvalidInputError(f"{field} must be {bound}")
    if value > _MAX_AMOUNT:
        raise InvalidInputError(f"{field} must not exceed {_MAX_AMOUNT}")
    if value != value.quantize(_CENT):
        raise InvalidInputError(f"{field} must have at most two decimal places")
    return value.quantize(_CENT)


def total_for(unit_price: Decimal, nights: int) -> Decimal:
    """Exact total for a stay: ``unit_price * nights``, two decimal places."""
    return (unit_price * nights).quantize(_CENT)
