"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from itrack.domain.exceptions import ValidationError

# Stock levels and line quantities are whole units or exact decimals
# (kilograms of flour, litres of juice). Floats are never stored.
Number = int | Decimal


def to_number(value: str | float | int | Decimal) -> Number:
    """Coerce user input to ``int`` when integral, ``Decimal`` otherwise."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid number: {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid number: {value!r}") from exc
    if not number.is_finite():
        raise ValidationError(f"Invalid number: {value!r}")
    if number == number.to_integral_value():
        return int(number)
    return number


@dataclass(frozen=True)
class Money:
    """Monetary amount in the shop's single currency.

    Uses Decimal to avoid floating-point rounding errors. Zero is a
    valid price (freshly provisioned products default to it).
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Invalid money amount: {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))


@dataclass(frozen=True)
class Quantity:
    """A strictly positive quantity of a product.

    Enforces the invariant that a production line can never consume or
    produce zero or negative units.
    """

    value: Number

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, Decimal)):
            raise ValidationError(
                f"Quantity must be an integer or Decimal, got {type(self.value).__name__}"
            )
        if isinstance(self.value, Decimal) and not self.value.is_finite():
            raise ValidationError(f"Invalid quantity: {self.value}")
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(value: str | float | int | Decimal) -> Quantity:
        return Quantity(to_number(value))
