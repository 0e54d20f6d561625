from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import total_ordering
from typing import Union

# Number of sub-units per whole currency unit (4 decimal places).
SCALE = 10_000

# Balances are assumed to stay far below this; exceeding it is not recoverable.
MAX_UNITS = 2 ** 50


class AmountOverflowError(ArithmeticError):
    pass


class AmountUnderflowError(ArithmeticError):
    pass


@total_ordering
@dataclass(frozen=True)
class Amount:
    """
    Non-negative monetary value stored as an integer count of 1/SCALE units.
    Never uses float.
    """

    units: int = 0

    def __post_init__(self):
        if not isinstance(self.units, int) or isinstance(self.units, bool):
            raise TypeError(f"Amount units must be int, got {type(self.units).__name__}")
        if self.units < 0:
            raise ValueError(f"Amount cannot be negative: {self.units} units")

    @classmethod
    def from_decimal(cls, value: Union[Decimal, int]) -> "Amount":
        """Convert an exact decimal value; more than 4 fractional digits is rejected."""
        value = Decimal(value)
        if not value.is_finite():
            raise ValueError(f"Amount must be finite, got {value}")

        scaled = value * SCALE
        if scaled != scaled.to_integral_value():
            raise ValueError(f"Amount {value} has more than 4 decimal places")
        if scaled > MAX_UNITS:
            raise ValueError(f"Amount {value} exceeds the supported balance range")
        return cls(int(scaled))

    @classmethod
    def parse(cls, text: str) -> "Amount":
        try:
            value = Decimal(text.strip())
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {text!r}") from None
        return cls.from_decimal(value)

    def checked_add(self, other: "Amount") -> "Amount":
        units = self.units + other.units
        if units > MAX_UNITS:
            raise AmountOverflowError(f"{self} + {other} exceeds the supported balance range")
        return Amount(units)

    def checked_sub(self, other: "Amount") -> "Amount":
        units = self.units - other.units
        if units < 0:
            raise AmountUnderflowError(f"{self} - {other} would be negative")
        return Amount(units)

    def to_decimal(self) -> Decimal:
        return Decimal(self.units).scaleb(-4)

    def is_zero(self) -> bool:
        return self.units == 0

    def __lt__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.units < other.units

    def __str__(self) -> str:
        return f"{self.to_decimal():.4f}"


Amount.ZERO = Amount(0)
