"""
Money value object

Fixed-point amounts in a single, configured currency. Every constructed
value is quantized to the cent, half-up, so catalog prices, discounted
unit prices, line totals and order totals all round identically.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

DEFAULT_CURRENCY = "NPR"
CENT = Decimal("0.01")

Numeric = Union[int, float, str, Decimal]


def _to_decimal(value: Numeric) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


@dataclass(frozen=True)
class Money:
    """Non-negative amount of one currency, stored to the cent"""

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        amount = _to_decimal(self.amount)
        if not amount.is_finite():
            raise ValueError("Money amount must be a finite number")
        if amount < 0:
            raise ValueError("Money amount cannot be negative")
        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter code")

        object.__setattr__(self, "amount", amount.quantize(CENT, rounding=ROUND_HALF_UP))
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def of(cls, amount: Numeric, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(_to_decimal(amount), currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(Decimal("0"), currency)

    @classmethod
    def sum(cls, amounts: Iterable["Money"], currency: str = DEFAULT_CURRENCY) -> "Money":
        """Total of ``amounts``; an empty iterable gives zero in ``currency``"""
        total = cls.zero(currency)
        for amount in amounts:
            total = total.add(amount)
        return total

    def _same_currency(self, other: "Money", action: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {action} {self.currency} and {other.currency} amounts"
            )

    def add(self, other: "Money") -> "Money":
        self._same_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def multiply(self, factor: Numeric) -> "Money":
        """Scale by a non-negative factor (quantities, discount ratios)"""
        factor = _to_decimal(factor)
        if factor < 0:
            raise ValueError("Cannot multiply money by negative factor")
        return Money(self.amount * factor, self.currency)

    def divide(self, count: int) -> "Money":
        """Even share of this amount, e.g. an average order value"""
        if count <= 0:
            raise ValueError("Cannot divide money into fewer than one share")
        return Money(self.amount / Decimal(count), self.currency)

    def is_positive(self) -> bool:
        return self.amount > 0

    def format_display(self) -> str:
        return f"{self.currency} {self.amount:.2f}"

    def __str__(self) -> str:
        return self.format_display()

    def __lt__(self, other: "Money") -> bool:
        self._same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._same_currency(other, "compare")
        return self.amount <= other.amount

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __mul__(self, factor: Numeric) -> "Money":
        return self.multiply(factor)

    __rmul__ = __mul__
