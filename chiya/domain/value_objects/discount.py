"""Discount percentage value object"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from .money import Money

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DiscountPercent:
    """Promotional discount between 0 and 100 percent"""

    value: Decimal

    def __post_init__(self):
        try:
            value = Decimal(str(self.value))
        except InvalidOperation as e:
            raise ValueError("Discount must be a number") from e
        if not value.is_finite() or value < 0 or value > HUNDRED:
            raise ValueError("Discount must be between 0 and 100 percent")
        object.__setattr__(self, "value", value)

    @classmethod
    def optional(cls, value) -> "DiscountPercent | None":
        """Build a discount from a nullable column; 0 and None mean no discount"""
        if value is None or value == "":
            return None
        discount = cls(value)
        return discount if discount.value > 0 else None

    def apply(self, price: Money) -> Money:
        """price x (1 - discount / 100), rounded half-up to the cent"""
        return price.multiply((HUNDRED - self.value) / HUNDRED)

    def __str__(self) -> str:
        return f"{self.value.normalize()}%"
