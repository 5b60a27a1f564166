# pylint: disable=too-many-instance-attributes
"""
Menu Item Entity - a shop's catalog entry
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from chiya.domain.value_objects.discount import DiscountPercent
from chiya.domain.value_objects.menu_category import MenuCategory
from chiya.domain.value_objects.money import Money


@dataclass
class MenuItem:
    """Menu item domain entity"""

    id: str | None
    shop_id: str
    name: str
    price: Money
    category: MenuCategory
    description: str = ""
    is_available: bool = True
    discount: DiscountPercent | None = None
    is_best_seller: bool = False
    is_todays_special: bool = False
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        """Validate the menu item after initialization"""
        if not self.name or not self.name.strip():
            raise ValueError("Menu item name cannot be empty")
        self.name = self.name.strip()

        if not self.shop_id:
            raise ValueError("Menu item must belong to a shop")

        if not self.price.is_positive():
            raise ValueError("Menu item price must be positive")

        self.category = MenuCategory.parse(self.category)

    @property
    def unit_price(self) -> Money:
        """Price after the promotional discount, if any"""
        if self.discount is None:
            return self.price
        return self.discount.apply(self.price)

    @property
    def has_discount(self) -> bool:
        return self.discount is not None and self.discount.value > 0

    def set_availability(self, is_available: bool) -> None:
        """Show or hide the item on the customer menu"""
        self.is_available = is_available
        self.updated_at = datetime.now(UTC)

    def update_price(self, new_price: Money) -> None:
        """Update item price; existing orders keep their snapshots"""
        if not new_price.is_positive():
            raise ValueError("Price must be positive")
        self.price = new_price
        self.updated_at = datetime.now(UTC)
