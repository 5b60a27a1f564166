"""
Cart entity

Client-local, session-scoped selection of menu items. A pure in-memory
reducer: every operation is total and nothing is persisted.
"""

from dataclasses import dataclass, replace

from chiya.domain.entities.menu_item_entity import MenuItem
from chiya.domain.value_objects.money import DEFAULT_CURRENCY, Money


@dataclass
class CartItem:
    """A menu item snapshot plus the selected quantity"""

    menu_item: MenuItem
    quantity: int = 1

    @property
    def item_id(self) -> str:
        return self.menu_item.id

    @property
    def unit_price(self) -> Money:
        """Discount-adjusted unit price"""
        return self.menu_item.unit_price

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


class Cart:
    """Shopping cart keyed by menu item id, in insertion order"""

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self._items: dict[str, CartItem] = {}
        self._currency = currency

    def add(self, item: MenuItem) -> None:
        """Add one unit of ``item``; repeated adds bump the quantity"""
        existing = self._items.get(item.id)
        if existing:
            existing.quantity += 1
        else:
            self._items[item.id] = CartItem(menu_item=replace(item), quantity=1)

    def remove(self, item_id: str) -> None:
        """Drop the entry; no-op when absent"""
        self._items.pop(item_id, None)

    def set_quantity(self, item_id: str, quantity: int) -> None:
        """Overwrite the quantity; zero or negative removes the entry"""
        if quantity <= 0:
            self.remove(item_id)
            return
        entry = self._items.get(item_id)
        if entry:
            entry.quantity = quantity

    def clear(self) -> None:
        self._items.clear()

    def total(self) -> Money:
        """Sum of discount-adjusted unit price x quantity"""
        return Money.sum(
            (entry.line_total for entry in self._items.values()), self._currency
        )

    def get(self, item_id: str) -> CartItem | None:
        return self._items.get(item_id)

    @property
    def items(self) -> list[CartItem]:
        return list(self._items.values())

    @property
    def item_count(self) -> int:
        """Total units across all entries"""
        return sum(entry.quantity for entry in self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._items
