"""
Order entity

An order is a persisted, immutable-total purchase request tied to one
table at one shop. Item snapshots are frozen copies of name, price and
quantity taken at checkout, so later catalog edits never reach them.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable

from chiya.domain.entities.cart_entity import Cart
from chiya.domain.value_objects.money import Money
from chiya.domain.value_objects.order_status import OrderStatus


@dataclass(frozen=True)
class OrderItem:
    """Frozen snapshot of one ordered line"""

    name: str
    unit_price: Money
    quantity: int
    menu_item_id: str | None = None
    id: str | None = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Order item name cannot be empty")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("Order item quantity must be an integer")
        if self.quantity <= 0:
            raise ValueError("Order item quantity must be positive")

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


def total_for(items: Iterable[OrderItem], currency: str | None = None) -> Money:
    """Sum of snapshot price x quantity"""
    items = list(items)
    if currency is None:
        currency = items[0].unit_price.currency if items else Money.zero().currency
    return Money.sum((item.line_total for item in items), currency)


def snapshot_cart(cart: Cart) -> tuple[OrderItem, ...]:
    """Freeze the cart's entries into order item snapshots"""
    return tuple(
        OrderItem(
            name=entry.menu_item.name,
            unit_price=entry.unit_price,
            quantity=entry.quantity,
            menu_item_id=entry.item_id,
        )
        for entry in cart.items
    )


@dataclass(frozen=True)
class NewOrder:
    """Order header and snapshots ready to be persisted as one unit"""

    shop_id: str
    table_number: int
    items: tuple[OrderItem, ...]
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING

    def __post_init__(self):
        if not self.items:
            raise ValueError("An order needs at least one item")
        if self.total_amount != total_for(self.items, self.total_amount.currency):
            raise ValueError("Order total does not match its item snapshots")


@dataclass(frozen=True)
class Order:
    """Order domain entity"""

    id: str
    shop_id: str
    table_number: int
    status: OrderStatus
    total_amount: Money
    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        object.__setattr__(self, "status", OrderStatus.parse(self.status))
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def computed_total(self) -> Money:
        """Total recomputed from the snapshots (never from live prices)"""
        return total_for(self.items, self.total_amount.currency)

    def with_changes(
        self, status: OrderStatus | None = None, updated_at: datetime | None = None
    ) -> "Order":
        """Copy with only the given fields replaced"""
        changes = {}
        if status is not None:
            changes["status"] = OrderStatus.parse(status)
        if updated_at is not None:
            changes["updated_at"] = updated_at
        return replace(self, **changes) if changes else self

    def with_items(self, items: Iterable[OrderItem]) -> "Order":
        return replace(self, items=tuple(items))

