"""
Row mapping between storage rows and domain entities

Storage uses snake_case columns and labels the in-progress order status
``preparing``; the domain uses ``OrderStatus.STARTED``. This module is the
only place the two labels meet.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from chiya.domain.entities.menu_item_entity import MenuItem
from chiya.domain.entities.order_entity import Order, OrderItem
from chiya.domain.entities.shop_entity import Shop
from chiya.domain.value_objects.discount import DiscountPercent
from chiya.domain.value_objects.money import DEFAULT_CURRENCY, Money
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.database import models

STORAGE_STATUS_LABELS = {
    OrderStatus.PENDING: "pending",
    OrderStatus.STARTED: "preparing",
    OrderStatus.READY: "ready",
    OrderStatus.CANCELLED: "cancelled",
}


def status_to_storage(status) -> str:
    return STORAGE_STATUS_LABELS[OrderStatus.parse(status)]


def status_from_storage(label) -> OrderStatus:
    return OrderStatus.parse(label)


def parse_timestamp(value) -> Optional[datetime]:
    """Accept datetimes and ISO strings; naive values are taken as UTC"""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise ValueError(f"Not a timestamp: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    value = parse_timestamp(value)
    return value.isoformat() if value else None


def shop_from_model(model: models.Shop) -> Shop:
    return Shop(
        id=model.id,
        slug=model.slug,
        name=model.name,
        description=model.description or "",
        logo_url=model.logo_url,
        table_count=model.table_count,
        is_open=model.is_open,
        sound_alerts=model.sound_alerts,
        browser_notifications=model.browser_notifications,
        updated_at=parse_timestamp(model.updated_at),
    )


def menu_item_from_model(
    model: models.MenuItem, currency: str = DEFAULT_CURRENCY
) -> MenuItem:
    return MenuItem(
        id=model.id,
        shop_id=model.shop_id,
        name=model.name,
        description=model.description or "",
        price=Money(Decimal(model.price), currency),
        category=model.category,
        is_available=model.is_available,
        discount=DiscountPercent.optional(model.discount),
        is_best_seller=model.is_best_seller,
        is_todays_special=model.is_todays_special,
        image_url=model.image_url,
        created_at=parse_timestamp(model.created_at),
        updated_at=parse_timestamp(model.updated_at),
    )


def order_item_from_model(
    model: models.OrderItem, currency: str = DEFAULT_CURRENCY
) -> OrderItem:
    return OrderItem(
        id=model.id,
        menu_item_id=model.menu_item_id,
        name=model.name,
        unit_price=Money(Decimal(model.price), currency),
        quantity=model.quantity,
    )


def order_from_model(
    model: models.Order,
    items: Optional[Iterable[OrderItem]] = None,
    currency: str = DEFAULT_CURRENCY,
) -> Order:
    if items is None:
        items = [order_item_from_model(item, currency) for item in model.items]
    return Order(
        id=model.id,
        shop_id=model.shop_id,
        table_number=model.table_number,
        status=status_from_storage(model.status),
        total_amount=Money(Decimal(model.total_amount), currency),
        items=tuple(items),
        created_at=parse_timestamp(model.created_at),
        updated_at=parse_timestamp(model.updated_at),
    )


def order_row(model: models.Order) -> Dict[str, Any]:
    """JSON-safe snake_case row as carried by change events"""
    return {
        "id": model.id,
        "shop_id": model.shop_id,
        "table_number": model.table_number,
        "status": model.status,
        "total_amount": str(model.total_amount),
        "created_at": format_timestamp(model.created_at),
        "updated_at": format_timestamp(model.updated_at),
    }


def order_from_row(
    row: Dict[str, Any],
    items: Iterable[OrderItem] = (),
    currency: str = DEFAULT_CURRENCY,
) -> Order:
    """Build an order from a change-event row plus separately fetched items"""
    return Order(
        id=str(row["id"]),
        shop_id=str(row["shop_id"]),
        table_number=int(row["table_number"]),
        status=status_from_storage(row.get("status", "pending")),
        total_amount=Money(Decimal(str(row["total_amount"])), currency),
        items=tuple(items),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
