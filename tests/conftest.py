"""
Test configuration and fixtures for the Chiya ordering platform
"""

import asyncio
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from chiya.domain.entities.menu_item_entity import MenuItem
from chiya.domain.entities.order_entity import Order, OrderItem
from chiya.domain.entities.shop_entity import Shop
from chiya.domain.value_objects.discount import DiscountPercent
from chiya.domain.value_objects.money import Money
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.configuration.config import Settings, reset_config
from chiya.infrastructure.database import models
from chiya.infrastructure.database.operations import DatabaseManager
from chiya.infrastructure.realtime.memory_feed import InMemoryChangeFeed
from chiya.infrastructure.repositories.session_handler import managed_session

SHOP_ID = "shop-chiya-corner"
OTHER_SHOP_ID = "shop-tea-house"


@pytest.fixture(autouse=True)
def clean_config():
    """Never share cached settings between tests"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the environment and any .env file"""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        environment="test",
        log_dir=str(tmp_path / "logs"),
        table_session_file=str(tmp_path / "session.json"),
        public_base_url="https://order.example.com",
    )


@pytest.fixture
def shop():
    return Shop(
        id=SHOP_ID,
        slug="chiya-corner",
        name="Chiya Corner",
        table_count=10,
        description="Tea and snacks",
    )


@pytest.fixture
def other_shop():
    return Shop(id=OTHER_SHOP_ID, slug="tea-house", name="Tea House", table_count=4)


@pytest.fixture
def masala_tea():
    return MenuItem(
        id="item-masala-tea",
        shop_id=SHOP_ID,
        name="Masala Tea",
        price=Money.of(40),
        category="tea",
        is_best_seller=True,
    )


@pytest.fixture
def samosa():
    return MenuItem(
        id="item-samosa",
        shop_id=SHOP_ID,
        name="Samosa",
        price=Money.of(30),
        category="snacks",
    )


@pytest.fixture
def discounted_item():
    """Price 100 with a 20% promotion"""
    return MenuItem(
        id="item-thali",
        shop_id=SHOP_ID,
        name="Thali Set",
        price=Money.of(100),
        category="extra",
        discount=DiscountPercent(Decimal("20")),
        is_todays_special=True,
    )


def make_order(
    order_id="order-1",
    shop_id=SHOP_ID,
    status=OrderStatus.PENDING,
    table_number=5,
    items=None,
    created_at=None,
):
    """Persisted-looking order with snapshot items"""
    if items is None:
        items = (
            OrderItem(name="Masala Tea", unit_price=Money.of(40), quantity=2),
            OrderItem(name="Samosa", unit_price=Money.of(30), quantity=1),
        )
    total = Money.sum(item.line_total for item in items)
    now = created_at or datetime(2026, 3, 1, 9, 30, tzinfo=UTC)
    return Order(
        id=order_id,
        shop_id=shop_id,
        table_number=table_number,
        status=status,
        total_amount=total,
        items=tuple(items),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def db_manager(test_settings):
    """Fresh in-memory SQLite database with all tables"""
    manager = DatabaseManager(test_settings)
    manager.create_tables()
    yield manager
    manager.close()


@pytest.fixture
def stored_shop(db_manager, shop):
    """The sample shop and its menu written to the database"""
    with managed_session(db_manager) as session:
        session.add(
            models.Shop(
                id=shop.id,
                slug=shop.slug.value,
                name=shop.name,
                description=shop.description,
                table_count=shop.table_count,
            )
        )
        session.add_all(
            [
                models.MenuItem(
                    id="item-masala-tea",
                    shop_id=shop.id,
                    name="Masala Tea",
                    price=Decimal("40"),
                    category="tea",
                    is_best_seller=True,
                ),
                models.MenuItem(
                    id="item-samosa",
                    shop_id=shop.id,
                    name="Samosa",
                    price=Decimal("30"),
                    category="snacks",
                ),
                models.MenuItem(
                    id="item-pakoda",
                    shop_id=shop.id,
                    name="Pakoda",
                    price=Decimal("60"),
                    category="snacks",
                    is_available=False,
                ),
            ]
        )
    return shop


@pytest.fixture
def change_feed():
    return InMemoryChangeFeed()


@pytest.fixture
def settle(change_feed):
    """Wait until every open subscription has handled its delivered events"""

    async def _settle():
        await asyncio.wait_for(change_feed.join(), timeout=2)

    return _settle


@pytest.fixture
def order_factory():
    return make_order
