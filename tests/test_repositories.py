"""
Tests for SQLAlchemy Repositories - Shop, MenuItem, Order
"""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from chiya.application.interfaces.change_feed import ChangeEventType
from chiya.domain.entities.cart_entity import Cart
from chiya.domain.entities.order_entity import NewOrder, snapshot_cart
from chiya.domain.value_objects.money import Money
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.database import models
from chiya.infrastructure.database.operations import (
    DEMO_MENU,
    DEMO_SHOP_SLUG,
    seed_demo_shop,
)
from chiya.infrastructure.repositories.session_handler import managed_session
from chiya.infrastructure.repositories.sqlalchemy_menu_item_repository import (
    SQLAlchemyMenuItemRepository,
)
from chiya.infrastructure.repositories.sqlalchemy_order_repository import (
    SQLAlchemyOrderRepository,
)
from chiya.infrastructure.repositories.sqlalchemy_shop_repository import (
    SQLAlchemyShopRepository,
)
from chiya.infrastructure.utilities.exceptions import (
    DatabaseError,
    ExternalServiceError,
    OrderCreationError,
)


@pytest.fixture
def published():
    """Change events captured per (shop id, event)"""
    return []


@pytest.fixture
def recording_feed(published):
    feed = AsyncMock()

    async def publish(shop_id, event):
        published.append((shop_id, event))

    feed.publish.side_effect = publish
    return feed


@pytest.fixture
def order_repository(db_manager, recording_feed):
    return SQLAlchemyOrderRepository(db_manager, change_feed=recording_feed)


@pytest.fixture
def new_order(stored_shop, masala_tea, samosa):
    cart = Cart()
    cart.add(masala_tea)
    cart.add(masala_tea)
    cart.add(samosa)
    return NewOrder(
        shop_id=stored_shop.id,
        table_number=5,
        items=snapshot_cart(cart),
        total_amount=cart.total(),
    )


class TestSQLAlchemyOrderRepository:
    """Test SQLAlchemy order repository"""

    @pytest.mark.asyncio
    async def test_create_order_persists_header_and_snapshots(
        self, order_repository, new_order, db_manager
    ):
        order = await order_repository.create_order(new_order)

        assert order.id
        assert order.status is OrderStatus.PENDING
        assert order.table_number == 5
        assert order.total_amount == Money.of(110)
        assert [(i.name, i.quantity) for i in order.items] == [
            ("Masala Tea", 2),
            ("Samosa", 1),
        ]
        assert order.created_at is not None
        assert order.created_at == order.updated_at

        with managed_session(db_manager) as session:
            count = len(session.scalars(select(models.OrderItem)).all())
        assert count == 2

    @pytest.mark.asyncio
    async def test_create_order_publishes_insert(self, order_repository, new_order, published):
        order = await order_repository.create_order(new_order)

        assert len(published) == 1
        shop_id, event = published[0]
        assert shop_id == order.shop_id
        assert event.event_type is ChangeEventType.INSERT
        assert event.table == "orders"
        assert event.new["id"] == order.id
        assert event.new["status"] == "pending"
        assert Decimal(event.new["total_amount"]) == Decimal("110")

    @pytest.mark.asyncio
    async def test_create_order_failure_writes_nothing(
        self, order_repository, new_order, db_manager, published
    ):
        with patch.object(
            db_manager, "get_session", side_effect=SQLAlchemyError("connection lost")
        ):
            with pytest.raises(OrderCreationError):
                await order_repository.create_order(new_order)

        assert published == []
        with managed_session(db_manager) as session:
            assert session.scalars(select(models.Order)).all() == []

    @pytest.mark.asyncio
    async def test_publish_failure_keeps_order(
        self, order_repository, new_order, recording_feed
    ):
        recording_feed.publish.side_effect = ExternalServiceError("redis down", "redis")

        order = await order_repository.create_order(new_order)

        assert await order_repository.get_order_by_id(order.id) is not None

    @pytest.mark.asyncio
    async def test_snapshots_ignore_later_catalog_edits(
        self, order_repository, new_order, db_manager
    ):
        order = await order_repository.create_order(new_order)
        menu = SQLAlchemyMenuItemRepository(db_manager)
        tea = await menu.find_by_id("item-masala-tea")
        tea.update_price(Money.of(99))
        await menu.save(tea)

        reloaded = await order_repository.get_order_by_id(order.id)

        assert reloaded.items[0].unit_price == Money.of(40)
        assert reloaded.total_amount == Money.of(110)
        assert reloaded.computed_total() == reloaded.total_amount

    @pytest.mark.asyncio
    async def test_status_stored_as_preparing(
        self, order_repository, new_order, db_manager, published
    ):
        order = await order_repository.create_order(new_order)

        updated = await order_repository.update_order_status(order.id, OrderStatus.STARTED)

        assert updated.status is OrderStatus.STARTED
        assert updated.updated_at >= order.updated_at
        with managed_session(db_manager) as session:
            assert session.get(models.Order, order.id).status == "preparing"

        _, event = published[-1]
        assert event.event_type is ChangeEventType.UPDATE
        assert event.new["status"] == "preparing"
        assert event.old == {"id": order.id}

    @pytest.mark.asyncio
    async def test_update_missing_order(self, order_repository, published):
        assert await order_repository.update_order_status("missing", OrderStatus.READY) is None
        assert published == []

    @pytest.mark.asyncio
    async def test_get_order_items_in_checkout_order(self, order_repository, new_order):
        order = await order_repository.create_order(new_order)

        items = await order_repository.get_order_items(order.id)

        assert [item.name for item in items] == ["Masala Tea", "Samosa"]
        assert await order_repository.get_order_items("missing") == []

    @pytest.mark.asyncio
    async def test_list_orders_newest_first(
        self, order_repository, new_order, stored_shop, db_manager
    ):
        first = await order_repository.create_order(new_order)
        second = await order_repository.create_order(new_order)
        with managed_session(db_manager) as session:
            session.get(models.Order, first.id).created_at = datetime(2026, 1, 1, tzinfo=UTC)

        orders = await order_repository.list_orders(stored_shop.id)
        limited = await order_repository.list_orders(stored_shop.id, limit=1)

        assert [o.id for o in orders] == [second.id, first.id]
        assert [o.id for o in limited] == [second.id]
        assert await order_repository.list_orders("other-shop") == []

    @pytest.mark.asyncio
    async def test_delete_order_publishes_delete(self, order_repository, new_order, published):
        order = await order_repository.create_order(new_order)

        assert await order_repository.delete_order(order.id) is True
        assert await order_repository.delete_order(order.id) is False
        assert await order_repository.get_order_by_id(order.id) is None

        _, event = published[-1]
        assert event.event_type is ChangeEventType.DELETE
        assert event.record_id == order.id

    @pytest.mark.asyncio
    async def test_read_failure_raises_database_error(self, order_repository, db_manager):
        with patch.object(db_manager, "get_session", side_effect=SQLAlchemyError("x")):
            with pytest.raises(DatabaseError):
                await order_repository.list_orders("shop")


class TestSQLAlchemyMenuItemRepository:
    """Test SQLAlchemy menu item repository"""

    @pytest.mark.asyncio
    async def test_list_and_find(self, db_manager, stored_shop):
        repo = SQLAlchemyMenuItemRepository(db_manager)

        items = await repo.list_by_shop(stored_shop.id)
        pakoda = next(item for item in items if item.name == "Pakoda")

        assert len(items) == 3
        assert pakoda.is_available is False
        assert (await repo.find_by_id("item-samosa")).price == Money.of(30)
        assert await repo.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_save_inserts_then_updates(self, db_manager, stored_shop, discounted_item):
        repo = SQLAlchemyMenuItemRepository(db_manager)
        discounted_item.id = None

        created = await repo.save(discounted_item)
        assert created.id
        assert created.unit_price == Money.of(80)

        created.set_availability(False)
        updated = await repo.save(created)

        assert updated.id == created.id
        assert updated.is_available is False
        assert len(await repo.list_by_shop(stored_shop.id)) == 4

    @pytest.mark.asyncio
    async def test_delete(self, db_manager, stored_shop):
        repo = SQLAlchemyMenuItemRepository(db_manager)
        assert await repo.delete("item-samosa") is True
        assert await repo.delete("item-samosa") is False


class TestSQLAlchemyShopRepository:
    """Test SQLAlchemy shop repository"""

    @pytest.mark.asyncio
    async def test_find_by_slug_and_id(self, db_manager, stored_shop):
        repo = SQLAlchemyShopRepository(db_manager)

        by_slug = await repo.find_by_slug("chiya-corner")
        by_id = await repo.find_by_id(stored_shop.id)

        assert by_slug.id == stored_shop.id
        assert by_id.slug.value == "chiya-corner"
        assert await repo.find_by_slug("nowhere") is None

    @pytest.mark.asyncio
    async def test_save_updates_settings(self, db_manager, stored_shop):
        repo = SQLAlchemyShopRepository(db_manager)
        shop = await repo.find_by_id(stored_shop.id)
        shop.apply_settings(is_open=False, logo_url="https://cdn/logo.png")

        await repo.save(shop)
        reloaded = await repo.find_by_id(stored_shop.id)

        assert reloaded.is_open is False
        assert reloaded.logo_url == "https://cdn/logo.png"


class TestSeedDemoShop:
    """Test demo data seeding"""

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_manager):
        first = seed_demo_shop(db_manager)
        second = seed_demo_shop(db_manager)

        assert first == second
        shop = await SQLAlchemyShopRepository(db_manager).find_by_slug(DEMO_SHOP_SLUG)
        items = await SQLAlchemyMenuItemRepository(db_manager).list_by_shop(shop.id)
        assert len(items) == len(DEMO_MENU)
        pakoda = next(item for item in items if item.name == "Pakoda")
        assert pakoda.unit_price == Money.of(54)
