"""
Catalog Management Use Case Tests
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from chiya.application.dtos.catalog_dtos import MenuItemRequest
from chiya.application.dtos.shop_dtos import AdminPrincipal
from chiya.application.use_cases.catalog_management_use_case import (
    CatalogManagementUseCase,
)
from chiya.domain.value_objects.menu_category import MenuCategory
from chiya.domain.value_objects.money import Money
from chiya.infrastructure.utilities.exceptions import DatabaseError


@pytest.fixture
def principal(shop):
    return AdminPrincipal(
        user_id="user-1", email="owner@example.com", shop_id=shop.id, access_token="t"
    )


@pytest.fixture
def menu_repository(masala_tea, samosa, discounted_item):
    repo = MagicMock()
    samosa.is_available = False
    repo.list_by_shop = AsyncMock(return_value=[masala_tea, samosa, discounted_item])
    repo.find_by_id = AsyncMock(return_value=masala_tea)
    repo.save = AsyncMock(side_effect=lambda item: item)
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def catalog(menu_repository):
    return CatalogManagementUseCase(menu_repository)


class TestMenuListing:
    """Test customer and admin menu listing"""

    @pytest.mark.asyncio
    async def test_admin_sees_everything(self, catalog, shop):
        response = await catalog.list_menu(shop.id)
        assert response.success is True
        assert len(response.items) == 3

    @pytest.mark.asyncio
    async def test_customer_menu_hides_unavailable(self, catalog, shop):
        response = await catalog.list_available_menu(shop.id)
        assert [item.name for item in response.items] == ["Masala Tea", "Thali Set"]

    @pytest.mark.asyncio
    async def test_category_filter(self, catalog, shop):
        response = await catalog.list_available_menu(shop.id, "Tea")
        assert [item.name for item in response.items] == ["Masala Tea"]

        response = await catalog.list_available_menu(shop.id, "snacks")
        assert response.items == []

    @pytest.mark.asyncio
    async def test_unknown_category(self, catalog, shop):
        response = await catalog.list_available_menu(shop.id, "soup")
        assert response.success is False
        assert "Unknown menu category" in response.error_message

    @pytest.mark.asyncio
    async def test_highlights(self, catalog, shop):
        best = await catalog.list_best_sellers(shop.id)
        special = await catalog.list_todays_specials(shop.id)
        assert [item.name for item in best.items] == ["Masala Tea"]
        assert [item.name for item in special.items] == ["Thali Set"]

    @pytest.mark.asyncio
    async def test_repository_failure(self, catalog, menu_repository, shop):
        menu_repository.list_by_shop.side_effect = DatabaseError("down", "list")
        response = await catalog.list_available_menu(shop.id)
        assert response.success is False
        assert response.error_message == DatabaseError("x").user_message


class TestMenuEditing:
    """Test admin menu CRUD"""

    @pytest.mark.asyncio
    async def test_create_item(self, catalog, menu_repository, principal):
        request = MenuItemRequest(
            name="Ginger Tea",
            price=Decimal("35"),
            category="tea",
            discount=Decimal("10"),
        )

        response = await catalog.create_item(principal, request)

        assert response.success is True
        item = menu_repository.save.call_args.args[0]
        assert item.id is None
        assert item.shop_id == principal.shop_id
        assert item.category is MenuCategory.TEA
        assert item.unit_price == Money.of("31.50")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "request_kwargs",
        [
            {"name": "", "price": Decimal("35"), "category": "tea"},
            {"name": "Tea", "price": Decimal("0"), "category": "tea"},
            {"name": "Tea", "price": Decimal("-5"), "category": "tea"},
            {"name": "Tea", "price": Decimal("35"), "category": "soup"},
            {"name": "Tea", "price": Decimal("35"), "category": "tea", "discount": 120},
        ],
    )
    async def test_invalid_item_rejected(
        self, catalog, menu_repository, principal, request_kwargs
    ):
        response = await catalog.create_item(principal, MenuItemRequest(**request_kwargs))

        assert response.success is False
        assert response.error_message
        menu_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_keeps_identity(self, catalog, menu_repository, principal, masala_tea):
        request = MenuItemRequest(name="Masala Chai", price=Decimal("45"), category="tea")

        response = await catalog.update_item(principal, masala_tea.id, request)

        assert response.success is True
        assert response.item.id == masala_tea.id
        assert response.item.price == Money.of(45)

    @pytest.mark.asyncio
    async def test_other_shops_item_rejected(
        self, catalog, menu_repository, masala_tea
    ):
        intruder = AdminPrincipal("user-2", "x@example.com", "another-shop", "t")

        response = await catalog.set_availability(intruder, masala_tea.id, False)

        assert response.success is False
        assert response.error_message == "You do not have admin access."
        menu_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_availability(self, catalog, principal, masala_tea):
        response = await catalog.set_availability(principal, masala_tea.id, False)
        assert response.success is True
        assert response.item.is_available is False

    @pytest.mark.asyncio
    async def test_delete_missing_item(self, catalog, menu_repository, principal):
        menu_repository.find_by_id.return_value = None

        response = await catalog.delete_item(principal, "gone")

        assert response.success is False
        assert response.error_message == "This menu item no longer exists."
        menu_repository.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_item(self, catalog, menu_repository, principal, masala_tea):
        response = await catalog.delete_item(principal, masala_tea.id)
        assert response.success is True
        menu_repository.delete.assert_awaited_once_with(masala_tea.id)
