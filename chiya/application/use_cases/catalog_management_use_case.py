"""
Catalog Management Use Case

Menu listing for customers and menu CRUD for shop admins.
"""

import logging
from typing import Optional

from chiya.application.dtos.catalog_dtos import CatalogResponse, MenuItemRequest
from chiya.application.dtos.shop_dtos import AdminPrincipal
from chiya.domain.entities.menu_item_entity import MenuItem
from chiya.domain.repositories.menu_item_repository import MenuItemRepository
from chiya.domain.value_objects.discount import DiscountPercent
from chiya.domain.value_objects.menu_category import MenuCategory
from chiya.domain.value_objects.money import DEFAULT_CURRENCY, Money
from chiya.infrastructure.utilities.exceptions import (
    AuthorizationError,
    ChiyaError,
    MenuItemNotFoundError,
    ValidationError,
)


class CatalogManagementUseCase:
    """Use case for the shop's menu"""

    def __init__(
        self, menu_item_repository: MenuItemRepository, currency: str = DEFAULT_CURRENCY
    ):
        self._menu_item_repository = menu_item_repository
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_menu(self, shop_id: str) -> CatalogResponse:
        """Every item of the shop, including unavailable ones (admin view)"""
        try:
            items = await self._menu_item_repository.list_by_shop(shop_id)
            self._logger.info("📋 MENU LOADED: %d items for shop %s", len(items), shop_id)
            return CatalogResponse(success=True, items=items)
        except ChiyaError as e:
            self._logger.error("💥 MENU LOAD ERROR: %s", e)
            return CatalogResponse(success=False, error_message=e.user_message)

    async def list_available_menu(
        self, shop_id: str, category: Optional[str] = None
    ) -> CatalogResponse:
        """Items customers may order, optionally limited to one category"""
        response = await self.list_menu(shop_id)
        if not response.success:
            return response

        try:
            wanted = MenuCategory.parse(category) if category else None
        except ValueError as e:
            return CatalogResponse(success=False, error_message=str(e))

        items = [
            item
            for item in response.items
            if item.is_available and (wanted is None or item.category == wanted)
        ]
        return CatalogResponse(success=True, items=items)

    async def list_best_sellers(self, shop_id: str) -> CatalogResponse:
        response = await self.list_available_menu(shop_id)
        if response.success:
            response.items = [item for item in response.items if item.is_best_seller]
        return response

    async def list_todays_specials(self, shop_id: str) -> CatalogResponse:
        response = await self.list_available_menu(shop_id)
        if response.success:
            response.items = [item for item in response.items if item.is_todays_special]
        return response

    async def create_item(
        self, principal: AdminPrincipal, request: MenuItemRequest
    ) -> CatalogResponse:
        """Add a menu item to the admin's shop"""
        self._logger.info("➕ CREATE MENU ITEM: %s", request.name)
        try:
            item = self._build_item(None, principal.shop_id, request)
            saved = await self._menu_item_repository.save(item)
            self._logger.info("✅ MENU ITEM CREATED: %s", saved.id)
            return CatalogResponse(success=True, item=saved)
        except ChiyaError as e:
            self._logger.error("💥 CREATE MENU ITEM ERROR: %s", e)
            return CatalogResponse(success=False, error_message=e.user_message)

    async def update_item(
        self, principal: AdminPrincipal, item_id: str, request: MenuItemRequest
    ) -> CatalogResponse:
        """Replace an item's editable fields; past orders keep their snapshots"""
        self._logger.info("✏️ UPDATE MENU ITEM: %s", item_id)
        try:
            existing = await self._get_owned_item(principal, item_id)
            item = self._build_item(item_id, existing.shop_id, request)
            item.created_at = existing.created_at
            saved = await self._menu_item_repository.save(item)
            return CatalogResponse(success=True, item=saved)
        except ChiyaError as e:
            self._logger.error("💥 UPDATE MENU ITEM ERROR: %s", e)
            return CatalogResponse(success=False, error_message=e.user_message)

    async def set_availability(
        self, principal: AdminPrincipal, item_id: str, is_available: bool
    ) -> CatalogResponse:
        """Hide or show an item on the customer menu without deleting it"""
        try:
            item = await self._get_owned_item(principal, item_id)
            item.set_availability(is_available)
            saved = await self._menu_item_repository.save(item)
            self._logger.info(
                "👁️ MENU ITEM %s: %s", "SHOWN" if is_available else "HIDDEN", item_id
            )
            return CatalogResponse(success=True, item=saved)
        except ChiyaError as e:
            self._logger.error("💥 AVAILABILITY ERROR: %s", e)
            return CatalogResponse(success=False, error_message=e.user_message)

    async def delete_item(self, principal: AdminPrincipal, item_id: str) -> CatalogResponse:
        self._logger.info("🗑️ DELETE MENU ITEM: %s", item_id)
        try:
            await self._get_owned_item(principal, item_id)
            if not await self._menu_item_repository.delete(item_id):
                raise MenuItemNotFoundError(item_id)
            return CatalogResponse(success=True)
        except ChiyaError as e:
            self._logger.error("💥 DELETE MENU ITEM ERROR: %s", e)
            return CatalogResponse(success=False, error_message=e.user_message)

    async def _get_owned_item(self, principal: AdminPrincipal, item_id: str) -> MenuItem:
        item = await self._menu_item_repository.find_by_id(item_id)
        if item is None:
            raise MenuItemNotFoundError(item_id)
        if item.shop_id != principal.shop_id:
            raise AuthorizationError(
                f"User {principal.user_id} cannot edit items of shop {item.shop_id}"
            )
        return item

    def _build_item(
        self, item_id: Optional[str], shop_id: str, request: MenuItemRequest
    ) -> MenuItem:
        try:
            return MenuItem(
                id=item_id,
                shop_id=shop_id,
                name=request.name,
                description=request.description or "",
                price=Money.of(request.price, self._currency),
                category=request.category,
                is_available=request.is_available,
                discount=DiscountPercent.optional(request.discount),
                is_best_seller=request.is_best_seller,
                is_todays_special=request.is_todays_special,
                image_url=request.image_url,
            )
        except (ValueError, ArithmeticError) as e:
            raise ValidationError(str(e), "menu_item") from e
