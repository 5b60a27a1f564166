"""
Customer ordering flow

One instance per customer browsing session: resolves the shop from the
entry URL, owns the cart, binds the table session, places the order and
keeps the tracked order current through the change feed.
"""

import logging
from typing import Callable, Optional, Union

from chiya.application.dtos.catalog_dtos import CatalogResponse
from chiya.application.dtos.order_dtos import OrderCreationResponse
from chiya.application.dtos.shop_dtos import ShopResponse
from chiya.application.interfaces.change_feed import ChangeFeed
from chiya.application.state import Ref
from chiya.application.use_cases.catalog_management_use_case import (
    CatalogManagementUseCase,
)
from chiya.application.use_cases.order_lifecycle_use_case import OrderLifecycleUseCase
from chiya.application.use_cases.order_sync_use_case import OrderSyncUseCase
from chiya.application.use_cases.shop_settings_use_case import ShopSettingsUseCase
from chiya.application.use_cases.table_session_use_case import TableSessionGuard
from chiya.domain.entities.cart_entity import Cart
from chiya.domain.entities.menu_item_entity import MenuItem
from chiya.domain.entities.order_entity import Order
from chiya.domain.entities.shop_entity import Shop
from chiya.domain.repositories.order_repository import OrderRepository
from chiya.domain.value_objects.money import DEFAULT_CURRENCY, Money
from chiya.domain.value_objects.table_number import TableNumber
from chiya.infrastructure.utilities.helpers import parse_entry_url


class CustomerOrderingFlow:
    """Facade for the customer menu page"""

    def __init__(
        self,
        shop_settings: ShopSettingsUseCase,
        catalog: CatalogManagementUseCase,
        order_repository: OrderRepository,
        change_feed: ChangeFeed,
        session_guard: TableSessionGuard,
        currency: str = DEFAULT_CURRENCY,
    ):
        self._shop_settings = shop_settings
        self._catalog = catalog
        self._session_guard = session_guard
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

        self.shop_ref: Ref[Shop] = Ref()
        self.tracked_order_ref: Ref[Order] = Ref()
        self.cart = Cart(currency)
        self._table_hint: Optional[str] = None

        self._lifecycle = OrderLifecycleUseCase(
            order_repository, self.shop_ref, self.tracked_order_ref
        )
        self._sync = OrderSyncUseCase(
            order_repository,
            change_feed,
            self.shop_ref,
            tracked_order_ref=self.tracked_order_ref,
            currency=currency,
        )

    @property
    def shop(self) -> Optional[Shop]:
        return self.shop_ref.get()

    @property
    def current_order(self) -> Optional[Order]:
        return self.tracked_order_ref.get()

    @property
    def sync_error(self):
        """Error that stopped live order updates, if any"""
        return self._sync.last_error

    @property
    def table_number(self) -> Optional[Union[int, str]]:
        """Table from the entry URL, else from a live session for this shop"""
        if self._table_hint:
            return self._table_hint
        session = self._session_guard.get()
        shop = self.shop
        if session and shop and session.shop_id == shop.id:
            return session.table_number
        return None

    async def open(self, slug: str, table: Optional[str] = None) -> ShopResponse:
        """Resolve the shop and start following this customer's order"""
        response = await self._shop_settings.load_shop_by_slug(slug)
        if not response.success:
            return response

        shop = response.shop
        previous = self.shop
        if previous is None or previous.id != shop.id:
            self.cart = Cart(self._currency)
            self.tracked_order_ref.set(None)
        self.shop_ref.set(shop)
        self._table_hint = str(table) if table not in (None, "") else None

        await self._sync.switch_shop(shop.id)
        self._logger.info("🏪 MENU OPENED: %s table %s", shop.slug, self._table_hint)
        return response

    async def open_url(self, url: str) -> ShopResponse:
        slug, table = parse_entry_url(url)
        if not slug:
            return ShopResponse(success=False, error_message="This shop could not be found.")
        return await self.open(slug, table)

    async def menu(self, category: Optional[str] = None) -> CatalogResponse:
        shop = self.shop
        if shop is None:
            return CatalogResponse(success=False, error_message="No shop selected.")
        return await self._catalog.list_available_menu(shop.id, category)

    def add_to_cart(self, item: MenuItem) -> None:
        self.cart.add(item)
        self._bind_table_session()

    def remove_from_cart(self, item_id: str) -> None:
        self.cart.remove(item_id)

    def update_quantity(self, item_id: str, quantity: int) -> None:
        self.cart.set_quantity(item_id, quantity)

    def clear_cart(self) -> None:
        self.cart.clear()

    def cart_total(self) -> Money:
        return self.cart.total()

    async def checkout(
        self, table_number: Optional[Union[int, str]] = None
    ) -> OrderCreationResponse:
        table = table_number if table_number is not None else self.table_number
        response = await self._lifecycle.create_order(table, self.cart)
        if response.success:
            if table_number is not None:
                self._table_hint = str(table_number)
            self._bind_table_session()
        return response

    def on_order_change(
        self, listener: Callable[[Optional[Order]], None]
    ) -> Callable[[], None]:
        """Call ``listener`` whenever the tracked order changes"""
        return self.tracked_order_ref.watch(listener)

    async def close(self) -> None:
        await self._sync.stop()

    def _bind_table_session(self) -> None:
        shop = self.shop
        if shop is None or not self._table_hint:
            return
        try:
            table = TableNumber.parse(self._table_hint, shop.table_count)
        except ValueError:
            return
        session = self._session_guard.get()
        if session and session.shop_id == shop.id and session.table_number == table.value:
            return
        self._session_guard.set(table.value, shop.id, shop.slug.value)
