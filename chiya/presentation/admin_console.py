"""
Admin console

One instance per admin dashboard session. Login resolves the admin's shop
and starts the realtime order mirror; logout tears it down.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from chiya.application.dtos.analytics_dtos import AnalyticsSummary
from chiya.application.dtos.catalog_dtos import CatalogResponse, MenuItemRequest
from chiya.application.dtos.order_dtos import StatusUpdateResponse
from chiya.application.dtos.shop_dtos import (
    AdminPrincipal,
    LoginResponse,
    LogoUploadResponse,
    ShopResponse,
    ShopSettingsUpdate,
)
from chiya.application.interfaces.alert_sink import OrderAlertSink
from chiya.application.interfaces.change_feed import ChangeFeed
from chiya.application.state import Ref
from chiya.application.use_cases.admin_auth_use_case import AdminAuthUseCase
from chiya.application.use_cases.catalog_management_use_case import (
    CatalogManagementUseCase,
)
from chiya.application.use_cases.order_analytics_use_case import OrderAnalyticsUseCase
from chiya.application.use_cases.order_lifecycle_use_case import OrderLifecycleUseCase
from chiya.application.use_cases.order_sync_use_case import (
    AdminOrderList,
    OrderSyncUseCase,
)
from chiya.application.use_cases.shop_settings_use_case import ShopSettingsUseCase
from chiya.domain.entities.order_entity import Order
from chiya.domain.entities.shop_entity import Shop
from chiya.domain.repositories.order_repository import OrderRepository
from chiya.domain.value_objects.money import DEFAULT_CURRENCY
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.utilities.constants import OrderSettings
from chiya.infrastructure.utilities.exceptions import AuthorizationError

NOT_LOGGED_IN = AuthorizationError().user_message


# pylint: disable=too-many-instance-attributes,too-many-public-methods
class AdminConsole:
    """Facade for the admin dashboard"""

    def __init__(
        self,
        auth: AdminAuthUseCase,
        shop_settings: ShopSettingsUseCase,
        catalog: CatalogManagementUseCase,
        analytics: OrderAnalyticsUseCase,
        order_repository: OrderRepository,
        change_feed: ChangeFeed,
        alert_sinks: Sequence[OrderAlertSink] = (),
        order_list_limit: int = OrderSettings.DEFAULT_ORDER_LIST_LIMIT,
        currency: str = DEFAULT_CURRENCY,
    ):
        self._auth = auth
        self._shop_settings = shop_settings
        self._catalog = catalog
        self._analytics = analytics
        self._logger = logging.getLogger(self.__class__.__name__)

        self.shop_ref: Ref[Shop] = Ref()
        self.orders = AdminOrderList()
        self.principal: Optional[AdminPrincipal] = None

        self._lifecycle = OrderLifecycleUseCase(order_repository, self.shop_ref)
        self._sync = OrderSyncUseCase(
            order_repository,
            change_feed,
            self.shop_ref,
            admin_orders=self.orders,
            alert_sinks=alert_sinks,
            order_list_limit=order_list_limit,
            currency=currency,
        )

    @property
    def shop(self) -> Optional[Shop]:
        return self.shop_ref.get()

    @property
    def is_logged_in(self) -> bool:
        return self.principal is not None

    @property
    def sync_error(self):
        return self._sync.last_error

    async def login(self, email: str, password: str) -> LoginResponse:
        response = await self._auth.login(email, password)
        if not response.success:
            return response

        principal = response.principal
        shop_response = await self._shop_settings.get_shop(principal.shop_id)
        if not shop_response.success:
            await self._auth.logout(principal)
            return LoginResponse(success=False, error_message=shop_response.error_message)

        self.principal = principal
        self.shop_ref.set(shop_response.shop)
        sync = await self._sync.start(principal.shop_id)
        if not sync.success:
            self._logger.warning("⚠️ Order sync not started: %s", sync.error_message)
        return response

    async def signup(self, email: str, password: str, redirect_url: str) -> LoginResponse:
        return await self._auth.signup(email, password, redirect_url)

    async def logout(self) -> None:
        await self._sync.stop()
        if self.principal is not None:
            await self._auth.logout(self.principal)
        self.principal = None
        self.shop_ref.set(None)
        self.orders.reset([])

    # Orders

    def filtered_orders(self, status=None) -> List[Order]:
        return self.orders.filter_by_status(status)

    def status_counts(self) -> Dict[OrderStatus, int]:
        return self.orders.counts_by_status()

    async def advance_order(self, order_id: str, target) -> StatusUpdateResponse:
        if self.principal is None:
            return StatusUpdateResponse(success=False, error_message=NOT_LOGGED_IN)
        return await self._lifecycle.advance_status(order_id, target)

    async def cancel_order(self, order_id: str) -> StatusUpdateResponse:
        return await self.advance_order(order_id, OrderStatus.CANCELLED)

    def analytics(self) -> AnalyticsSummary:
        """Dashboard figures over the live order list"""
        return self._analytics.summarize(self.orders.orders)

    # Menu

    async def menu(self) -> CatalogResponse:
        if self.principal is None:
            return CatalogResponse(success=False, error_message=NOT_LOGGED_IN)
        return await self._catalog.list_menu(self.principal.shop_id)

    async def create_menu_item(self, request: MenuItemRequest) -> CatalogResponse:
        if self.principal is None:
            return CatalogResponse(success=False, error_message=NOT_LOGGED_IN)
        return await self._catalog.create_item(self.principal, request)

    async def update_menu_item(
        self, item_id: str, request: MenuItemRequest
    ) -> CatalogResponse:
        if self.principal is None:
            return CatalogResponse(success=False, error_message=NOT_LOGGED_IN)
        return await self._catalog.update_item(self.principal, item_id, request)

    async def set_item_availability(
        self, item_id: str, is_available: bool
    ) -> CatalogResponse:
        if self.principal is None:
            return CatalogResponse(success=False, error_message=NOT_LOGGED_IN)
        return await self._catalog.set_availability(self.principal, item_id, is_available)

    async def delete_menu_item(self, item_id: str) -> CatalogResponse:
        if self.principal is None:
            return CatalogResponse(success=False, error_message=NOT_LOGGED_IN)
        return await self._catalog.delete_item(self.principal, item_id)

    # Settings

    async def update_settings(self, update: ShopSettingsUpdate) -> ShopResponse:
        if self.principal is None:
            return ShopResponse(success=False, error_message=NOT_LOGGED_IN)
        response = await self._shop_settings.update_settings(self.principal, update)
        if response.success:
            self.shop_ref.set(response.shop)
        return response

    async def upload_logo(
        self, filename: str, content: bytes, content_type: str
    ) -> LogoUploadResponse:
        if self.principal is None:
            return LogoUploadResponse(success=False, error_message=NOT_LOGGED_IN)
        response = await self._shop_settings.upload_logo(
            self.principal, filename, content, content_type
        )
        if response.success:
            shop_response = await self._shop_settings.get_shop(self.principal.shop_id)
            if shop_response.success:
                self.shop_ref.set(shop_response.shop)
        return response

    def table_links(self) -> List[Tuple[int, str]]:
        shop = self.shop
        return self._shop_settings.table_links(shop) if shop else []
