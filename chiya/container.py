"""
Dependency Injection Container

Builds the shared infrastructure once from configuration and hands out
per-session facades for customers and admins.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from telegram import Bot

from chiya.application.interfaces.alert_sink import OrderAlertSink
from chiya.application.interfaces.blob_storage import BlobStorage
from chiya.application.interfaces.change_feed import ChangeFeed
from chiya.application.interfaces.identity_provider import IdentityProvider
from chiya.application.interfaces.local_storage import LocalStorage
from chiya.application.use_cases.admin_auth_use_case import AdminAuthUseCase
from chiya.application.use_cases.catalog_management_use_case import (
    CatalogManagementUseCase,
)
from chiya.application.use_cases.order_analytics_use_case import OrderAnalyticsUseCase
from chiya.application.use_cases.shop_settings_use_case import ShopSettingsUseCase
from chiya.application.use_cases.table_session_use_case import TableSessionGuard
from chiya.domain.repositories.menu_item_repository import MenuItemRepository
from chiya.domain.repositories.order_repository import OrderRepository
from chiya.domain.repositories.shop_repository import ShopRepository
from chiya.infrastructure.configuration.config import Settings, get_config
from chiya.infrastructure.database.operations import DatabaseManager
from chiya.infrastructure.realtime.memory_feed import InMemoryChangeFeed
from chiya.infrastructure.realtime.redis_feed import RedisChangeFeed
from chiya.infrastructure.repositories.sqlalchemy_menu_item_repository import (
    SQLAlchemyMenuItemRepository,
)
from chiya.infrastructure.repositories.sqlalchemy_order_repository import (
    SQLAlchemyOrderRepository,
)
from chiya.infrastructure.repositories.sqlalchemy_shop_repository import (
    SQLAlchemyShopRepository,
)
from chiya.infrastructure.services.alert_sinks import LoggingAlertSink, TelegramAlertSink
from chiya.infrastructure.services.http_blob_storage import HttpBlobStorage
from chiya.infrastructure.services.http_identity_provider import HttpIdentityProvider
from chiya.infrastructure.storage.local_storage import JsonFileStorage
from chiya.presentation.admin_console import AdminConsole
from chiya.presentation.customer_flow import CustomerOrderingFlow

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container

    Manages the instantiation and lifecycle of:
    - Database manager and repositories
    - Change feed, identity, storage and alert services
    - Use cases shared by every session
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        bot: Optional[Bot] = None,
        db_manager: Optional[DatabaseManager] = None,
        change_feed: Optional[ChangeFeed] = None,
        identity_provider: Optional[IdentityProvider] = None,
        blob_storage: Optional[BlobStorage] = None,
    ):
        self._config = config or get_config()
        self._bot = bot
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

        self._instances["db_manager"] = db_manager or DatabaseManager(self._config)
        self._instances["change_feed"] = change_feed or self._create_change_feed()
        self._instances["identity_provider"] = identity_provider
        self._instances["blob_storage"] = blob_storage
        self._setup_dependencies()

    def _setup_dependencies(self):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")
        self._register_repositories()
        self._register_services()
        self._register_use_cases()
        self._logger.info("Dependency injection container setup complete")

    def _create_change_feed(self) -> ChangeFeed:
        backend = self._config.realtime_backend.lower()
        if backend == "redis":
            self._logger.info("📡 Change feed: redis at %s", self._config.redis_url)
            return RedisChangeFeed(self._config.redis_url)
        if backend != "memory":
            raise ValueError(f"Unknown realtime backend: {self._config.realtime_backend}")
        self._logger.info("📡 Change feed: in-memory")
        return InMemoryChangeFeed()

    def _register_repositories(self):
        """Register repository implementations"""
        db_manager = self.get_db_manager()
        currency = self._config.currency
        self._instances["shop_repository"] = SQLAlchemyShopRepository(db_manager)
        self._instances["menu_item_repository"] = SQLAlchemyMenuItemRepository(
            db_manager, currency=currency
        )
        self._instances["order_repository"] = SQLAlchemyOrderRepository(
            db_manager, change_feed=self.get_change_feed(), currency=currency
        )
        self._logger.debug("Repositories registered successfully")

    def _register_services(self):
        """Register service implementations"""
        config = self._config

        if self._instances["identity_provider"] is None and config.identity_url:
            self._instances["identity_provider"] = HttpIdentityProvider(
                config.identity_url, config.identity_api_key
            )
        if self._instances["blob_storage"] is None and config.storage_url:
            self._instances["blob_storage"] = HttpBlobStorage(
                config.storage_url, config.storage_bucket, config.identity_api_key
            )

        sinks: List[OrderAlertSink] = [LoggingAlertSink()]
        if self._bot is None and config.telegram_alerts_enabled:
            self._bot = Bot(token=config.telegram_bot_token)
        if self._bot is not None and config.admin_chat_id:
            sinks.append(TelegramAlertSink(self._bot, config.admin_chat_id))
        else:
            self._logger.warning("Telegram alerts not configured")
        self._instances["alert_sinks"] = sinks

        self._logger.debug("Services registered successfully")

    def _register_use_cases(self):
        """Register use cases shared across sessions"""
        config = self._config
        self._instances["shop_settings_use_case"] = ShopSettingsUseCase(
            shop_repository=self.get_shop_repository(),
            blob_storage=self.get_blob_storage(),
            public_base_url=config.public_base_url,
        )
        self._instances["catalog_use_case"] = CatalogManagementUseCase(
            menu_item_repository=self.get_menu_item_repository(),
            currency=config.currency,
        )
        self._instances["order_analytics_use_case"] = OrderAnalyticsUseCase(
            order_repository=self.get_order_repository(), currency=config.currency
        )
        identity_provider = self.get_identity_provider()
        if identity_provider is not None:
            self._instances["admin_auth_use_case"] = AdminAuthUseCase(identity_provider)
        else:
            self._logger.warning("Identity provider not configured, admin login disabled")
        self._logger.debug("Use cases registered successfully")

    # Per-session facades
    def create_customer_flow(
        self, storage: Optional[LocalStorage] = None
    ) -> CustomerOrderingFlow:
        """New customer session; the table session lives in ``storage``"""
        storage = storage or JsonFileStorage(self._config.table_session_file)
        guard = TableSessionGuard(
            storage, ttl=timedelta(hours=self._config.table_session_ttl_hours)
        )
        return CustomerOrderingFlow(
            shop_settings=self.get_shop_settings_use_case(),
            catalog=self.get_catalog_use_case(),
            order_repository=self.get_order_repository(),
            change_feed=self.get_change_feed(),
            session_guard=guard,
            currency=self._config.currency,
        )

    def create_admin_console(self) -> AdminConsole:
        """New admin dashboard session"""
        auth = self.get_admin_auth_use_case()
        if auth is None:
            raise ValueError("Admin console needs an identity provider (IDENTITY_URL)")
        return AdminConsole(
            auth=auth,
            shop_settings=self.get_shop_settings_use_case(),
            catalog=self.get_catalog_use_case(),
            analytics=self.get_order_analytics_use_case(),
            order_repository=self.get_order_repository(),
            change_feed=self.get_change_feed(),
            alert_sinks=self.get_alert_sinks(),
            order_list_limit=self._config.order_list_limit,
            currency=self._config.currency,
        )

    # Infrastructure getters
    def get_config(self) -> Settings:
        return self._config

    def get_db_manager(self) -> DatabaseManager:
        return self._instances["db_manager"]

    def get_change_feed(self) -> ChangeFeed:
        return self._instances["change_feed"]

    def get_identity_provider(self) -> Optional[IdentityProvider]:
        return self._instances.get("identity_provider")

    def get_blob_storage(self) -> Optional[BlobStorage]:
        return self._instances.get("blob_storage")

    def get_alert_sinks(self) -> List[OrderAlertSink]:
        return self._instances["alert_sinks"]

    # Repository getters
    def get_shop_repository(self) -> ShopRepository:
        return self._instances["shop_repository"]

    def get_menu_item_repository(self) -> MenuItemRepository:
        return self._instances["menu_item_repository"]

    def get_order_repository(self) -> OrderRepository:
        return self._instances["order_repository"]

    # Use Case getters
    def get_shop_settings_use_case(self) -> ShopSettingsUseCase:
        return self._instances["shop_settings_use_case"]

    def get_catalog_use_case(self) -> CatalogManagementUseCase:
        return self._instances["catalog_use_case"]

    def get_order_analytics_use_case(self) -> OrderAnalyticsUseCase:
        return self._instances["order_analytics_use_case"]

    def get_admin_auth_use_case(self) -> Optional[AdminAuthUseCase]:
        return self._instances.get("admin_auth_use_case")

    async def cleanup(self):
        """Release the change feed and database connections"""
        self._logger.info("Cleaning up dependency container...")
        await self.get_change_feed().close()
        self.get_db_manager().close()
        self._instances.clear()


_container: Optional[DependencyContainer] = None


def get_container() -> DependencyContainer:
    """Get the global dependency container instance"""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def initialize_container(**kwargs) -> DependencyContainer:
    """Replace the global container, e.g. with a bot or test doubles"""
    global _container
    _container = DependencyContainer(**kwargs)
    return _container


def reset_container():
    """Reset the global container (useful for testing)"""
    global _container
    _container = None
