"""
Application constants for the Chiya ordering platform

Centralizes magic numbers and hard-coded values.
"""

from typing import Final


class OrderSettings:
    """Order lifecycle and customer session settings"""

    DEFAULT_CURRENCY: Final[str] = "NPR"
    TABLE_SESSION_TTL_HOURS: Final[int] = 24
    TABLE_SESSION_STORAGE_KEY: Final[str] = "chiya.table_session"
    DEFAULT_ORDER_LIST_LIMIT: Final[int] = 200


class ChangeFeedSettings:
    """Row-level change notification settings"""

    ORDERS_TABLE: Final[str] = "orders"
    REDIS_CHANNEL_PREFIX: Final[str] = "changes"
    SUBSCRIPTION_QUEUE_SIZE: Final[int] = 0  # unbounded


class DatabaseSettings:
    """Database connection and pool configuration"""

    POOL_RECYCLE_SECONDS: Final[int] = 3600  # 1 hour

    # Production settings
    PRODUCTION_POOL_SIZE: Final[int] = 20
    PRODUCTION_MAX_OVERFLOW: Final[int] = 30

    # Development settings
    DEVELOPMENT_POOL_SIZE: Final[int] = 5
    DEVELOPMENT_MAX_OVERFLOW: Final[int] = 10

    CONNECTION_TIMEOUT_SECONDS: Final[int] = 60


class HttpSettings:
    """Outbound HTTP client settings"""

    REQUEST_TIMEOUT_SECONDS: Final[float] = 10.0


class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10
    JSON_LOG_BACKUP_COUNT: Final[int] = 5


class FileSettings:
    """Log file names"""

    MAIN_LOG_FILE: Final[str] = "chiya.log"
    ERROR_LOG_FILE: Final[str] = "errors.log"
    JSON_LOG_FILE: Final[str] = "chiya.json.log"


class AnalyticsSettings:
    """Dashboard analytics settings"""

    TOP_ITEMS_LIMIT: Final[int] = 5
    DAILY_REVENUE_DAYS: Final[int] = 7
