"""
Configuration management for the Chiya ordering platform
"""


import threading

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chiya.infrastructure.utilities.constants import OrderSettings


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Database configuration
    database_url: str = Field(
        default="sqlite:///data/chiya.db", description="Database connection URL"
    )

    # Realtime change feed
    realtime_backend: str = Field(
        default="memory", description="Change feed backend: 'memory' or 'redis'"
    )
    redis_url: str = Field(
        default="redis://localhost:6379", description="Redis URL for the change feed"
    )

    # Application settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str = Field(default="logs", description="Directory for log files")
    environment: str = Field(
        default="development", description="Application environment"
    )
    currency: str = Field(
        default=OrderSettings.DEFAULT_CURRENCY,
        description="Currency code",
        min_length=3,
        max_length=3,
    )
    public_base_url: str = Field(
        default="http://localhost:5173", description="Customer-facing base URL"
    )
    order_list_limit: int = Field(
        default=OrderSettings.DEFAULT_ORDER_LIST_LIMIT,
        description="Maximum orders loaded into the admin list",
        gt=0,
    )

    # Identity provider and blob storage
    identity_url: str = Field(default="", description="Identity provider base URL")
    identity_api_key: str = Field(default="", description="Identity provider API key")
    storage_url: str = Field(default="", description="Blob storage base URL")
    storage_bucket: str = Field(default="shop-logos", description="Logo bucket")

    # Telegram new-order alerts
    telegram_bot_token: str = Field(default="", description="Telegram bot token")
    admin_chat_id: int = Field(default=0, description="Admin chat ID for alerts")

    # Customer table sessions
    table_session_ttl_hours: int = Field(
        default=OrderSettings.TABLE_SESSION_TTL_HOURS,
        description="Hours a table session stays valid",
        gt=0,
    )
    table_session_file: str = Field(
        default=".chiya/session.json", description="Local table session store"
    )

    @property
    def telegram_alerts_enabled(self) -> bool:
        """Both a token and a target chat are needed to send alerts"""
        return bool(self.telegram_bot_token and self.admin_chat_id)


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings (useful for testing)"""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
