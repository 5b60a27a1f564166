"""
Shop and admin session DTOs
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from chiya.domain.entities.shop_entity import Shop


@dataclass
class ShopSettingsUpdate:
    """Editable shop settings; None leaves a field unchanged"""

    name: Optional[str] = None
    description: Optional[str] = None
    table_count: Optional[int] = None
    is_open: Optional[bool] = None
    sound_alerts: Optional[bool] = None
    browser_notifications: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass
class ShopResponse:
    """Response for shop operations"""

    success: bool
    shop: Optional[Shop] = None
    error_message: Optional[str] = None


@dataclass
class LogoUploadResponse:
    """Response for a logo upload"""

    success: bool
    url: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class AdminPrincipal:
    """Authenticated admin and the shop its role claim covers"""

    user_id: str
    email: str
    shop_id: str
    access_token: str


@dataclass
class LoginResponse:
    """Response for admin login"""

    success: bool
    principal: Optional[AdminPrincipal] = None
    error_message: Optional[str] = None
