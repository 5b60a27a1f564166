"""
Application interfaces

Narrow contracts for the external collaborators the use cases consume.
"""

from .alert_sink import OrderAlertSink
from .blob_storage import BlobStorage
from .change_feed import (
    ALL_EVENT_TYPES,
    ChangeEvent,
    ChangeEventType,
    ChangeFeed,
    Subscription,
)
from .identity_provider import (
    ADMIN_ROLE,
    AuthSession,
    IdentityProvider,
    RoleClaim,
)
from .local_storage import LocalStorage

__all__ = [
    "ADMIN_ROLE",
    "ALL_EVENT_TYPES",
    "AuthSession",
    "BlobStorage",
    "ChangeEvent",
    "ChangeEventType",
    "ChangeFeed",
    "IdentityProvider",
    "LocalStorage",
    "OrderAlertSink",
    "RoleClaim",
    "Subscription",
]
