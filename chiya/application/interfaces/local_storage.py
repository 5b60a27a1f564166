"""
Device-local key/value storage interface
"""

from abc import ABC, abstractmethod
from typing import Optional


class LocalStorage(ABC):
    """Durable storage on the customer's device; never shared"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string or None"""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a string value"""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a value; no-op when absent"""
