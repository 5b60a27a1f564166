"""
Blob storage interface (shop logos)
"""

from abc import ABC, abstractmethod


class BlobStorage(ABC):
    """Stores files under shop-scoped keys and serves them publicly"""

    @abstractmethod
    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Upload ``content`` under ``key``; returns a stable public URL"""
