"""
HTTP blob storage for shop logos
"""

import logging
from typing import Optional

import httpx

from chiya.application.interfaces.blob_storage import BlobStorage
from chiya.infrastructure.utilities.constants import HttpSettings
from chiya.infrastructure.utilities.exceptions import ExternalServiceError


class HttpBlobStorage(BlobStorage):
    """Uploads objects to a storage bucket and returns their public URL"""

    def __init__(
        self,
        base_url: str,
        bucket: str,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not base_url:
            raise ValueError("Storage URL is required")
        self._base_url = base_url.rstrip("/")
        self._bucket = bucket
        self._api_key = api_key
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    def public_url(self, key: str) -> str:
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{key}"

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        url = f"{self._base_url}/storage/v1/object/{self._bucket}/{key}"
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": content_type,
            "x-upsert": "true",
        }
        self._logger.info("📤 UPLOAD: %s (%d bytes)", key, len(content))
        try:
            if self._client is not None:
                response = await self._client.post(url, content=content, headers=headers)
            else:
                async with httpx.AsyncClient(
                    timeout=HttpSettings.REQUEST_TIMEOUT_SECONDS
                ) as client:
                    response = await client.post(url, content=content, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("💥 UPLOAD FAILED: %s: %s", key, e)
            raise ExternalServiceError(f"Upload of {key} failed: {e}", "storage") from e
        return self.public_url(key)
