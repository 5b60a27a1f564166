"""
Shop Settings Use Case

Customer-side shop resolution by slug, and admin-side settings, logo
upload and per-table entry links.
"""

import logging
import os
from datetime import UTC, datetime
from typing import Callable, List, Tuple

from chiya.application.dtos.shop_dtos import (
    AdminPrincipal,
    LogoUploadResponse,
    ShopResponse,
    ShopSettingsUpdate,
)
from chiya.application.interfaces.blob_storage import BlobStorage
from chiya.domain.entities.shop_entity import Shop
from chiya.domain.repositories.shop_repository import ShopRepository
from chiya.domain.value_objects.shop_slug import ShopSlug
from chiya.infrastructure.utilities.exceptions import (
    ChiyaError,
    ShopNotFoundError,
    ValidationError,
)
from chiya.infrastructure.utilities.helpers import build_table_url

ALLOWED_LOGO_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "svg"})


class ShopSettingsUseCase:
    """Use case for shop lookup and configuration"""

    def __init__(
        self,
        shop_repository: ShopRepository,
        blob_storage: BlobStorage | None = None,
        public_base_url: str = "",
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self._shop_repository = shop_repository
        self._blob_storage = blob_storage
        self._public_base_url = public_base_url
        self._clock = clock
        self._logger = logging.getLogger(self.__class__.__name__)

    async def load_shop_by_slug(self, slug: str) -> ShopResponse:
        """Customer entry point: resolve the shop named in the URL"""
        self._logger.info("🏪 LOAD SHOP: %s", slug)
        try:
            try:
                normalized = ShopSlug(slug).value
            except ValueError as e:
                raise ShopNotFoundError(str(slug)) from e

            shop = await self._shop_repository.find_by_slug(normalized)
            if shop is None:
                raise ShopNotFoundError(normalized)
            return ShopResponse(success=True, shop=shop)
        except ChiyaError as e:
            self._logger.warning("💥 LOAD SHOP ERROR: %s", e)
            return ShopResponse(success=False, error_message=e.user_message)

    async def get_shop(self, shop_id: str) -> ShopResponse:
        try:
            shop = await self._shop_repository.find_by_id(shop_id)
            if shop is None:
                raise ShopNotFoundError(shop_id)
            return ShopResponse(success=True, shop=shop)
        except ChiyaError as e:
            self._logger.error("💥 GET SHOP ERROR: %s", e)
            return ShopResponse(success=False, error_message=e.user_message)

    async def update_settings(
        self, principal: AdminPrincipal, update: ShopSettingsUpdate
    ) -> ShopResponse:
        """Apply the non-empty fields of ``update`` to the admin's shop"""
        self._logger.info("⚙️ UPDATE SETTINGS: shop %s", principal.shop_id)
        try:
            shop = await self._owned_shop(principal)
            try:
                shop.apply_settings(**update.changes())
            except (ValueError, TypeError) as e:
                raise ValidationError(str(e), "settings") from e
            saved = await self._shop_repository.save(shop)
            self._logger.info("✅ SETTINGS SAVED: %s", sorted(update.changes()))
            return ShopResponse(success=True, shop=saved)
        except ChiyaError as e:
            self._logger.error("💥 UPDATE SETTINGS ERROR: %s", e)
            return ShopResponse(success=False, error_message=e.user_message)

    async def upload_logo(
        self,
        principal: AdminPrincipal,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> LogoUploadResponse:
        """Store a logo under a shop-scoped key and save its public URL"""
        self._logger.info("🖼️ UPLOAD LOGO: %s for shop %s", filename, principal.shop_id)
        try:
            if self._blob_storage is None:
                raise ValidationError("Logo uploads are not configured.", "logo")
            if not content:
                raise ValidationError("The logo file is empty.", "logo")

            extension = os.path.splitext(filename)[1].lstrip(".").lower()
            if extension not in ALLOWED_LOGO_EXTENSIONS:
                raise ValidationError("Please upload an image file.", "logo")

            shop = await self._owned_shop(principal)
            key = self.logo_key(shop.id, extension)
            url = await self._blob_storage.upload(key, content, content_type)

            shop.apply_settings(logo_url=url)
            await self._shop_repository.save(shop)
            self._logger.info("✅ LOGO UPLOADED: %s", url)
            return LogoUploadResponse(success=True, url=url)
        except ChiyaError as e:
            self._logger.error("💥 LOGO UPLOAD ERROR: %s", e)
            return LogoUploadResponse(success=False, error_message=e.user_message)

    def logo_key(self, shop_id: str, extension: str) -> str:
        timestamp = int(self._clock().timestamp() * 1000)
        return f"{shop_id}/logo-{timestamp}.{extension}"

    def table_links(self, shop: Shop) -> List[Tuple[int, str]]:
        """(table number, customer entry URL) for every table of the shop"""
        return [
            (table, build_table_url(self._public_base_url, shop.slug.value, table))
            for table in range(1, shop.table_count + 1)
        ]

    async def _owned_shop(self, principal: AdminPrincipal) -> Shop:
        shop = await self._shop_repository.find_by_id(principal.shop_id)
        if shop is None:
            raise ShopNotFoundError(principal.shop_id)
        return shop
