# pylint: disable=too-many-instance-attributes
"""
Shop entity - a single tenant owning its menu, tables and orders
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from chiya.domain.value_objects.shop_slug import ShopSlug


@dataclass
class Shop:
    """Shop domain entity"""

    id: str
    slug: ShopSlug
    name: str
    table_count: int
    description: str = ""
    logo_url: str | None = None
    is_open: bool = True
    sound_alerts: bool = True
    browser_notifications: bool = False
    updated_at: datetime | None = None

    def __post_init__(self):
        if not isinstance(self.slug, ShopSlug):
            self.slug = ShopSlug(self.slug)
        if not self.name or not self.name.strip():
            raise ValueError("Shop name cannot be empty")
        if self.table_count <= 0:
            raise ValueError("A shop needs at least one table")

    @property
    def alerts_enabled(self) -> bool:
        """True when any new-order alert channel is switched on"""
        return self.sound_alerts or self.browser_notifications

    def has_table(self, table_number: int) -> bool:
        return 1 <= table_number <= self.table_count

    def apply_settings(self, **changes) -> None:
        """Update editable settings; unknown keys are rejected"""
        for key, value in changes.items():
            if key not in EDITABLE_SETTINGS:
                raise ValueError(f"Setting cannot be edited: {key}")
            if value is None:
                continue
            if key == "table_count" and value <= 0:
                raise ValueError("A shop needs at least one table")
            if key == "name" and not str(value).strip():
                raise ValueError("Shop name cannot be empty")
            setattr(self, key, value)
        self.updated_at = datetime.now(UTC)


EDITABLE_SETTINGS = frozenset(
    {
        "name",
        "description",
        "table_count",
        "is_open",
        "logo_url",
        "sound_alerts",
        "browser_notifications",
    }
)
