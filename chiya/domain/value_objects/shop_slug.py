"""Shop slug value object"""

import re
from dataclasses import dataclass

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


@dataclass(frozen=True)
class ShopSlug:
    """Stable customer-facing routing key for a shop"""

    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Shop slug cannot be empty")

        cleaned = self.value.strip().lower()
        if len(cleaned) > 64:
            raise ValueError("Shop slug cannot exceed 64 characters")
        if not SLUG_PATTERN.match(cleaned):
            raise ValueError(
                "Shop slug may only contain letters, digits and single hyphens"
            )

        object.__setattr__(self, "value", cleaned)

    def __str__(self) -> str:
        return self.value
