"""Menu category value object"""

from enum import Enum


class MenuCategory(str, Enum):
    """Menu sections shown to customers"""

    TEA = "tea"
    SNACKS = "snacks"
    EXTRA = "extra"

    @classmethod
    def parse(cls, value) -> "MenuCategory":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValueError(f"Unknown menu category: {value!r}") from e
