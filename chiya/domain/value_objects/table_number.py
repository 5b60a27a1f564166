"""Table number value object"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TableNumber:
    """Positive table number within a shop"""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Table number must be an integer")
        if self.value <= 0:
            raise ValueError("Table number must be a positive integer")

    @classmethod
    def parse(cls, raw, table_count: int | None = None) -> "TableNumber":
        """
        Parse user input into a table number.

        Accepts ints and numeric strings. When ``table_count`` is given the
        number must also fall within 1..table_count.
        """
        if isinstance(raw, str):
            cleaned = raw.strip()
            if not cleaned.isdigit():
                raise ValueError(f"Table number is not numeric: {raw!r}")
            raw = int(cleaned)
        elif isinstance(raw, float) and raw.is_integer():
            raw = int(raw)

        table = cls(raw)
        if table_count is not None and table.value > table_count:
            raise ValueError(
                f"Table number {table.value} exceeds the shop's {table_count} tables"
            )
        return table

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value
