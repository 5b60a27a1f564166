"""
Order status value object

One canonical member per workflow state. The in-progress state is
``STARTED``; ``preparing`` is accepted as an alias wherever a label is
parsed, so the two labels can never diverge inside the application.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Order status workflow"""

    PENDING = "pending"
    STARTED = "started"
    READY = "ready"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, label) -> "OrderStatus":
        """Normalize a status label (or member) to its canonical member"""
        if isinstance(label, cls):
            return label
        if not isinstance(label, str):
            raise ValueError(f"Unknown order status: {label!r}")

        cleaned = label.strip().lower()
        cleaned = STATUS_ALIASES.get(cleaned, cleaned)
        try:
            return cls(cleaned)
        except ValueError as e:
            raise ValueError(f"Unknown order status: {label!r}") from e

    @property
    def is_terminal(self) -> bool:
        """Ready and cancelled orders accept no further transitions"""
        return not STATUS_TRANSITIONS[self]

    def allowed_transitions(self) -> frozenset["OrderStatus"]:
        """Statuses reachable from this one"""
        return STATUS_TRANSITIONS[self]

    def can_transition_to(self, target: "OrderStatus") -> bool:
        """Check if a transition is allowed by the workflow"""
        return target in STATUS_TRANSITIONS[self]

    @property
    def label(self) -> str:
        """Human-readable label"""
        return STATUS_LABELS[self]


STATUS_ALIASES = {
    "preparing": "started",
}

STATUS_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.STARTED, OrderStatus.CANCELLED}),
    OrderStatus.STARTED: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset(),  # Terminal state
    OrderStatus.CANCELLED: frozenset(),  # Terminal state
}

STATUS_LABELS = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.STARTED: "Preparing",
    OrderStatus.READY: "Ready",
    OrderStatus.CANCELLED: "Cancelled",
}
