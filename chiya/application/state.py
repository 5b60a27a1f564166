"""
Reference cells for session state shared between services

Long-lived handlers (the change-feed consumer in particular) read the
current shop and tracked order through a ``Ref`` at the moment they need
them, instead of capturing values when they are created.
"""

from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Ref(Generic[T]):
    """Mutable cell holding the current value of one piece of state"""

    def __init__(self, value: Optional[T] = None):
        self._value = value
        self._listeners: List[Callable[[Optional[T]], None]] = []

    def get(self) -> Optional[T]:
        return self._value

    def set(self, value: Optional[T]) -> None:
        self._value = value
        for listener in list(self._listeners):
            listener(value)

    def watch(self, listener: Callable[[Optional[T]], None]) -> Callable[[], None]:
        """Call ``listener`` on every change; returns an unwatch function"""
        self._listeners.append(listener)

        def unwatch() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unwatch

    def __repr__(self) -> str:
        return f"Ref({self._value!r})"
