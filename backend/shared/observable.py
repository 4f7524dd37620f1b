"""
Observable value holder.

Services publish whole replacement values; consumers subscribe to be told
about each new value. Listeners run synchronously in publish order.
"""

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class Observable(Generic[T]):
    """
    A single published value plus its subscribers.

    Example:
        identity: Observable[Optional[Identity]] = Observable(None)
        unsubscribe = identity.subscribe(lambda value: print(value))
        identity.publish(new_identity)
        unsubscribe()
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Listener[T]] = []

    @property
    def value(self) -> T:
        """The most recently published value."""
        return self._value

    def publish(self, value: T) -> None:
        """Replace the current value and notify every listener."""
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception(f"Listener {listener!r} failed while handling a published value")

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
