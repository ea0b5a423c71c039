import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E")


class Observable(Generic[E]):
    """Minimal subscribe/notify used for identity, role and session changes."""

    def __init__(self):
        self._listeners: list[Callable[..., None]] = []

    def subscribe(self, listener: Callable[..., None]) -> Callable[[], None]:
        """Register a listener; returns the unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, *event: E) -> None:
        logger.debug(
            "%s changed, notifying %d listeners",
            type(self).__name__,
            len(self._listeners),
        )
        # copy: a listener may unsubscribe while being called
        for listener in list(self._listeners):
            listener(*event)
