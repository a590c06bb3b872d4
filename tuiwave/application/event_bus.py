"""Type-safe publish-subscribe event bus for the application layer."""

from typing import TypeVar, Callable, Type
import logging
from collections import defaultdict

from tuiwave.application.events import Event

T = TypeVar('T', bound=Event)

logger = logging.getLogger(__name__)


class EventBus:
    """Publish-subscribe bus dispatching on the event's class hierarchy.

    A handler subscribed to a base class (e.g. `Event`) receives every
    subclass event as well.
    """

    def __init__(self) -> None:
        self._subscribers: dict[Type[Event], list[Callable[[Event], None]]] = defaultdict(list)

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> Callable[[], None]:
        """Subscribe to events of `event_type`; returns a function that unsubscribes."""
        self._subscribers[event_type].append(handler)  # type: ignore[arg-type]

        def unsubscribe() -> None:
            self.unsubscribe(event_type, handler)
        return unsubscribe

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        handlers = self._subscribers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)  # type: ignore[arg-type]

    def publish(self, event: Event) -> int:
        """Deliver `event` to matching handlers; returns how many were called."""
        delivered = 0
        for event_type in type(event).__mro__:
            for handler in list(self._subscribers.get(event_type, ())):
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Handler error for {type(event).__name__}")
                    if __debug__:
                        raise
                delivered += 1
        return delivered

    def clear(self) -> None:
        """Clear all subscriptions."""
        self._subscribers.clear()
