import logging
from typing import Any, Callable, Dict, List

from earshot.orchestrator.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]

class EventRouter:
    """
    Subscription registry owned by one recognition session.
    Handlers run synchronously, in registration order.
    """

    def __init__(self):
        self._handlers: Dict[DomainEvent, List[EventHandler]] = {}

    def subscribe(self, event: DomainEvent, handler: EventHandler):
        self._handlers.setdefault(DomainEvent(event), []).append(handler)

    def unsubscribe(self, event: DomainEvent, handler: EventHandler) -> bool:
        handlers = self._handlers.get(DomainEvent(event), [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def subscribers(self, event: DomainEvent) -> List[EventHandler]:
        return list(self._handlers.get(DomainEvent(event), []))

    def dispatch(self, event: DomainEvent, payload: Any) -> int:
        """Deliver payload to every current subscriber; returns how many were called."""
        event = DomainEvent(event)
        handlers = self.subscribers(event)
        if not handlers:
            logger.debug(f"No subscribers for event {event.value}", extra={"event": event.value})
            return 0

        logger.debug(f"Dispatching event {event.value} to {len(handlers)} subscriber(s)",
                     extra={"event": event.value})
        for handler in handlers:
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Error handling event {event.value}: {e}", exc_info=True,
                             extra={"event": event.value})
        return len(handlers)
